from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.services.token_service import TokenService, parse_duration
from src.domain.entities import RefreshToken, User, UserStatus
from tests.fakes import FrozenClock, make_config


@pytest.mark.parametrize(
    "value,expected",
    [
        ("30s", 30),
        ("15m", 900),
        ("2h", 7200),
        ("7d", 604800),
        ("15", 900),
        ("abc", 900),
        ("", 900),
        ("5w", 900),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


def _user():
    return User(
        id=uuid4(),
        email="user@example.com",
        phone="+911234567890",
        username="user1",
        status=UserStatus.active,
    )


def _stored_token(user_id, clock, **kwargs):
    values = dict(
        id=uuid4(),
        token="a" * 80,
        user_id=user_id,
        device_id="device-1",
        device_type="ios",
        is_revoked=False,
        expires_at=clock.now() + timedelta(days=7),
    )
    values.update(kwargs)
    return RefreshToken(**values)


def test_access_token_round_trip_carries_session_id(mock_uow, config, clock):
    service = TokenService(mock_uow, config, clock)
    user = _user()
    session_id = uuid4()

    claims = service.decode_access_token(service.create_access_token(user, session_id))

    assert claims["sub"] == str(user.id)
    assert claims["email"] == user.email
    assert claims["username"] == "user1"
    assert claims["phone"] == "+911234567890"
    assert claims["sid"] == str(session_id)
    assert claims["iss"] == config.JWT_ISSUER
    assert claims["aud"] == config.JWT_AUDIENCE


def test_decode_rejects_foreign_audience_and_signature(mock_uow, config, clock):
    token = TokenService(mock_uow, config, clock).create_access_token(_user())

    other_audience = make_config(JWT_AUDIENCE="someone-else")
    other_secret = make_config(JWT_SECRET="another-secret")

    assert TokenService(mock_uow, other_audience, clock).decode_access_token(token) is None
    assert TokenService(mock_uow, other_secret, clock).decode_access_token(token) is None
    assert TokenService(mock_uow, config, clock).decode_access_token("not-a-jwt") is None


def test_decode_rejects_expired_token(mock_uow, config):
    issued_long_ago = FrozenClock()
    issued_long_ago.advance(-3600)
    token = TokenService(mock_uow, config, issued_long_ago).create_access_token(_user())

    assert TokenService(mock_uow, config).decode_access_token(token) is None


@pytest.mark.asyncio
async def test_generate_tokens_persists_refresh_token(mock_uow, config, clock):
    service = TokenService(mock_uow, config, clock)
    user = _user()

    pair = await service.generate_tokens(user, "device-1", "ios")

    created = mock_uow.refresh_tokens.create.call_args.args[0]
    assert pair.refresh_token == created.token
    assert pair.refresh_token_id == created.id
    assert len(created.token) == 80
    assert created.is_revoked is False
    assert created.expires_at == clock.now() + timedelta(days=7)
    assert pair.expires_in == 900
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_rotation_revokes_presented_token_and_links_successor(mock_uow, config, clock):
    user = _user()
    stored = _stored_token(user.id, clock)
    mock_uow.refresh_tokens.get_by_token.return_value = stored
    mock_uow.users.get_by_id.return_value = user
    mock_uow.refresh_tokens.revoke.return_value = True

    pair = await TokenService(mock_uow, config, clock).refresh_access_token(stored.token)

    assert pair is not None
    successor = mock_uow.refresh_tokens.create.call_args.args[0]
    assert pair.refresh_token == successor.token
    assert pair.refresh_token != stored.token
    assert successor.device_id == "device-1"
    mock_uow.refresh_tokens.revoke.assert_called_once_with(stored.id, replaced_by=successor.id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_rotation_fails_closed_when_token_already_revoked_concurrently(
    mock_uow, config, clock
):
    user = _user()
    stored = _stored_token(user.id, clock)
    mock_uow.refresh_tokens.get_by_token.return_value = stored
    mock_uow.users.get_by_id.return_value = user
    mock_uow.refresh_tokens.revoke.return_value = False

    pair = await TokenService(mock_uow, config, clock).refresh_access_token(stored.token)

    assert pair is None
    mock_uow.rollback.assert_called_once()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("revoked,expires_in_days", [(True, 7), (False, -1)])
async def test_unusable_refresh_token_is_rejected(
    mock_uow, config, clock, revoked, expires_in_days
):
    stored = _stored_token(
        uuid4(),
        clock,
        is_revoked=revoked,
        expires_at=clock.now() + timedelta(days=expires_in_days),
    )
    mock_uow.refresh_tokens.get_by_token.return_value = stored

    pair = await TokenService(mock_uow, config, clock).refresh_access_token(stored.token)

    assert pair is None
    mock_uow.refresh_tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_refresh_without_rotation_keeps_token(mock_uow, clock):
    config = make_config(JWT_REFRESH_ROTATION=False)
    user = _user()
    stored = _stored_token(user.id, clock)
    mock_uow.refresh_tokens.get_by_token.return_value = stored
    mock_uow.users.get_by_id.return_value = user

    pair = await TokenService(mock_uow, config, clock).refresh_access_token(stored.token)

    assert pair.refresh_token == stored.token
    assert pair.refresh_token_id == stored.id
    mock_uow.refresh_tokens.revoke.assert_not_called()
