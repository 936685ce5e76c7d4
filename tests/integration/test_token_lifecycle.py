"""
Token, session and role behaviour against the real SQL repositories.
"""

from datetime import timedelta
from uuid import UUID

import pytest

from src.app.services.session_service import SessionCreateData, SessionService
from src.app.services.token_service import TokenService
from src.app.use_cases.auth import (
    ClientContext,
    LoginCommand,
    LoginUseCase,
    LogoutAllUseCase,
    RefreshTokenUseCase,
)
from src.app.use_cases.maintenance.cleanup_expired_use_case import CleanupExpiredUseCase
from src.app.use_cases.roles import SeedRolesUseCase
from src.app.utils.passwords import hash_password
from src.domain.entities import User, UserStatus
from tests.fakes import FrozenClock
from tests.integration.flows import PASSWORD


async def create_user(uow, email: str):
    async with uow:
        user = await uow.users.create(
            User(email=email, password_hash=hash_password(PASSWORD), status=UserStatus.active)
        )
        user_id = user.id
        await uow.commit()
    return user_id


async def login(uow, config, clock, email: str, device_id: str):
    command = LoginCommand(
        email=email, password=PASSWORD, context=ClientContext(device_id=device_id)
    )
    result = await LoginUseCase(uow, config, clock).execute(command)
    assert result.is_ok(), result.error
    return result.value


@pytest.mark.asyncio
async def test_rotation_links_the_successor(uow, seeded, config, clock):
    await create_user(uow, "chain@example.com")
    tokens = await login(uow, config, clock, "chain@example.com", "d1")

    rotated = await RefreshTokenUseCase(uow, config, clock).execute(tokens.refresh_token)
    assert rotated.is_ok()

    async with uow:
        old = await uow.refresh_tokens.get_by_token(tokens.refresh_token)
        new = await uow.refresh_tokens.get_by_token(rotated.value.refresh_token)
        assert old.is_revoked is True
        assert old.replaced_by_token == new.id
        assert new.is_revoked is False
        assert new.device_id == "d1"

        user_session = await uow.user_sessions.get_by_refresh_token_id(new.id)
        assert str(user_session.id) == tokens.session_id

    replay = await RefreshTokenUseCase(uow, config, clock).execute(tokens.refresh_token)
    assert replay.is_err()
    assert replay.error.code == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_refresh_without_rotation_returns_same_token(uow, seeded, clock):
    from tests.fakes import make_config

    config = make_config(JWT_REFRESH_ROTATION=False)
    await create_user(uow, "static@example.com")
    tokens = await login(uow, config, clock, "static@example.com", "d1")

    result = await RefreshTokenUseCase(uow, config, clock).execute(tokens.refresh_token)

    assert result.is_ok()
    assert result.value.refresh_token == tokens.refresh_token


@pytest.mark.asyncio
async def test_expired_refresh_token_is_rejected(uow, seeded, config, clock):
    await create_user(uow, "old@example.com")
    tokens = await login(uow, config, clock, "old@example.com", "d1")

    clock.advance(7 * 24 * 60 * 60 + 1)
    result = await RefreshTokenUseCase(uow, config, clock).execute(tokens.refresh_token)

    assert result.is_err()


@pytest.mark.asyncio
async def test_logout_all_from_one_of_three_devices(uow, seeded, config, clock):
    user_id = await create_user(uow, "three@example.com")
    first = await login(uow, config, clock, "three@example.com", "d1")
    second = await login(uow, config, clock, "three@example.com", "d2")
    third = await login(uow, config, clock, "three@example.com", "d3")

    result = await LogoutAllUseCase(uow, config, clock).execute(user_id, second.refresh_token)

    assert result.is_ok()
    assert result.value.sessions_terminated == 2
    assert result.value.tokens_revoked == 2

    async with uow:
        for tokens, usable in ((first, False), (second, True), (third, False)):
            stored = await uow.refresh_tokens.get_by_token(tokens.refresh_token)
            assert stored.is_revoked is not usable
        active = await uow.user_sessions.get_active_by_user_id(user_id, clock.now())
        assert [str(s.id) for s in active] == [second.session_id]


@pytest.mark.asyncio
async def test_cleanup_is_idempotent(uow, seeded, config, clock):
    await create_user(uow, "sweep@example.com")
    await login(uow, config, clock, "sweep@example.com", "d1")
    await login(uow, config, clock, "sweep@example.com", "d2")

    clock.advance(8 * 24 * 60 * 60)
    first = await CleanupExpiredUseCase(uow, config, clock).execute()
    second = await CleanupExpiredUseCase(uow, config, clock).execute()

    assert first.value == {"sessions": 2, "refresh_tokens": 2}
    assert second.value == {"sessions": 0, "refresh_tokens": 0}


@pytest.mark.asyncio
async def test_seed_roles_is_idempotent(uow, seeded):
    result = await SeedRolesUseCase(uow).execute()

    assert result.is_ok()
    assert result.value.permissions_created == 0
    assert result.value.roles_created == 0
    async with uow:
        assert len(await uow.roles.list_all()) == 2


@pytest.mark.asyncio
async def test_late_activity_never_moves_last_active_backward(uow, seeded, config, clock):
    await create_user(uow, "touch@example.com")
    tokens = await login(uow, config, clock, "touch@example.com", "d1")
    session_id = UUID(tokens.session_id)

    clock.advance(60)
    latest = clock.now()
    async with uow:
        assert await SessionService(uow, clock).update_session_activity(session_id) is not None

    stale_clock = FrozenClock(latest - timedelta(seconds=50))
    async with uow:
        stale = await SessionService(uow, stale_clock).update_session_activity(session_id)
        assert stale is None

    async with uow:
        user_session = await uow.user_sessions.get_by_id(session_id)
        assert user_session.last_active_at == latest


@pytest.mark.asyncio
async def test_active_sessions_skip_expired_rows_and_sort_by_activity(uow, seeded, clock):
    user_id = await create_user(uow, "order@example.com")
    start = clock.now()

    async with uow:
        sessions = SessionService(uow, clock)
        older = await sessions.create_session(
            SessionCreateData(user_id=user_id, expires_at=start + timedelta(hours=1))
        )
        older_id = older.id
        lapsed = await sessions.create_session(
            SessionCreateData(user_id=user_id, expires_at=start + timedelta(seconds=10))
        )
        lapsed_id = lapsed.id
        clock.advance(5)
        newer = await sessions.create_session(
            SessionCreateData(user_id=user_id, expires_at=start + timedelta(hours=1))
        )
        newer_id = newer.id

    clock.advance(15)
    async with uow:
        await SessionService(uow, clock).update_session_activity(older_id)

    clock.advance(40)
    async with uow:
        active = await SessionService(uow, clock).get_active_sessions(user_id)
        assert [s.id for s in active] == [older_id, newer_id]

        expired_row = await uow.user_sessions.get_by_id(lapsed_id)
        assert expired_row.is_active is True


@pytest.mark.asyncio
async def test_revoking_refresh_tokens_leaves_sessions_active(uow, seeded, config, clock):
    user_id = await create_user(uow, "keep@example.com")
    first = await login(uow, config, clock, "keep@example.com", "d1")
    second = await login(uow, config, clock, "keep@example.com", "d2")

    async with uow:
        tokens = TokenService(uow, config, clock)
        assert await tokens.revoke_refresh_token(first.refresh_token) is True
        assert await tokens.revoke_all_user_refresh_tokens(user_id) == 1

    async with uow:
        for session_id in (first.session_id, second.session_id):
            user_session = await uow.user_sessions.get_by_id(UUID(session_id))
            assert user_session.is_active is True
        assert len(await SessionService(uow, clock).get_active_sessions(user_id)) == 2
        assert (await uow.refresh_tokens.get_by_token(second.refresh_token)).is_revoked is True
