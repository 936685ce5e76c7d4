from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from src.app.use_cases.users import (
    CreateUserCommand,
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
    UpdateUserCommand,
    UpdateUserUseCase,
)
from src.app.utils.passwords import verify_password
from src.domain.entities import Permission, User, UserStatus


def _user(**overrides):
    values = dict(
        email="jane@example.com",
        phone="+15550009001",
        username="jane",
        password_hash="old-hash",
        status=UserStatus.active,
        email_verified=True,
        phone_verified=True,
    )
    values.update(overrides)
    return User(**values)


@pytest.fixture
def existing(mock_uow):
    user = _user()
    mock_uow.users.get_by_id.return_value = user
    return user


@pytest.mark.asyncio
async def test_profile_update_changes_display_fields_only(mock_uow, clock, existing):
    command = UpdateProfileCommand(first_name="Jane", profile_picture="https://cdn/jane.png")

    result = await UpdateProfileUseCase(mock_uow, clock).execute(existing.id, command)

    assert result.is_ok()
    assert result.value.first_name == "Jane"
    assert existing.profile_picture == "https://cdn/jane.png"
    assert existing.username == "jane"
    assert existing.updated_at == clock.now()
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field,value",
    [("email", "new@example.com"), ("phone", "+15550009999"), ("status", UserStatus.suspended)],
)
async def test_profile_update_rejects_protected_fields(mock_uow, clock, existing, field, value):
    command = UpdateProfileCommand(**{field: value})

    result = await UpdateProfileUseCase(mock_uow, clock).execute(existing.id, command)

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.users.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_profile_update_rejects_claimed_username(mock_uow, clock, existing):
    mock_uow.users.get_by_username.return_value = _user(email="other@example.com")

    result = await UpdateProfileUseCase(mock_uow, clock).execute(
        existing.id, UpdateProfileCommand(username="taken")
    )

    assert result.error.code == "USERNAME_TAKEN"
    assert existing.username == "jane"


@pytest.mark.asyncio
async def test_profile_update_reports_conflict_when_save_loses_race(mock_uow, clock, existing):
    mock_uow.users.get_by_username.side_effect = [None, _user(email="other@example.com")]
    mock_uow.users.update.side_effect = IntegrityError("UPDATE users", {}, Exception("unique"))

    result = await UpdateProfileUseCase(mock_uow, clock).execute(
        existing.id, UpdateProfileCommand(username="racer")
    )

    assert result.error.code == "USERNAME_TAKEN"
    mock_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_admin_create_user_is_active_and_gets_default_role(mock_uow, config, clock):
    command = CreateUserCommand(email="New@Example.com", password="Abcd1234!")

    result = await CreateUserUseCase(mock_uow, config, clock).execute(command)

    assert result.is_ok()
    created = mock_uow.users.create.call_args.args[0]
    assert created.email == "new@example.com"
    assert created.status == UserStatus.active
    assert verify_password("Abcd1234!", created.password_hash)
    mock_uow.roles.get_default.assert_awaited_once()


@pytest.mark.asyncio
async def test_admin_create_user_rejects_weak_password(mock_uow, config, clock):
    result = await CreateUserUseCase(mock_uow, config, clock).execute(
        CreateUserCommand(email="new@example.com", password="short")
    )

    assert result.error.code == "WEAK_PASSWORD"
    mock_uow.users.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_user_allows_self_without_permission(mock_uow, existing):
    permission = Permission(name="profile:read", resource="profile", action="read")
    mock_uow.user_roles.get_permissions_by_user_id.return_value = [permission, permission]

    result = await GetUserUseCase(mock_uow).execute(existing.id, existing.id)

    assert result.is_ok()
    assert result.value.permissions == ["profile:read"]
    mock_uow.user_roles.count_by_permission.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_user_forbids_reading_others_without_user_read(mock_uow, existing):
    mock_uow.user_roles.count_by_permission.return_value = 0

    result = await GetUserUseCase(mock_uow).execute(uuid4(), existing.id)

    assert result.error.code == "FORBIDDEN"
    mock_uow.users.get_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_suspending_user_ends_sessions_and_tokens(mock_uow, config, clock, existing):
    result = await UpdateUserUseCase(mock_uow, config, clock).execute(
        existing.id, UpdateUserCommand(status=UserStatus.suspended)
    )

    assert result.is_ok()
    assert existing.status == UserStatus.suspended
    mock_uow.refresh_tokens.revoke_all_by_user_id.assert_awaited_once_with(existing.id)
    mock_uow.user_sessions.deactivate_all_by_user_id.assert_awaited_once_with(existing.id)


@pytest.mark.asyncio
async def test_changing_email_resets_verification_and_keeps_sessions(
    mock_uow, config, clock, existing
):
    result = await UpdateUserUseCase(mock_uow, config, clock).execute(
        existing.id, UpdateUserCommand(email="Moved@Example.com", first_name="J")
    )

    assert result.is_ok()
    assert existing.email == "moved@example.com"
    assert existing.email_verified is False
    assert existing.phone_verified is True
    assert existing.first_name == "J"
    mock_uow.user_sessions.deactivate_all_by_user_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_admin_password_change_stamps_and_signs_out(mock_uow, config, clock, existing):
    result = await UpdateUserUseCase(mock_uow, config, clock).execute(
        existing.id, UpdateUserCommand(password="Newpass1!")
    )

    assert result.is_ok()
    assert verify_password("Newpass1!", existing.password_hash)
    assert existing.password_changed_at == clock.now()
    mock_uow.refresh_tokens.revoke_all_by_user_id.assert_awaited_once_with(existing.id)


@pytest.mark.asyncio
async def test_update_user_ignores_own_email_in_conflict_check(mock_uow, config, clock, existing):
    mock_uow.users.get_by_email.return_value = existing

    result = await UpdateUserUseCase(mock_uow, config, clock).execute(
        existing.id, UpdateUserCommand(email="jane@example.com")
    )

    assert result.is_ok()
    assert existing.email_verified is True


@pytest.mark.asyncio
async def test_delete_missing_user_is_not_found(mock_uow):
    result = await DeleteUserUseCase(mock_uow).execute(uuid4())

    assert result.error.code == "USER_NOT_FOUND"
    mock_uow.users.delete.assert_not_awaited()
