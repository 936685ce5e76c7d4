"""
Update User Use Case

Administrative edit of any user field, including credentials and status.
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_service import UserService
from src.app.services.verification_service import MSG_WEAK_PASSWORD
from src.app.utils.passwords import hash_password, is_strong_password
from src.app.use_cases.auth.dtos import UserProfile
from src.domain.entities import UserStatus
from .dtos import UpdateUserCommand

logger = logging.getLogger(__name__)

PLAIN_FIELDS = ("username", "first_name", "last_name", "profile_picture", "status")
LOCKED_OUT = (UserStatus.inactive, UserStatus.suspended)


class UpdateUserUseCase:
    """
    Business Rules:
    - Only fields present in the request change
    - A new email or phone resets its verified flag
    - A new password is strength-checked and stamps password_changed_at
    - Moving a user to inactive or suspended, or changing their password,
      revokes every refresh token and ends every session
    """

    def __init__(self, uow: UnitOfWork, config, clock: Optional[Clock] = None):
        self.uow = uow
        self.config = config
        self.clock = clock or Clock()
        self.user_service = UserService(uow)

    async def execute(self, user_id: UUID, command: UpdateUserCommand) -> Result[UserProfile]:
        """
        Errors:
            - WEAK_PASSWORD
            - USER_NOT_FOUND
            - EMAIL_ALREADY_EXISTS
            - PHONE_ALREADY_EXISTS
            - USERNAME_TAKEN
        """
        changes = {k: v for k, v in command.model_dump(exclude_unset=True).items() if v is not None}
        password = changes.pop("password", None)
        if password is not None and not is_strong_password(
            password, int(self.config.PASSWORD_MIN_LENGTH)
        ):
            return Return.err(Error("WEAK_PASSWORD", MSG_WEAK_PASSWORD))
        if "email" in changes:
            changes["email"] = changes["email"].lower()

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            conflict = await self.user_service.find_conflict(
                changes.get("email"),
                changes.get("phone"),
                changes.get("username"),
                exclude_user_id=user_id,
            )
            if conflict is not None:
                return Return.err(conflict)

            now = self.clock.now()
            if "email" in changes and changes["email"] != user.email:
                user.email = changes["email"]
                user.email_verified = False
            if "phone" in changes and changes["phone"] != user.phone:
                user.phone = changes["phone"]
                user.phone_verified = False
            for name in PLAIN_FIELDS:
                if name in changes:
                    setattr(user, name, changes[name])
            if password is not None:
                user.password_hash = hash_password(password)
                user.password_changed_at = now
            user.updated_at = now

            lock_out = password is not None or changes.get("status") in LOCKED_OUT
            if lock_out:
                await self.uow.refresh_tokens.revoke_all_by_user_id(user_id)
                await self.uow.user_sessions.deactivate_all_by_user_id(user_id)

            saved = await self.user_service.save_user(user)
            if saved.is_err():
                return saved

            logger.info(
                f"Administrator updated user {user_id}"
                + (" and ended their sessions" if lock_out else "")
            )
            return Return.ok(UserProfile.from_user(saved.value))
