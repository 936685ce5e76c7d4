"""
Update Profile Use Case

Self-service edit of the caller's display fields.
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_service import UserService
from src.app.use_cases.auth.dtos import UserProfile
from .dtos import UpdateProfileCommand

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("username", "first_name", "last_name", "profile_picture")
PROTECTED_FIELDS = ("email", "phone", "status")


class UpdateProfileUseCase:
    """
    Business Rules:
    - Only username, names and profile picture are editable here
    - email, phone and status in the request are rejected outright
    - A new username must be unclaimed
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or Clock()
        self.user_service = UserService(uow)

    async def execute(self, user_id: UUID, command: UpdateProfileCommand) -> Result[UserProfile]:
        """
        Errors:
            - VALIDATION_ERROR: protected field supplied
            - USER_NOT_FOUND
            - USERNAME_TAKEN
        """
        changes = command.model_dump(exclude_unset=True)
        if any(changes.get(name) is not None for name in PROTECTED_FIELDS):
            return Return.err(
                Error("VALIDATION_ERROR", "Cannot update email, phone or status through this endpoint")
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            username = changes.get("username")
            if username and username != user.username:
                conflict = await self.user_service.find_conflict(
                    None, None, username, exclude_user_id=user_id
                )
                if conflict is not None:
                    return Return.err(conflict)

            for name in PROFILE_FIELDS:
                if name in changes:
                    setattr(user, name, changes[name])
            user.updated_at = self.clock.now()

            saved = await self.user_service.save_user(user)
            if saved.is_err():
                return saved

            logger.info(f"User {user_id} updated their profile")
            return Return.ok(UserProfile.from_user(saved.value))
