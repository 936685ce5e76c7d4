"""
Create User Use Case

Administrative account creation, bypassing the phone verification flow.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.role_service import RoleService
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_service import UserService
from src.app.services.verification_service import MSG_WEAK_PASSWORD
from src.app.utils.passwords import hash_password, is_strong_password
from src.app.use_cases.auth.dtos import UserProfile
from src.domain.entities import AuthProvider, User
from .dtos import CreateUserCommand

logger = logging.getLogger(__name__)


class CreateUserUseCase:
    """
    Business Rules:
    - Same uniqueness and password rules as registration
    - Status is chosen by the administrator (active by default)
    - No OTP is sent; the default role is assigned
    """

    def __init__(self, uow: UnitOfWork, config, clock: Optional[Clock] = None):
        self.uow = uow
        self.config = config
        self.clock = clock or Clock()
        self.user_service = UserService(uow)
        self.role_service = RoleService(uow)

    async def execute(self, command: CreateUserCommand) -> Result[UserProfile]:
        """
        Errors:
            - WEAK_PASSWORD
            - EMAIL_ALREADY_EXISTS
            - PHONE_ALREADY_EXISTS
            - USERNAME_TAKEN
        """
        if not is_strong_password(command.password, int(self.config.PASSWORD_MIN_LENGTH)):
            return Return.err(Error("WEAK_PASSWORD", MSG_WEAK_PASSWORD))

        async with self.uow:
            now = self.clock.now()
            created = await self.user_service.create_user(
                User(
                    email=command.email.lower(),
                    phone=command.phone,
                    username=command.username,
                    first_name=command.first_name,
                    last_name=command.last_name,
                    password_hash=hash_password(command.password),
                    status=command.status,
                    auth_provider=AuthProvider.local,
                    created_at=now,
                    updated_at=now,
                )
            )
            if created.is_err():
                return created

            profile = UserProfile.from_user(created.value)
            user_id = created.value.id
            await self.role_service.assign_default_role_to_user(user_id)
            logger.info(f"Administrator created user {user_id}")
            return Return.ok(profile)
