"""
Register Use Case

Creates a pending user, assigns the default role and sends the phone OTP.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.auth_analytics_service import AuthAnalyticsService
from src.app.services.cache import IEphemeralCache
from src.app.services.clock import Clock
from src.app.services.notifier import INotifier
from src.app.services.role_service import RoleService
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_service import UserService
from src.app.services.verification_service import MSG_WEAK_PASSWORD, VerificationService
from src.app.utils.passwords import hash_password, is_strong_password
from src.domain.entities import AuthProvider, User, UserStatus, VerificationType
from .dtos import RegisterCommand, RegisterResponse, UserProfile

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Use case for user registration.

    Business Rules:
    - Email, phone and username (when given) must be unclaimed
    - User starts as pending_verification with a bcrypt password hash
    - Default role is assigned when one is configured
    - Phone OTP dispatch is best-effort: failure never fails registration
    - A concurrent registration that wins the unique constraint turns into
      the same conflict error as the upfront check
    """

    def __init__(
        self,
        uow: UnitOfWork,
        config,
        cache: IEphemeralCache,
        notifier: INotifier,
        clock: Optional[Clock] = None,
    ):
        self.uow = uow
        self.config = config
        self.clock = clock or Clock()
        self.analytics = AuthAnalyticsService(uow, config, self.clock)
        self.role_service = RoleService(uow)
        self.user_service = UserService(uow)
        self.verification_service = VerificationService(
            uow, cache, notifier, self.analytics, config, self.clock
        )

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        """
        Execute registration.

        Errors:
            - WEAK_PASSWORD
            - EMAIL_ALREADY_EXISTS
            - PHONE_ALREADY_EXISTS
            - USERNAME_TAKEN
        """
        if not is_strong_password(command.password, int(self.config.PASSWORD_MIN_LENGTH)):
            return Return.err(Error("WEAK_PASSWORD", MSG_WEAK_PASSWORD))

        email = command.email.lower()

        async with self.uow:
            now = self.clock.now()
            created = await self.user_service.create_user(
                User(
                    email=email,
                    phone=command.phone,
                    username=command.username,
                    first_name=command.first_name,
                    last_name=command.last_name,
                    password_hash=hash_password(command.password),
                    status=UserStatus.pending_verification,
                    auth_provider=AuthProvider.local,
                    created_at=now,
                    updated_at=now,
                )
            )
            if created.is_err():
                return created
            user = created.value

            profile = UserProfile.from_user(user)
            user_id = user.id
            logger.info(f"Registered user {user_id}")

            await self.role_service.assign_default_role_to_user(user_id)
            await self.analytics.track_registration(user)

            otp_result = await self.verification_service.generate_and_send_otp(
                user_id, VerificationType.PHONE, command.phone
            )
            if otp_result.is_err():
                logger.error(
                    f"Failed to send verification SMS for user {user_id}: "
                    f"{otp_result.error.code}"
                )
                message = "Registration successful. Request a new verification code to verify your phone"
            else:
                message = f"Registration successful. {otp_result.value.message}"

            return Return.ok(
                RegisterResponse(
                    user=profile,
                    verification_sent=otp_result.is_ok(),
                    message=message,
                )
            )
