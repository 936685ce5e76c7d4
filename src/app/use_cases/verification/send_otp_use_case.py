from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.auth_analytics_service import AuthAnalyticsService
from src.app.services.cache import IEphemeralCache
from src.app.services.clock import Clock
from src.app.services.notifier import INotifier
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.verification_service import VerificationService
from src.domain.entities import VerificationType
from .dtos import SendOtpResponse


class SendOtpUseCase:
    """
    Use case for an authenticated user requesting a (new) verification code.

    Business Rules:
    - Code goes to the address on record: phone for PHONE, email otherwise
    - Cooldown and send failures are reported to the caller
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
        clock = clock or Clock()
        analytics = AuthAnalyticsService(uow, config, clock)
        self.verification_service = VerificationService(
            uow, cache, notifier, analytics, config, clock
        )

    async def execute(
        self, user_id: UUID, verification_type: VerificationType
    ) -> Result[SendOtpResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if verification_type == VerificationType.PHONE:
                if not user.phone:
                    return Return.err(
                        Error("VALIDATION_ERROR", "No phone number on file for this account")
                    )
                destination = user.phone
            else:
                destination = user.email

            result = await self.verification_service.generate_and_send_otp(
                user_id, verification_type, destination
            )
            if result.is_err():
                return result

            return Return.ok(
                SendOtpResponse(
                    success=True,
                    message=result.value.message,
                    expires_in=result.value.expires_in,
                )
            )
