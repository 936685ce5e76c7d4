"""
Request Password Reset Use Case

Sends a PASSWORD_RESET code without revealing whether the email exists.
"""

from typing import Optional

from src.libs.result import Result, Return
from src.app.services.auth_analytics_service import AuthAnalyticsService
from src.app.services.cache import IEphemeralCache
from src.app.services.clock import Clock
from src.app.services.notifier import INotifier
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.verification_service import VerificationService
from .dtos import VerificationResponse


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset code.

    Business Rules:
    - Known and unknown emails receive the same response
    - Only the resend cooldown is surfaced to the caller
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

    async def execute(self, email: str) -> Result[VerificationResponse]:
        async with self.uow:
            result = await self.verification_service.request_password_reset(email)
            if result.is_err():
                return result
            return Return.ok(VerificationResponse(success=True, message=result.value))
