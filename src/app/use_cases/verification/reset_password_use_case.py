"""
Reset Password Use Case

Sets a new password after a PASSWORD_RESET code is verified and signs the
user out of every device.
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


class ResetPasswordUseCase:
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
        self, email: str, code: str, new_password: str
    ) -> Result[VerificationResponse]:
        async with self.uow:
            result = await self.verification_service.reset_password(email, code, new_password)
            if result.is_err():
                return result
            return Return.ok(VerificationResponse(success=True, message=result.value))
