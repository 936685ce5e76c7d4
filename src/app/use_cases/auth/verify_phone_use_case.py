"""
Verify Phone Use Case

Completes registration by checking the phone OTP.
"""

from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.auth_analytics_service import AuthAnalyticsService
from src.app.services.cache import IEphemeralCache
from src.app.services.clock import Clock
from src.app.services.notifier import INotifier
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.verification_service import VerificationService
from src.domain.entities import VerificationType
from .dtos import UserProfile, VerifyPhoneResponse


class VerifyPhoneUseCase:
    """
    Use case for phone verification after registration.

    Business Rules:
    - User is resolved by phone number
    - A correct code sets phone_verified and promotes pending_verification
      users to active
    - Response carries the updated profile, never the password hash
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
        self.clock = clock or Clock()
        analytics = AuthAnalyticsService(uow, config, self.clock)
        self.verification_service = VerificationService(
            uow, cache, notifier, analytics, config, self.clock
        )

    async def execute(self, phone: str, code: str) -> Result[VerifyPhoneResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_phone(phone)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))
            user_id = user.id

            result = await self.verification_service.verify_otp(
                user_id, VerificationType.PHONE, code
            )
            if result.is_err():
                return result

            user = await self.uow.users.get_by_id(user_id)
            return Return.ok(
                VerifyPhoneResponse(
                    success=True,
                    message="Phone verified successfully",
                    user=UserProfile.from_user(user),
                )
            )
