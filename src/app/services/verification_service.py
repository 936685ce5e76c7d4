"""
Verification Service

OTP lifecycle for phone, email and password-reset verification, backed by
the ephemeral cache rather than the credential store.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.auth_analytics_service import AuthAnalyticsService, AuthEventData
from src.app.services.cache import CacheError, IEphemeralCache
from src.app.services.clock import Clock
from src.app.services.notifier import INotifier
from src.app.services.unit_of_work import UnitOfWork
from src.app.utils.masking import mask_destination
from src.app.utils.passwords import hash_password, is_strong_password
from src.domain.entities import (
    AuthEventType,
    NotificationChannel,
    User,
    UserStatus,
    VerificationType,
)

logger = logging.getLogger(__name__)

MSG_COOLDOWN = "Please wait before requesting another code"
MSG_SEND_FAILED = "Failed to send verification code"
MSG_NOT_FOUND = "Verification code expired or not found"
MSG_TOO_MANY = "Too many failed attempts. Please request a new code"
MSG_INVALID = "Invalid verification code"
MSG_FAILED = "Verification failed"
MSG_SUCCESS = "Verification successful"
MSG_RESET_REQUESTED = "If your email is registered, you will receive a password reset code"
MSG_WEAK_PASSWORD = (
    "Password must contain uppercase, lowercase, number and special character"
)

_EVENT_BY_TYPE = {
    VerificationType.EMAIL: AuthEventType.EMAIL_VERIFICATION,
    VerificationType.PHONE: AuthEventType.PHONE_VERIFICATION,
    VerificationType.PASSWORD_RESET: AuthEventType.PASSWORD_RESET_REQUEST,
}


@dataclass(frozen=True)
class OtpDispatch:
    message: str
    masked_destination: str
    expires_in: int


class VerificationService:
    """
    OTP state machine per (user_id, verification_type).

    Business Rules:
    - Entry {otp, attempts} lives in the cache with a type-specific TTL
    - Resend within the cooldown window is rejected without a new code
    - Attempts are counted before the code is compared
    - At max attempts the entry is deleted and the user must request a new code
    - Successful EMAIL/PHONE verification updates the user; PASSWORD_RESET
      only gates the caller's next step
    """

    def __init__(
        self,
        uow: UnitOfWork,
        cache: IEphemeralCache,
        notifier: INotifier,
        analytics: AuthAnalyticsService,
        config,
        clock: Optional[Clock] = None,
    ):
        self.uow = uow
        self.cache = cache
        self.notifier = notifier
        self.analytics = analytics
        self.config = config
        self.clock = clock or Clock()

    @staticmethod
    def cache_key(user_id: UUID, verification_type: VerificationType) -> str:
        return f"otp:{verification_type.value.lower()}:{user_id}"

    def ttl_for(self, verification_type: VerificationType) -> int:
        if verification_type == VerificationType.PHONE:
            return int(self.config.PHONE_VERIFICATION_EXPIRATION)
        if verification_type == VerificationType.EMAIL:
            return int(self.config.EMAIL_VERIFICATION_EXPIRATION)
        return int(self.config.PASSWORD_RESET_EXPIRATION)

    def generate_otp(self) -> str:
        return "".join(str(secrets.randbelow(10)) for _ in range(int(self.config.OTP_LENGTH)))

    async def _in_cooldown(self, key: str) -> bool:
        last_sent = await self.cache.get(f"{key}:lastSent")
        if not last_sent:
            return False
        elapsed = self.clock.now() - datetime.fromisoformat(last_sent)
        return elapsed < timedelta(seconds=int(self.config.OTP_RESEND_COOLDOWN_SECONDS))

    async def generate_and_send_otp(
        self,
        user_id: UUID,
        verification_type: VerificationType,
        destination: str,
    ) -> Result[OtpDispatch]:
        """
        Create (or replace) the OTP entry and dispatch it.

        Errors:
            - USER_NOT_FOUND
            - OTP_COOLDOWN: previous code sent too recently
            - OTP_SEND_FAILED: cache or notifier failure
        """
        user = await self.uow.users.get_by_id(user_id)
        if user is None:
            return Return.err(Error("USER_NOT_FOUND", "User not found"))

        key = self.cache_key(user_id, verification_type)
        ttl = self.ttl_for(verification_type)

        try:
            existing = await self.cache.get(key)
            if existing is not None and await self._in_cooldown(key):
                return Return.err(Error("OTP_COOLDOWN", MSG_COOLDOWN))

            otp = self.generate_otp()
            await self.cache.set(key, {"otp": otp, "attempts": 0}, ttl)
            await self.cache.set(f"{key}:lastSent", self.clock.now().isoformat(), ttl)
        except CacheError as exc:
            logger.error(f"Failed to store OTP for {verification_type.value}: {exc}")
            return Return.err(Error("OTP_SEND_FAILED", MSG_SEND_FAILED))

        sent = await self._send_otp(user, verification_type, destination, otp, ttl)
        if not sent:
            logger.error(
                f"Notifier failed to deliver {verification_type.value} OTP to user {user_id}"
            )
            return Return.err(Error("OTP_SEND_FAILED", MSG_SEND_FAILED))

        if verification_type == VerificationType.PASSWORD_RESET:
            await self._track(user, verification_type, success=True)

        masked = mask_destination(destination, verification_type)
        return Return.ok(
            OtpDispatch(
                message=f"Verification code sent to {masked}",
                masked_destination=masked,
                expires_in=ttl,
            )
        )

    async def verify_otp(
        self,
        user_id: UUID,
        verification_type: VerificationType,
        code: str,
    ) -> Result[str]:
        """
        Check a submitted code.

        Errors:
            - USER_NOT_FOUND
            - OTP_NOT_FOUND: no entry (expired or never issued)
            - OTP_TOO_MANY_ATTEMPTS: attempt cap reached; entry removed
            - OTP_INVALID: wrong code (attempt consumed)
            - VERIFICATION_FAILED: cache unavailable
        """
        user = await self.uow.users.get_by_id(user_id)
        if user is None:
            return Return.err(Error("USER_NOT_FOUND", "User not found"))

        key = self.cache_key(user_id, verification_type)
        try:
            # The attempt is consumed before comparing, so concurrent guesses
            # each see a distinct count
            entry = await self.cache.increment_attempts(key)
            if entry is None:
                return Return.err(Error("OTP_NOT_FOUND", MSG_NOT_FOUND))

            if int(entry["attempts"]) > int(self.config.VERIFICATION_MAX_ATTEMPTS):
                await self.cache.delete(key)
                return Return.err(Error("OTP_TOO_MANY_ATTEMPTS", MSG_TOO_MANY))

            if not secrets.compare_digest(str(entry["otp"]), str(code)):
                return Return.err(Error("OTP_INVALID", MSG_INVALID))

            await self.cache.delete(key)
        except CacheError as exc:
            logger.error(f"Failed to verify OTP for {verification_type.value}: {exc}")
            return Return.err(Error("VERIFICATION_FAILED", MSG_FAILED))

        await self._apply_verification(user, verification_type)
        if verification_type != VerificationType.PASSWORD_RESET:
            await self._track(user, verification_type, success=True)

        return Return.ok(MSG_SUCCESS)

    async def _apply_verification(
        self, user: User, verification_type: VerificationType
    ) -> None:
        if verification_type == VerificationType.PASSWORD_RESET:
            return

        if verification_type == VerificationType.EMAIL:
            user.email_verified = True
        elif verification_type == VerificationType.PHONE:
            user.phone_verified = True
            if user.status == UserStatus.pending_verification:
                user.status = UserStatus.active

        user.updated_at = self.clock.now()
        await self.uow.users.update(user)
        await self.uow.commit()

    async def _send_otp(
        self,
        user: User,
        verification_type: VerificationType,
        destination: str,
        otp: str,
        ttl: int,
    ) -> bool:
        app_name = self.config.APP_NAME
        minutes = max(1, ttl // 60)
        greeting = user.first_name or user.username or "User"

        if verification_type == VerificationType.PHONE:
            channel = NotificationChannel.sms
            payload = {
                "body": f"{app_name}: Your verification code is {otp}. "
                f"Valid for {minutes} minutes.",
            }
        elif verification_type == VerificationType.EMAIL:
            channel = NotificationChannel.email
            payload = {
                "subject": f"{app_name} - Email Verification Code",
                "body": f"Hello {greeting},\n\nYour verification code is {otp}. "
                f"It expires in {minutes} minutes.",
            }
        else:
            channel = NotificationChannel.email
            payload = {
                "subject": f"{app_name} - Password Reset Code",
                "body": f"Hello {greeting},\n\nYour password reset code is {otp}. "
                f"It expires in {minutes} minutes.",
            }

        try:
            return await self.notifier.send(destination, channel, payload)
        except Exception as exc:
            logger.error(f"Notifier raised while sending {channel.value}: {exc}")
            return False

    async def _track(
        self, user: User, verification_type: VerificationType, success: bool
    ) -> None:
        await self.analytics.track_event(
            _EVENT_BY_TYPE[verification_type],
            AuthEventData(
                user_id=user.id,
                email=user.email,
                phone=user.phone,
                success=success,
            ),
        )

    async def request_password_reset(self, email: str) -> Result[str]:
        """
        Send a PASSWORD_RESET code to a registered email.

        Unknown emails get the same response so the endpoint cannot be used
        to discover accounts.
        """
        user = await self.uow.users.get_by_email(email.lower())
        if user is None:
            logger.info("Password reset requested for unknown email")
            return Return.ok(MSG_RESET_REQUESTED)

        result = await self.generate_and_send_otp(
            user.id, VerificationType.PASSWORD_RESET, user.email
        )
        if result.is_err():
            if result.error.code == "OTP_COOLDOWN":
                return result
            logger.warning(
                f"Password reset code not sent for user {user.id}: {result.error.code}"
            )
        return Return.ok(MSG_RESET_REQUESTED)

    async def reset_password(
        self, email: str, code: str, new_password: str
    ) -> Result[str]:
        """
        Verify a PASSWORD_RESET code and set a new password.

        On success every refresh token is revoked and every session
        deactivated, so existing devices must sign in again.

        Errors:
            - WEAK_PASSWORD
            - INVALID_CREDENTIALS: unknown email
            - any verify_otp error
        """
        if not is_strong_password(new_password, int(self.config.PASSWORD_MIN_LENGTH)):
            return Return.err(Error("WEAK_PASSWORD", MSG_WEAK_PASSWORD))

        user = await self.uow.users.get_by_email(email.lower())
        if user is None:
            return Return.err(
                Error("INVALID_CREDENTIALS", "Invalid email or verification code")
            )

        verified = await self.verify_otp(user.id, VerificationType.PASSWORD_RESET, code)
        if verified.is_err():
            return verified

        now = self.clock.now()
        user.password_hash = hash_password(new_password)
        user.password_changed_at = now
        user.updated_at = now
        await self.uow.users.update(user)
        await self.uow.refresh_tokens.revoke_all_by_user_id(user.id)
        await self.uow.user_sessions.deactivate_all_by_user_id(user.id)
        await self.uow.commit()
        logger.info(f"Password reset completed for user {user.id}")

        await self.analytics.track_event(
            AuthEventType.PASSWORD_RESET_COMPLETE,
            AuthEventData(user_id=user.id, email=user.email, success=True),
        )
        return Return.ok("Password has been reset successfully")
