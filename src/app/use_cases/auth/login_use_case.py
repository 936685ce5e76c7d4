"""
Login Use Case

Authenticates by email or phone and opens a device session.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import uuid4

from src.libs.result import Error, Result, Return
from src.app.services.auth_analytics_service import AuthAnalyticsService, AuthEventData
from src.app.services.clock import Clock
from src.app.services.session_service import SessionCreateData, SessionService
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.app.utils.passwords import burn_password_check, verify_password
from src.domain.entities import UserStatus
from .dtos import ClientContext, LoginCommand, LoginResponse, UserProfile

logger = logging.getLogger(__name__)

LOGIN_ALLOWED_STATUSES = (UserStatus.active, UserStatus.pending_verification)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid credentials")


class LoginUseCase:
    """
    Use case for login and token issuance.

    Business Rules:
    - Exactly one of email or phone identifies the user
    - Unknown user, missing password hash and wrong password all return the
      same INVALID_CREDENTIALS error; the specific cause is only audited
    - pending_verification users may log in
    - Logins from an unseen device and IP are flagged, never blocked
    - Each successful login opens a session linked to its refresh token
    """

    def __init__(self, uow: UnitOfWork, config, clock: Optional[Clock] = None):
        self.uow = uow
        self.config = config
        self.clock = clock or Clock()
        self.analytics = AuthAnalyticsService(uow, config, self.clock)
        self.token_service = TokenService(uow, config, self.clock)
        self.session_service = SessionService(uow, self.clock)

    async def execute(self, command: LoginCommand) -> Result[LoginResponse]:
        """
        Execute login.

        Errors:
            - IDENTIFIER_REQUIRED: neither or both of email/phone supplied
            - INVALID_CREDENTIALS
            - ACCOUNT_NOT_ACTIVE: suspended or inactive account
        """
        if bool(command.email) == bool(command.phone):
            return Return.err(
                Error("IDENTIFIER_REQUIRED", "Either email or phone number is required")
            )

        email = command.email.lower() if command.email else None
        phone = command.phone
        context = command.context

        async with self.uow:
            if email:
                user = await self.uow.users.get_by_email(email)
            else:
                user = await self.uow.users.get_by_phone(phone)

            if user is None:
                burn_password_check(command.password)
                await self._fail(email, phone, "User not found", context)
                return Return.err(INVALID_CREDENTIALS)

            user_id = user.id

            if not user.password_hash:
                await self._fail(email, phone, "No password set for user", context, user_id)
                return Return.err(INVALID_CREDENTIALS)

            if not verify_password(command.password, user.password_hash):
                await self._fail(email, phone, "Invalid password", context, user_id)
                return Return.err(INVALID_CREDENTIALS)

            if user.status not in LOGIN_ALLOWED_STATUSES:
                await self._fail(
                    email, phone, f"Account status: {user.status.value}", context, user_id
                )
                return Return.err(Error("ACCOUNT_NOT_ACTIVE", "Account is not active"))

            if context.device_id and context.ip_address:
                suspicious = await self.analytics.check_suspicious_activity(
                    user_id,
                    context.ip_address,
                    context.device_id,
                    context.device_type or "unknown",
                )
                if suspicious:
                    logger.warning(
                        f"Suspicious login detected for user {user_id} from IP "
                        f"{context.ip_address} and device {context.device_id}"
                    )
                # A failed audit write rolls back and expires loaded rows
                user = await self.uow.users.get_by_id(user_id)

            session_id = uuid4()
            tokens = await self.token_service.generate_tokens(
                user, context.device_id, context.device_type, session_id=session_id
            )

            now = self.clock.now()
            await self.session_service.create_session(
                SessionCreateData(
                    user_id=user_id,
                    refresh_token_id=tokens.refresh_token_id,
                    expires_at=now + timedelta(seconds=int(self.config.SESSION_DURATION_SECONDS)),
                    device_id=context.device_id,
                    device_type=context.device_type,
                    device_name=context.device_name,
                    ip_address=context.ip_address,
                    user_agent=context.user_agent,
                    location=context.location,
                ),
                session_id=session_id,
            )

            user.last_login_at = now
            user.updated_at = now
            user = await self.uow.users.update(user)
            await self.uow.commit()

            response = LoginResponse(
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
                expires_in=tokens.expires_in,
                session_id=str(session_id),
                user=UserProfile.from_user(user),
            )

            await self.analytics.track_login_success(
                user,
                AuthEventData(
                    device_id=context.device_id,
                    device_type=context.device_type,
                    device_name=context.device_name,
                    ip_address=context.ip_address,
                    user_agent=context.user_agent,
                    location=context.location,
                    metadata={"session_id": str(session_id)},
                ),
            )
            logger.info(f"User {user_id} logged in with session {session_id}")

            return Return.ok(response)

    async def _fail(
        self,
        email: Optional[str],
        phone: Optional[str],
        reason: str,
        context: ClientContext,
        user_id=None,
    ) -> None:
        await self.analytics.track_login_failure(
            email,
            phone,
            reason,
            AuthEventData(
                user_id=user_id,
                device_id=context.device_id,
                device_type=context.device_type,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                location=context.location,
            ),
        )

        attempts = await self.analytics.get_login_attempts(
            email=email, phone=phone, user_id=user_id
        )
        if attempts >= int(self.config.LOGIN_MAX_ATTEMPTS):
            logger.warning(
                f"{attempts} failed login attempts within "
                f"{self.config.LOGIN_WINDOW_SECONDS}s for user {user_id or 'unknown'}"
            )
