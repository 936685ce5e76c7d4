"""
Logout Use Case

Ends one device session: revokes its refresh token and deactivates it.
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.auth_analytics_service import AuthAnalyticsService, AuthEventData
from src.app.services.clock import Clock
from src.app.services.session_service import SessionService
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Use case for logging out of the current device.

    Business Rules:
    - Unknown tokens and tokens of another user are a successful no-op
    - The refresh token is revoked and its session deactivated together
    - Infrastructure failures are logged and reported as LOGOUT_FAILED
    """

    def __init__(self, uow: UnitOfWork, config, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or Clock()
        self.analytics = AuthAnalyticsService(uow, config, self.clock)
        self.token_service = TokenService(uow, config, self.clock)
        self.session_service = SessionService(uow, self.clock)

    async def execute(
        self, refresh_token: str, user_id: Optional[UUID] = None
    ) -> Result[LogoutResponse]:
        async with self.uow:
            try:
                stored = await self.token_service.find_refresh_token(refresh_token)
                if stored is None or (user_id is not None and stored.user_id != user_id):
                    return Return.ok(LogoutResponse(success=True, message="Logged out"))

                owner_id = stored.user_id
                device_id = stored.device_id
                device_type = stored.device_type

                user_session = await self.uow.user_sessions.get_by_refresh_token_id(stored.id)
                session_id = user_session.id if user_session else None

                revoked = await self.token_service.revoke_refresh_token(refresh_token)
                if session_id is not None:
                    await self.session_service.deactivate_session(session_id)
            except Exception as exc:
                logger.error(f"Failed to logout: {exc}")
                await self.uow.rollback()
                return Return.err(Error("LOGOUT_FAILED", "Logout failed"))

            await self.analytics.track_logout(
                owner_id,
                AuthEventData(
                    device_id=device_id,
                    device_type=device_type,
                    metadata={"session_id": str(session_id)} if session_id else {},
                ),
            )

            return Return.ok(
                LogoutResponse(
                    success=True,
                    message="Logged out",
                    sessions_terminated=1 if session_id else 0,
                    tokens_revoked=1 if revoked else 0,
                )
            )
