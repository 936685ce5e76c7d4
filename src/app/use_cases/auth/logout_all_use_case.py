"""
Logout All Use Case

Signs a user out everywhere except, optionally, the current device.
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
from src.domain.entities import AuthEventType
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)


class LogoutAllUseCase:
    """
    Use case for logging out of all devices.

    Business Rules:
    - The current refresh token (if supplied and owned by the user) and
      its session are kept; everything else is revoked/deactivated
    - A single LOGOUT event tagged all_sessions is recorded
    """

    def __init__(self, uow: UnitOfWork, config, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or Clock()
        self.analytics = AuthAnalyticsService(uow, config, self.clock)
        self.token_service = TokenService(uow, config, self.clock)
        self.session_service = SessionService(uow, self.clock)

    async def execute(
        self, user_id: UUID, current_refresh_token: Optional[str] = None
    ) -> Result[LogoutResponse]:
        async with self.uow:
            try:
                except_token_id = None
                except_session_id = None
                if current_refresh_token:
                    current = await self.token_service.find_refresh_token(current_refresh_token)
                    if current is not None and current.user_id == user_id:
                        except_token_id = current.id
                        current_session = await self.uow.user_sessions.get_by_refresh_token_id(
                            current.id
                        )
                        if current_session is not None:
                            except_session_id = current_session.id

                tokens_revoked = await self.token_service.revoke_all_user_refresh_tokens(
                    user_id, except_token_id
                )
                sessions_terminated = await self.session_service.deactivate_all_user_sessions(
                    user_id, except_session_id
                )
            except Exception as exc:
                logger.error(f"Error during logout of all sessions for user {user_id}: {exc}")
                await self.uow.rollback()
                return Return.err(Error("LOGOUT_FAILED", "Logout failed"))

            logger.info(
                f"User {user_id} logged out everywhere: {sessions_terminated} session(s), "
                f"{tokens_revoked} token(s)"
            )
            await self.analytics.track_event(
                AuthEventType.LOGOUT,
                AuthEventData(
                    user_id=user_id,
                    success=True,
                    metadata={
                        "all_sessions": True,
                        "kept_session_id": str(except_session_id) if except_session_id else None,
                    },
                ),
            )

            return Return.ok(
                LogoutResponse(
                    success=True,
                    message="Logged out from all other sessions",
                    sessions_terminated=sessions_terminated,
                    tokens_revoked=tokens_revoked,
                )
            )
