"""
Refresh Token Use Case

Exchanges a refresh token for a new access token, rotating the refresh
token when rotation is enabled.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.auth_analytics_service import AuthAnalyticsService, AuthEventData
from src.app.services.clock import Clock
from src.app.services.session_service import SessionService
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import RefreshTokenResponse, UserProfile

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Unknown, revoked and expired tokens all fail with INVALID_TOKEN
    - The session is resolved from the presented token before rotation and
      relinked to the successor afterwards
    - A token that lost a concurrent rotation fails closed
    """

    def __init__(self, uow: UnitOfWork, config, clock: Optional[Clock] = None):
        self.uow = uow
        self.config = config
        self.clock = clock or Clock()
        self.analytics = AuthAnalyticsService(uow, config, self.clock)
        self.token_service = TokenService(uow, config, self.clock)
        self.session_service = SessionService(uow, self.clock)

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        async with self.uow:
            stored = await self.token_service.find_refresh_token(refresh_token)
            if stored is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid or expired refresh token"))

            token_id = stored.id
            user_id = stored.user_id
            device_id = stored.device_id
            device_type = stored.device_type

            user_session = await self.session_service.find_session_by_refresh_token(
                refresh_token
            )
            session_id = user_session.id if user_session else None

            pair = await self.token_service.refresh_access_token(refresh_token, session_id)
            if pair is None:
                logger.info(f"Refresh rejected for token {token_id}")
                return Return.err(Error("INVALID_TOKEN", "Invalid or expired refresh token"))

            if session_id is not None:
                await self.session_service.update_session_activity(
                    session_id, refresh_token_id=pair.refresh_token_id
                )

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid or expired refresh token"))

            response = RefreshTokenResponse(
                access_token=pair.access_token,
                refresh_token=pair.refresh_token,
                expires_in=pair.expires_in,
                session_id=str(session_id) if session_id else None,
                user=UserProfile.from_user(user),
            )

            await self.analytics.track_token_refresh(
                user_id,
                AuthEventData(
                    device_id=device_id,
                    device_type=device_type,
                    metadata={"session_id": str(session_id)} if session_id else {},
                ),
            )

            return Return.ok(response)
