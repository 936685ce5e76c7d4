"""
Cleanup Expired Use Case

Periodic sweep that deactivates expired sessions and revokes expired refresh
tokens.
"""

import logging
from typing import Dict, Optional

from src.libs.result import Result, Return
from src.app.services.clock import Clock
from src.app.services.session_service import SessionService
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CleanupExpiredUseCase:
    """
    Use case for the expiry sweep.

    Business Rules:
    - Only flips active/unrevoked rows, so re-running reports zero
    - Nothing is deleted; rows stay for audit
    """

    def __init__(self, uow: UnitOfWork, config, clock: Optional[Clock] = None):
        self.uow = uow
        self.session_service = SessionService(uow, clock)
        self.token_service = TokenService(uow, config, clock)

    async def execute(self) -> Result[Dict[str, int]]:
        async with self.uow:
            sessions = await self.session_service.cleanup_expired_sessions()
            tokens = await self.token_service.cleanup_expired_refresh_tokens()

        if sessions or tokens:
            logger.info(
                f"Expiry sweep: {sessions} session(s) deactivated, {tokens} refresh token(s) revoked"
            )
        return Return.ok({"sessions": sessions, "refresh_tokens": tokens})
