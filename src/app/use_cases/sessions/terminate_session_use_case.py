"""
Terminate Session Use Cases

Deactivate device sessions from the session list. Refresh tokens are left
untouched; logout is the flow that cascades to tokens.
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.session_service import SessionService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import TerminateSessionResponse

logger = logging.getLogger(__name__)


class TerminateSessionUseCase:
    """
    Use case for terminating one of the caller's sessions.

    Business Rules:
    - Only the owner may terminate a session
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.session_service = SessionService(uow, clock)

    async def execute(self, user_id: UUID, session_id: UUID) -> Result[TerminateSessionResponse]:
        async with self.uow:
            user_session = await self.session_service.find_session_by_id(session_id)
            if user_session is None:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))

            if user_session.user_id != user_id:
                return Return.err(Error("FORBIDDEN", "You do not have access to this session"))

            await self.session_service.deactivate_session(session_id)

            logger.info(f"User {user_id} terminated session {session_id}")
            return Return.ok(
                TerminateSessionResponse(
                    success=True, message="Session terminated successfully", terminated=1
                )
            )


class TerminateOtherSessionsUseCase:
    """
    Deactivate every session of the caller except the current one.

    Callers whose token carries no session id are refused with
    VALIDATION_ERROR.
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.session_service = SessionService(uow, clock)

    async def execute(
        self, user_id: UUID, current_session_id: Optional[UUID] = None
    ) -> Result[TerminateSessionResponse]:
        if current_session_id is None:
            return Return.err(
                Error("VALIDATION_ERROR", "Current session is unknown; use logout-all instead")
            )

        async with self.uow:
            count = await self.session_service.deactivate_all_user_sessions(
                user_id, current_session_id
            )
            logger.info(f"User {user_id} terminated {count} other session(s)")
            return Return.ok(
                TerminateSessionResponse(
                    success=True, message="Sessions terminated successfully", terminated=count
                )
            )
