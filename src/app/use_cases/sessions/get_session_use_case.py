from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.session_service import SessionService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import SessionInfo


class GetSessionUseCase:
    """
    Use case for reading one session.

    Business Rules:
    - Only the session's owner may read it (FORBIDDEN otherwise)
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.session_service = SessionService(uow, clock)

    async def execute(
        self,
        user_id: UUID,
        session_id: UUID,
        current_session_id: Optional[UUID] = None,
    ) -> Result[SessionInfo]:
        async with self.uow:
            user_session = await self.session_service.find_session_by_id(session_id)
            if user_session is None:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))

            if user_session.user_id != user_id:
                return Return.err(Error("FORBIDDEN", "You do not have access to this session"))

            return Return.ok(SessionInfo.from_session(user_session, current_session_id))
