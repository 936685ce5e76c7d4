from typing import Optional
from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.clock import Clock
from src.app.services.session_service import SessionService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sessions.dtos import SessionInfo, SessionListResponse


class GetActiveSessionsUseCase:
    """Active, unexpired sessions of a user, most recently used first"""

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.session_service = SessionService(uow, clock)

    async def execute(
        self, user_id: UUID, current_session_id: Optional[UUID] = None
    ) -> Result[SessionListResponse]:
        async with self.uow:
            sessions = await self.session_service.get_active_sessions(user_id)
            return Return.ok(
                SessionListResponse(
                    sessions=[SessionInfo.from_session(s, current_session_id) for s in sessions],
                    total=len(sessions),
                )
            )
