import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class DeleteUserUseCase:
    """
    Hard delete of a user together with their roles, sessions and refresh
    tokens. Auth events are kept for the audit trail.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[bool]:
        async with self.uow:
            if await self.uow.users.get_by_id(user_id) is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            deleted = await self.uow.users.delete(user_id)
            await self.uow.commit()
            logger.info(f"Deleted user {user_id}")
            return Return.ok(deleted)
