from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserProfile
from .dtos import ListUsersQuery, UserListResponse


class ListUsersUseCase:
    """Paged user listing with optional status filter and free-text search"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, query: ListUsersQuery) -> Result[UserListResponse]:
        async with self.uow:
            users, total = await self.uow.users.list(
                skip=query.skip,
                take=query.take,
                status=query.status,
                search=query.search,
                order_by=query.order_by,
                descending=query.order_direction == "desc",
            )
            return Return.ok(
                UserListResponse(
                    users=[UserProfile.from_user(u) for u in users],
                    total=total,
                    skip=query.skip,
                    take=query.take,
                )
            )
