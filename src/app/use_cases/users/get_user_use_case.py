from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.role_service import RoleService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserProfile
from .dtos import UserDetail


class GetUserUseCase:
    """
    Single user with roles and effective permissions.

    Business Rules:
    - Callers may always read themselves
    - Reading anyone else requires user:read
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.role_service = RoleService(uow)

    async def execute(self, caller_id: UUID, user_id: UUID) -> Result[UserDetail]:
        async with self.uow:
            if caller_id != user_id and not await self.role_service.user_has_permission(
                caller_id, "user", "read"
            ):
                return Return.err(Error("FORBIDDEN", "Insufficient permissions"))

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))
            profile = UserProfile.from_user(user)

            roles = await self.role_service.get_user_roles(user_id)
            permissions = await self.role_service.get_user_permissions(user_id)
            return Return.ok(
                UserDetail(
                    **profile.model_dump(),
                    roles=[r.role.name for r in roles],
                    permissions=sorted(p.name for p in permissions),
                )
            )
