from typing import List
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.role_service import RoleService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import RoleInfo


class ListRolesUseCase:
    """All roles with their permissions, ordered by name"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.role_service = RoleService(uow)

    async def execute(self) -> Result[List[RoleInfo]]:
        async with self.uow:
            roles = await self.role_service.get_all_roles()
            return Return.ok([RoleInfo.from_role(r) for r in roles])


class GetRoleUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.role_service = RoleService(uow)

    async def execute(self, role_id: UUID) -> Result[RoleInfo]:
        async with self.uow:
            role = await self.role_service.get_role_by_id(role_id)
            if role is None:
                return Return.err(Error("ROLE_NOT_FOUND", "Role not found"))
            return Return.ok(RoleInfo.from_role(role))
