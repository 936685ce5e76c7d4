from typing import List
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.role_service import RoleService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import PermissionInfo, RoleInfo


class GetUserRolesUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.role_service = RoleService(uow)

    async def execute(self, user_id: UUID) -> Result[List[RoleInfo]]:
        async with self.uow:
            if await self.uow.users.get_by_id(user_id) is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))
            roles = await self.role_service.get_user_roles(user_id)
            return Return.ok([RoleInfo.from_role(r) for r in roles])


class GetUserPermissionsUseCase:
    """
    Effective permissions of a user.

    Business Rules:
    - Union across all assigned roles, each permission listed once
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.role_service = RoleService(uow)

    async def execute(self, user_id: UUID) -> Result[List[PermissionInfo]]:
        async with self.uow:
            if await self.uow.users.get_by_id(user_id) is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))
            permissions = await self.role_service.get_user_permissions(user_id)
            return Return.ok([PermissionInfo.from_permission(p) for p in permissions])
