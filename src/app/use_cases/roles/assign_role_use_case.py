"""
Assign Role Use Case

Grants a role to a user.
"""

import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.role_service import RoleService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import AssignRoleResponse

logger = logging.getLogger(__name__)


class AssignRoleUseCase:
    """
    Use case for assigning a role to a user.

    Business Rules:
    - User and role must both exist
    - Assigning a role the user already holds succeeds without a duplicate
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.role_service = RoleService(uow)

    async def execute(self, user_id: UUID, role_id: UUID) -> Result[AssignRoleResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            role = await self.uow.roles.get_by_id(role_id)
            if role is None:
                return Return.err(Error("ROLE_NOT_FOUND", "Role not found"))
            role_name = role.name

            await self.role_service.assign_role_to_user(user_id, role_id)

            logger.info(f"Role {role_name} assigned to user {user_id}")
            return Return.ok(
                AssignRoleResponse(
                    success=True,
                    message="Role assigned successfully",
                    user_id=str(user_id),
                    role_id=str(role_id),
                )
            )
