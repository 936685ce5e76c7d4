"""
Role Use Case DTOs
"""

from typing import List, Optional

from pydantic import BaseModel

from src.app.services.role_service import RoleWithPermissions
from src.domain.entities import Permission


class PermissionInfo(BaseModel):
    id: str
    name: str
    resource: str
    action: str
    description: Optional[str] = None

    @classmethod
    def from_permission(cls, permission: Permission) -> "PermissionInfo":
        return cls(
            id=str(permission.id),
            name=permission.name,
            resource=permission.resource,
            action=permission.action,
            description=permission.description,
        )


class RoleInfo(BaseModel):
    """Role with the permissions it grants"""

    id: str
    name: str
    description: Optional[str] = None
    is_default: bool
    permissions: List[PermissionInfo]

    @classmethod
    def from_role(cls, item: RoleWithPermissions) -> "RoleInfo":
        return cls(
            id=str(item.role.id),
            name=item.role.name,
            description=item.role.description,
            is_default=item.role.is_default,
            permissions=[PermissionInfo.from_permission(p) for p in item.permissions],
        )


class AssignRoleResponse(BaseModel):
    success: bool
    message: str
    user_id: str
    role_id: str


class SeedRolesResponse(BaseModel):
    permissions_created: int
    roles_created: int
