"""
Role Service

Resolves roles and effective permissions, and manages role assignment.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Permission, Role, RolePermission, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoleWithPermissions:
    role: Role
    permissions: List[Permission]


# (resource, action, description)
DEFAULT_PERMISSIONS: Sequence[Tuple[str, str, str]] = (
    ("user", "create", "Create users"),
    ("user", "read", "View users"),
    ("user", "update", "Update users"),
    ("user", "delete", "Delete users"),
    ("user", "list", "List all users"),
    ("role", "create", "Create roles"),
    ("role", "read", "View roles"),
    ("role", "update", "Update roles"),
    ("role", "delete", "Delete roles"),
    ("role", "list", "List all roles"),
    ("role", "assign", "Assign roles to users"),
    ("permission", "create", "Create permissions"),
    ("permission", "read", "View permissions"),
    ("permission", "update", "Update permissions"),
    ("permission", "delete", "Delete permissions"),
    ("permission", "list", "List all permissions"),
    ("permission", "assign", "Assign permissions to roles"),
    ("profile", "read", "View own profile"),
    ("profile", "update", "Update own profile"),
    ("session", "read", "View own sessions"),
    ("session", "delete", "Delete own sessions"),
    ("settings", "read", "View system settings"),
    ("settings", "update", "Update system settings"),
    ("analytics", "read", "View analytics data"),
    ("audit", "read", "View audit logs"),
)

# (name, description, is_default, permission names or None for all)
DEFAULT_ROLES: Sequence[Tuple[str, str, bool, Optional[Sequence[str]]]] = (
    ("ADMIN", "Administrator with full system access", False, None),
    (
        "USER",
        "Regular user with limited access",
        True,
        ("profile:read", "profile:update", "session:read", "session:delete"),
    ),
)


class RoleService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def _with_permissions(self, roles: List[Role]) -> List[RoleWithPermissions]:
        permissions = await self.uow.roles.get_permissions_by_role_ids([r.id for r in roles])
        return [RoleWithPermissions(role=r, permissions=permissions.get(r.id, [])) for r in roles]

    async def get_all_roles(self) -> List[RoleWithPermissions]:
        return await self._with_permissions(await self.uow.roles.list_all())

    async def get_role_by_id(self, role_id: UUID) -> Optional[RoleWithPermissions]:
        role = await self.uow.roles.get_by_id(role_id)
        if role is None:
            return None
        return (await self._with_permissions([role]))[0]

    async def get_role_by_name(self, name: str) -> Optional[Role]:
        return await self.uow.roles.get_by_name(name)

    async def get_default_role(self) -> Optional[Role]:
        return await self.uow.roles.get_default()

    async def get_user_roles(self, user_id: UUID) -> List[RoleWithPermissions]:
        return await self._with_permissions(
            await self.uow.user_roles.get_roles_by_user_id(user_id)
        )

    async def get_user_permissions(self, user_id: UUID) -> List[Permission]:
        """Effective permissions: union across roles, each permission once"""
        unique: Dict[UUID, Permission] = {}
        for permission in await self.uow.user_roles.get_permissions_by_user_id(user_id):
            unique.setdefault(permission.id, permission)
        return list(unique.values())

    async def assign_role_to_user(self, user_id: UUID, role_id: UUID) -> UserRole:
        """
        Idempotent: returns the existing assignment when already present,
        including one inserted concurrently between the check and the insert.
        """
        existing = await self.uow.user_roles.get(user_id, role_id)
        if existing is not None:
            return existing

        try:
            user_role = await self.uow.user_roles.create(UserRole(user_id=user_id, role_id=role_id))
            await self.uow.commit()
        except IntegrityError:
            await self.uow.rollback()
            existing = await self.uow.user_roles.get(user_id, role_id)
            if existing is None:
                raise
            logger.info(f"Role {role_id} was assigned to user {user_id} concurrently")
            return existing
        return user_role

    async def assign_default_role_to_user(self, user_id: UUID) -> Optional[UserRole]:
        default_role = await self.uow.roles.get_default()
        if default_role is None:
            logger.warning("No default role configured; user left without roles")
            return None
        return await self.assign_role_to_user(user_id, default_role.id)

    async def user_has_role(self, user_id: UUID, role_name: str) -> bool:
        return await self.uow.user_roles.count_by_role_name(user_id, role_name) > 0

    async def user_has_permission(self, user_id: UUID, resource: str, action: str) -> bool:
        return await self.uow.user_roles.count_by_permission(user_id, resource, action) > 0

    async def seed_roles(self) -> Dict[str, int]:
        """Create the default permission catalogue and roles; safe to re-run"""
        created_permissions = 0
        created_roles = 0
        permissions_by_name: Dict[str, Permission] = {}

        for resource, action, description in DEFAULT_PERMISSIONS:
            name = Permission.compose_name(resource, action)
            permission = await self.uow.roles.get_permission_by_name(name)
            if permission is None:
                permission = await self.uow.roles.create_permission(
                    Permission(name=name, resource=resource, action=action, description=description)
                )
                created_permissions += 1
            permissions_by_name[name] = permission

        for name, description, is_default, granted in DEFAULT_ROLES:
            role = await self.uow.roles.get_by_name(name)
            if role is None:
                role = await self.uow.roles.create(
                    Role(name=name, description=description, is_default=is_default)
                )
                created_roles += 1
            for permission_name in granted or list(permissions_by_name):
                permission = permissions_by_name[permission_name]
                link = await self.uow.roles.get_role_permission(role.id, permission.id)
                if link is None:
                    await self.uow.roles.add_permission_to_role(
                        RolePermission(role_id=role.id, permission_id=permission.id)
                    )

        await self.uow.commit()
        logger.info(f"Seeded {created_permissions} permission(s) and {created_roles} role(s)")
        return {"permissions": created_permissions, "roles": created_roles}
