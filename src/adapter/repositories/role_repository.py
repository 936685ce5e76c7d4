from typing import Dict, List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.role_repository import IRoleRepository
from src.domain.entities import Permission, Role, RolePermission


class RoleRepository(IRoleRepository):
    """Role and Permission repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> List[Role]:
        """Get all roles ordered by name"""
        stmt = select(Role).order_by(Role.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, role_id: UUID) -> Optional[Role]:
        """Get role by ID"""
        stmt = select(Role).where(Role.id == role_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Role]:
        """Get role by unique name"""
        stmt = select(Role).where(Role.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_default(self) -> Optional[Role]:
        """Get the default role (first by name if several are flagged)"""
        stmt = select(Role).where(Role.is_default == True).order_by(Role.name)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create(self, role: Role) -> Role:
        """Create a new role"""
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def get_permissions_by_role_ids(
        self, role_ids: List[UUID]
    ) -> Dict[UUID, List[Permission]]:
        """Map each role id to its permissions"""
        if not role_ids:
            return {}
        stmt = (
            select(RolePermission.role_id, Permission)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(RolePermission.role_id.in_(role_ids))
            .order_by(Permission.name)
        )
        result = await self.session.execute(stmt)
        permissions: Dict[UUID, List[Permission]] = {role_id: [] for role_id in role_ids}
        for role_id, permission in result.all():
            permissions[role_id].append(permission)
        return permissions

    async def get_permission_by_name(self, name: str) -> Optional[Permission]:
        """Get permission by composite name (resource:action)"""
        stmt = select(Permission).where(Permission.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_permission(self, permission: Permission) -> Permission:
        """Create a new permission"""
        self.session.add(permission)
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def get_role_permission(
        self, role_id: UUID, permission_id: UUID
    ) -> Optional[RolePermission]:
        """Get a role-permission link"""
        stmt = select(RolePermission).where(
            RolePermission.role_id == role_id,
            RolePermission.permission_id == permission_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_permission_to_role(self, role_permission: RolePermission) -> RolePermission:
        """Link a permission to a role"""
        self.session.add(role_permission)
        await self.session.flush()
        await self.session.refresh(role_permission)
        return role_permission
