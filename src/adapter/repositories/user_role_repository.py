from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_role_repository import IUserRoleRepository
from src.domain.entities import Permission, Role, RolePermission, UserRole


class UserRoleRepository(IUserRoleRepository):
    """UserRole repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: UUID, role_id: UUID) -> Optional[UserRole]:
        """Get the assignment of a role to a user"""
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, user_role: UserRole) -> UserRole:
        """Assign a role to a user"""
        self.session.add(user_role)
        await self.session.flush()
        await self.session.refresh(user_role)
        return user_role

    async def get_roles_by_user_id(self, user_id: UUID) -> List[Role]:
        """Get all roles assigned to a user"""
        stmt = (
            select(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_permissions_by_user_id(self, user_id: UUID) -> List[Permission]:
        """Permissions across all of a user's roles, one row per role link"""
        stmt = (
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .where(UserRole.user_id == user_id)
            .order_by(Permission.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_role_name(self, user_id: UUID, role_name: str) -> int:
        """Count assignments of the named role to a user"""
        stmt = (
            select(func.count())
            .select_from(UserRole)
            .join(Role, Role.id == UserRole.role_id)
            .where(UserRole.user_id == user_id, Role.name == role_name)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def count_by_permission(self, user_id: UUID, resource: str, action: str) -> int:
        """Count role links granting (resource, action) to a user"""
        stmt = (
            select(func.count())
            .select_from(UserRole)
            .join(RolePermission, RolePermission.role_id == UserRole.role_id)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(
                UserRole.user_id == user_id,
                Permission.resource == resource,
                Permission.action == action,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
