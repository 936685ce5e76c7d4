from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Permission, Role, UserRole


class IUserRoleRepository(ABC):
    """UserRole repository interface - application layer"""

    @abstractmethod
    async def get(self, user_id: UUID, role_id: UUID) -> Optional[UserRole]:
        """Get the assignment of a role to a user"""
        pass

    @abstractmethod
    async def create(self, user_role: UserRole) -> UserRole:
        """Assign a role to a user"""
        pass

    @abstractmethod
    async def get_roles_by_user_id(self, user_id: UUID) -> List[Role]:
        """Get all roles assigned to a user"""
        pass

    @abstractmethod
    async def get_permissions_by_user_id(self, user_id: UUID) -> List[Permission]:
        """
        Get permissions across all of a user's roles.

        May contain the same permission more than once when roles overlap.
        """
        pass

    @abstractmethod
    async def count_by_role_name(self, user_id: UUID, role_name: str) -> int:
        """Count assignments of the named role to a user"""
        pass

    @abstractmethod
    async def count_by_permission(
        self, user_id: UUID, resource: str, action: str
    ) -> int:
        """Count role links granting (resource, action) to a user"""
        pass
