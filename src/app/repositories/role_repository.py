from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import UUID

from src.domain.entities import Permission, Role, RolePermission


class IRoleRepository(ABC):
    """Role and Permission repository interface - application layer"""

    @abstractmethod
    async def list_all(self) -> List[Role]:
        """Get all roles"""
        pass

    @abstractmethod
    async def get_by_id(self, role_id: UUID) -> Optional[Role]:
        """Get role by ID"""
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Role]:
        """Get role by unique name"""
        pass

    @abstractmethod
    async def get_default(self) -> Optional[Role]:
        """Get the role flagged is_default"""
        pass

    @abstractmethod
    async def create(self, role: Role) -> Role:
        """Create a new role"""
        pass

    @abstractmethod
    async def get_permissions_by_role_ids(
        self, role_ids: List[UUID]
    ) -> Dict[UUID, List[Permission]]:
        """Map each role id to its permissions"""
        pass

    @abstractmethod
    async def get_permission_by_name(self, name: str) -> Optional[Permission]:
        """Get permission by composite name (resource:action)"""
        pass

    @abstractmethod
    async def create_permission(self, permission: Permission) -> Permission:
        """Create a new permission"""
        pass

    @abstractmethod
    async def get_role_permission(
        self, role_id: UUID, permission_id: UUID
    ) -> Optional[RolePermission]:
        """Get a role-permission link"""
        pass

    @abstractmethod
    async def add_permission_to_role(
        self, role_permission: RolePermission
    ) -> RolePermission:
        """Link a permission to a role"""
        pass
