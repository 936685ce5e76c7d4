"""
Role Use Cases

Role catalogue, assignment and effective permission lookups.
"""

from .list_roles_use_case import GetRoleUseCase, ListRolesUseCase
from .assign_role_use_case import AssignRoleUseCase
from .get_user_roles_use_case import GetUserPermissionsUseCase, GetUserRolesUseCase
from .seed_roles_use_case import SeedRolesUseCase
from .dtos import AssignRoleResponse, PermissionInfo, RoleInfo, SeedRolesResponse

__all__ = [
    "ListRolesUseCase",
    "GetRoleUseCase",
    "AssignRoleUseCase",
    "GetUserRolesUseCase",
    "GetUserPermissionsUseCase",
    "SeedRolesUseCase",
    "RoleInfo",
    "PermissionInfo",
    "AssignRoleResponse",
    "SeedRolesResponse",
]
