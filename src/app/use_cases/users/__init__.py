"""
User Use Cases
"""

from .create_user_use_case import CreateUserUseCase
from .delete_user_use_case import DeleteUserUseCase
from .dtos import (
    CreateUserCommand,
    ListUsersQuery,
    UpdateProfileCommand,
    UpdateUserCommand,
    UserDetail,
    UserListResponse,
)
from .get_profile_use_case import GetProfileUseCase
from .get_user_use_case import GetUserUseCase
from .list_users_use_case import ListUsersUseCase
from .update_profile_use_case import UpdateProfileUseCase
from .update_user_use_case import UpdateUserUseCase

__all__ = [
    "CreateUserCommand",
    "CreateUserUseCase",
    "DeleteUserUseCase",
    "GetProfileUseCase",
    "GetUserUseCase",
    "ListUsersQuery",
    "ListUsersUseCase",
    "UpdateProfileCommand",
    "UpdateProfileUseCase",
    "UpdateUserCommand",
    "UpdateUserUseCase",
    "UserDetail",
    "UserListResponse",
]
