"""
Auth Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AuthEventType,
    AuthProvider,
    NotificationChannel,
    UserStatus,
    VerificationType,
)

# Export all entities
from .user import User
from .refresh_token import RefreshToken
from .user_session import UserSession
from .role import Role
from .permission import Permission
from .role_permission import RolePermission
from .user_role import UserRole
from .auth_event import AuthEvent

__all__ = [
    # Enums
    "AuthEventType",
    "AuthProvider",
    "NotificationChannel",
    "UserStatus",
    "VerificationType",
    # Entities
    "User",
    "RefreshToken",
    "UserSession",
    "Role",
    "Permission",
    "RolePermission",
    "UserRole",
    "AuthEvent",
]
