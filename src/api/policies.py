"""
Operation policies

Declared access requirements per HTTP operation. Operations not listed here
require an authenticated caller and nothing more.
"""

from typing import Dict

from src.app.services.access_guard import OperationPolicy, RequiredPermission

PUBLIC = OperationPolicy(public=True)
AUTHENTICATED = OperationPolicy()

POLICIES: Dict[str, OperationPolicy] = {
    "health": PUBLIC,
    "auth.register": PUBLIC,
    "auth.verify_phone": PUBLIC,
    "auth.login": PUBLIC,
    "auth.refresh": PUBLIC,
    "auth.logout": AUTHENTICATED,
    "auth.logout_all": AUTHENTICATED,
    "auth.sessions": AUTHENTICATED,
    "verification.send_otp": AUTHENTICATED,
    "verification.verify_otp": AUTHENTICATED,
    "verification.forgot_password": PUBLIC,
    "verification.reset_password": PUBLIC,
    "sessions.list": AUTHENTICATED,
    "sessions.get": AUTHENTICATED,
    "sessions.terminate": AUTHENTICATED,
    "sessions.terminate_others": AUTHENTICATED,
    "roles.list": OperationPolicy(permissions=(RequiredPermission("role", "list"),)),
    "roles.get": OperationPolicy(permissions=(RequiredPermission("role", "read"),)),
    "roles.assign": OperationPolicy(
        roles=("ADMIN",), permissions=(RequiredPermission("role", "assign"),)
    ),
    "roles.user_roles": OperationPolicy(permissions=(RequiredPermission("role", "read"),)),
    "roles.user_permissions": OperationPolicy(
        permissions=(RequiredPermission("permission", "read"),)
    ),
    "users.me": OperationPolicy(permissions=(RequiredPermission("profile", "read"),)),
    "users.update_me": OperationPolicy(permissions=(RequiredPermission("profile", "update"),)),
    "users.create": OperationPolicy(
        roles=("ADMIN",), permissions=(RequiredPermission("user", "create"),)
    ),
    "users.list": OperationPolicy(
        roles=("ADMIN",), permissions=(RequiredPermission("user", "list"),)
    ),
    "users.get": AUTHENTICATED,
    "users.update": OperationPolicy(
        roles=("ADMIN",), permissions=(RequiredPermission("user", "update"),)
    ),
    "users.delete": OperationPolicy(
        roles=("ADMIN",), permissions=(RequiredPermission("user", "delete"),)
    ),
}


def policy_for(operation: str) -> OperationPolicy:
    return POLICIES.get(operation, AUTHENTICATED)
