"""
Auth Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    pending_verification = "pending_verification"
    active = "active"
    inactive = "inactive"
    suspended = "suspended"


class AuthProvider(str, Enum):
    """Where the user's identity is authenticated"""

    local = "local"
    google = "google"
    facebook = "facebook"
    apple = "apple"


class VerificationType(str, Enum):
    """OTP verification flows"""

    EMAIL = "EMAIL"
    PHONE = "PHONE"
    PASSWORD_RESET = "PASSWORD_RESET"


class NotificationChannel(str, Enum):
    """Notifier delivery channel"""

    email = "email"
    sms = "sms"


class AuthEventType(str, Enum):
    """Audit event types"""

    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILURE = "LOGIN_FAILURE"
    REGISTRATION = "REGISTRATION"
    PASSWORD_RESET_REQUEST = "PASSWORD_RESET_REQUEST"
    PASSWORD_RESET_COMPLETE = "PASSWORD_RESET_COMPLETE"
    EMAIL_VERIFICATION = "EMAIL_VERIFICATION"
    PHONE_VERIFICATION = "PHONE_VERIFICATION"
    LOGOUT = "LOGOUT"
    TOKEN_REFRESH = "TOKEN_REFRESH"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    SUSPICIOUS_ACTIVITY = "SUSPICIOUS_ACTIVITY"
