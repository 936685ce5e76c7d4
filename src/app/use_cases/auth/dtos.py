"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.domain.entities import User


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """Register command - validated registration intent"""

    email: str
    phone: str
    password: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ClientContext(BaseModel):
    """Device and network context reported by the caller"""

    device_id: Optional[str] = None
    device_type: Optional[str] = None
    device_name: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    location: Optional[str] = None


class LoginCommand(BaseModel):
    """Login command - exactly one of email or phone is expected"""

    password: str
    email: Optional[str] = None
    phone: Optional[str] = None
    context: ClientContext = ClientContext()


# ============================================================================
# Response DTOs
# ============================================================================


class UserProfile(BaseModel):
    """Public view of a user; never carries the password hash"""

    id: str
    email: str
    phone: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    status: str
    email_verified: bool
    phone_verified: bool
    auth_provider: str
    profile_picture: Optional[str] = None
    created_at: datetime
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=str(user.id),
            email=user.email,
            phone=user.phone,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            status=user.status.value,
            email_verified=user.email_verified,
            phone_verified=user.phone_verified,
            auth_provider=user.auth_provider.value,
            profile_picture=user.profile_picture,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )


class RegisterResponse(BaseModel):
    """Response for registration"""

    user: UserProfile
    verification_sent: bool
    message: str


class LoginResponse(BaseModel):
    """Response for login"""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    session_id: str
    user: UserProfile


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    session_id: Optional[str] = None
    user: UserProfile


class LogoutResponse(BaseModel):
    """Response for logout and logout-all"""

    success: bool
    message: str
    sessions_terminated: int = 0
    tokens_revoked: int = 0


class VerifyPhoneResponse(BaseModel):
    """Response for phone verification after registration"""

    success: bool
    message: str
    user: UserProfile
