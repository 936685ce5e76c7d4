"""
UserSession Entity

Human-visible device/login record, independent of token rotation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class UserSession(SQLModel, table=True):
    """
    UserSession entity - tracks an active device session.

    Business Rules:
    - Token is the SHA-256 hex digest of a fresh UUID, unique
    - Persists across refresh token rotations (refresh_token_id follows the chain)
    - Inactive sessions are never reported as active
    - last_active_at only moves forward while the session is active
    """

    __tablename__ = "user_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    token: str = Field(unique=True, index=True, max_length=64)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    refresh_token_id: Optional[UUID] = Field(default=None, index=True)

    # Device metadata
    device_id: Optional[str] = Field(default=None, max_length=255)
    device_type: Optional[str] = Field(default=None, max_length=50)
    device_name: Optional[str] = Field(default=None, max_length=255)
    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    location: Optional[str] = Field(default=None, max_length=255)

    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    last_active_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_user_session_expires_at", "expires_at"),
        Index("idx_user_session_user_active", "user_id", "is_active"),
    )
