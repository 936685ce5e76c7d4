"""
User Entity

Identity record owned by the credential store.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import AuthProvider, UserStatus


class User(SQLModel, table=True):
    """
    User entity - identity, credentials and verification flags.

    Business Rules:
    - Email must be unique across all users
    - Phone and username are unique when present
    - Password stored as bcrypt hash; absent for externally-authenticated users
    - Created as pending_verification, promoted to active by phone OTP
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    phone: Optional[str] = Field(default=None, unique=True, index=True, max_length=32)
    username: Optional[str] = Field(default=None, unique=True, index=True, max_length=64)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    password_hash: Optional[str] = Field(default=None, max_length=60)  # Bcrypt output

    status: UserStatus = Field(default=UserStatus.pending_verification)
    email_verified: bool = Field(default=False)
    phone_verified: bool = Field(default=False)
    auth_provider: AuthProvider = Field(default=AuthProvider.local)
    profile_picture: Optional[str] = Field(default=None, max_length=512)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    password_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_user_status", "status"),)
