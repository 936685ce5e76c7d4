"""
RefreshToken Entity

Opaque long-lived credentials used to mint new access tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class RefreshToken(SQLModel, table=True):
    """
    RefreshToken entity - one link of a rotation chain.

    Business Rules:
    - Token value is 40 random bytes, hex-encoded (80 chars), unique
    - Usable only while not revoked and expires_at is in the future
    - Rotation revokes this token and sets replaced_by_token to the successor's id
    - Revocation is one-way
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    token: str = Field(unique=True, index=True, max_length=80)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    device_id: Optional[str] = Field(default=None, max_length=255)
    device_type: Optional[str] = Field(default=None, max_length=50)

    is_revoked: bool = Field(default=False)
    replaced_by_token: Optional[UUID] = Field(default=None)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_refresh_token_expires_at", "expires_at"),
        Index("idx_refresh_token_user_revoked", "user_id", "is_revoked"),
    )
