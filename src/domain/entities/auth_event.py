"""
AuthEvent Entity

Immutable log of authentication events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from .enums import AuthEventType


class AuthEvent(SQLModel, table=True):
    """
    AuthEvent entity - append-only audit record.

    Business Rules:
    - Immutable (never updated or deleted)
    - user_id nullable for failures before the user is known
    - Feeds suspicious-activity heuristics and login-attempt windows
    """

    __tablename__ = "auth_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_type: AuthEventType = Field(index=True)

    user_id: Optional[UUID] = Field(default=None, index=True)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)

    # Device / network context
    device_id: Optional[str] = Field(default=None, max_length=255)
    device_type: Optional[str] = Field(default=None, max_length=50)
    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    location: Optional[str] = Field(default=None, max_length=255)

    success: Optional[bool] = Field(default=None)
    failure_reason: Optional[str] = Field(default=None, max_length=255)
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_auth_event_created_at", "created_at"),
        Index("idx_auth_event_user_type", "user_id", "event_type"),
    )
