"""
UserRole Entity

Role assignment of a user.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel, UniqueConstraint


class UserRole(SQLModel, table=True):
    """
    UserRole entity - join between users and roles.

    Business Rules:
    - Unique per (user_id, role_id); assigning twice is a no-op
    """

    __tablename__ = "user_roles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    role_id: UUID = Field(foreign_key="roles.id", nullable=False, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_role"),)
