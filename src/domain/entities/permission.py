"""
Permission Entity

A (resource, action) pair such as user:create.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel, UniqueConstraint


class Permission(SQLModel, table=True):
    """Permission entity - unique by (resource, action) and by composite name"""

    __tablename__ = "permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=150)  # "resource:action"
    resource: str = Field(max_length=64)
    action: str = Field(max_length=64)
    description: Optional[str] = Field(default=None, max_length=255)

    __table_args__ = (
        UniqueConstraint("resource", "action", name="uq_permission_resource_action"),
    )

    @staticmethod
    def compose_name(resource: str, action: str) -> str:
        return f"{resource}:{action}"
