"""
Role Entity

Named bundle of permissions assigned to users.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class Role(SQLModel, table=True):
    """
    Role entity.

    Business Rules:
    - Name is unique
    - Exactly one role should be flagged is_default; new users receive it
    """

    __tablename__ = "roles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)
    is_default: bool = Field(default=False, index=True)
