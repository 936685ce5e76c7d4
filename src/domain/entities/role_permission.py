"""
RolePermission Entity

Many-to-many join between roles and permissions.
"""

from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel, UniqueConstraint


class RolePermission(SQLModel, table=True):
    """RolePermission entity - unique per (role_id, permission_id)"""

    __tablename__ = "role_permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    role_id: UUID = Field(foreign_key="roles.id", nullable=False, index=True)
    permission_id: UUID = Field(foreign_key="permissions.id", nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )
