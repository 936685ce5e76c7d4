"""
User Use Case DTOs
"""

from typing import List, Literal, Optional

from pydantic import BaseModel

from src.app.use_cases.auth.dtos import UserProfile
from src.domain.entities import UserStatus


class UpdateProfileCommand(BaseModel):
    """
    Self-service profile edit.

    email, phone and status are carried only so the use case can reject them;
    those change through verification or administration.
    """

    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_picture: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[UserStatus] = None


class CreateUserCommand(BaseModel):
    email: str
    password: str
    phone: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    status: UserStatus = UserStatus.active


class UpdateUserCommand(BaseModel):
    """Administrative edit; only fields that are set are applied"""

    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_picture: Optional[str] = None
    status: Optional[UserStatus] = None


class ListUsersQuery(BaseModel):
    skip: int = 0
    take: int = 10
    order_by: Literal["created_at", "updated_at", "last_login_at", "email", "username"] = (
        "created_at"
    )
    order_direction: Literal["asc", "desc"] = "desc"
    status: Optional[UserStatus] = None
    search: Optional[str] = None


class UserListResponse(BaseModel):
    users: List[UserProfile]
    total: int
    skip: int
    take: int


class UserDetail(UserProfile):
    """Profile with role names and effective permission names"""

    roles: List[str]
    permissions: List[str]
