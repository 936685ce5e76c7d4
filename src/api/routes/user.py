from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.error import ClientError, ServerError
from src.api.guard import require
from src.app.services.access_guard import Identity
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_service import CONFLICT_CODES
from src.app.use_cases.auth import UserProfile
from src.app.use_cases.users import (
    CreateUserCommand,
    CreateUserUseCase,
    DeleteUserUseCase,
    GetProfileUseCase,
    GetUserUseCase,
    ListUsersQuery,
    ListUsersUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
    UpdateUserCommand,
    UpdateUserUseCase,
    UserDetail,
    UserListResponse,
)
from src.depends import get_clock, get_config, get_unit_of_work
from src.domain.entities import UserStatus

router = APIRouter(prefix="/users", tags=["User"])


def _raise_for(error):
    if error.code == "USER_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code in CONFLICT_CODES:
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    if error.code in ("WEAK_PASSWORD", "VALIDATION_ERROR"):
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    if error.code == "FORBIDDEN":
        raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
    raise ServerError(error)


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def get_me(
    identity: Identity = Depends(require("users.me")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current user's profile

    Raises:
        - 401 Unauthorized: Missing or invalid access token
        - 404 Not Found: Account no longer exists
    """
    use_case = GetProfileUseCase(uow)
    result = await use_case.execute(identity.user_id)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.patch("/me", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def update_me(
    request: UpdateProfileCommand,
    identity: Identity = Depends(require("users.update_me")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock=Depends(get_clock),
):
    """
    Edit username, names or profile picture

    Raises:
        - 400 Bad Request: email, phone or status supplied
        - 409 Conflict: Username already taken
    """
    result = await UpdateProfileUseCase(uow, clock).execute(identity.user_id, request)
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserProfile,
    dependencies=[Depends(require("users.create"))],
)
async def create_user(
    request: CreateUserCommand,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    clock=Depends(get_clock),
):
    """
    Create a user without phone verification

    Raises:
        - 400 Bad Request: Weak password
        - 409 Conflict: Email, phone or username already taken
    """
    result = await CreateUserUseCase(uow, config, clock).execute(request)
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=UserListResponse,
    dependencies=[Depends(require("users.list"))],
)
async def list_users(
    skip: int = Query(0, ge=0),
    take: int = Query(10, ge=1, le=100),
    order_by: Literal["created_at", "updated_at", "last_login_at", "email", "username"] = Query(
        "created_at"
    ),
    order_direction: Literal["asc", "desc"] = Query("desc"),
    status_filter: Optional[UserStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Paged user list, filterable by status and searchable by email, phone, username or name"""
    query = ListUsersQuery(
        skip=skip,
        take=take,
        order_by=order_by,
        order_direction=order_direction,
        status=status_filter,
        search=search,
    )
    result = await ListUsersUseCase(uow).execute(query)
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserDetail)
async def get_user(
    user_id: UUID,
    identity: Identity = Depends(require("users.get")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    User with roles and permissions; other users need user:read

    Raises:
        - 403 Forbidden: Reading another user without user:read
        - 404 Not Found: No such user
    """
    result = await GetUserUseCase(uow).execute(identity.user_id, user_id)
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.patch(
    "/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=UserProfile,
    dependencies=[Depends(require("users.update"))],
)
async def update_user(
    user_id: UUID,
    request: UpdateUserCommand,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    clock=Depends(get_clock),
):
    """
    Administrative update; suspending, deactivating or resetting the
    password signs the user out everywhere

    Raises:
        - 400 Bad Request: Weak password
        - 404 Not Found: No such user
        - 409 Conflict: Email, phone or username already taken
    """
    result = await UpdateUserUseCase(uow, config, clock).execute(user_id, request)
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require("users.delete"))],
)
async def delete_user(user_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Raises:
        - 404 Not Found: No such user
    """
    result = await DeleteUserUseCase(uow).execute(user_id)
    if result.is_err():
        _raise_for(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
