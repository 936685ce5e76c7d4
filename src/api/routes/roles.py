from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.guard import require
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.roles import (
    AssignRoleResponse,
    AssignRoleUseCase,
    GetRoleUseCase,
    GetUserPermissionsUseCase,
    GetUserRolesUseCase,
    ListRolesUseCase,
    PermissionInfo,
    RoleInfo,
)
from src.depends import get_unit_of_work

router = APIRouter(prefix="/roles", tags=["Roles"])


def _raise_for(error):
    if error.code in ("ROLE_NOT_FOUND", "USER_NOT_FOUND"):
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    raise ServerError(error)


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=List[RoleInfo],
    dependencies=[Depends(require("roles.list"))],
)
async def list_roles(uow: UnitOfWork = Depends(get_unit_of_work)):
    """All roles with their permissions"""
    result = await ListRolesUseCase(uow).execute()
    if result.is_err():
        _raise_for(result.error)
    return result.value


class AssignRoleRequest(BaseModel):
    user_id: UUID = Field(..., description="User receiving the role")
    role_id: UUID = Field(..., description="Role to assign")


@router.post(
    "/assign",
    status_code=status.HTTP_200_OK,
    response_model=AssignRoleResponse,
    dependencies=[Depends(require("roles.assign"))],
)
async def assign_role(request: AssignRoleRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Assign a role to a user; assigning a held role again is a no-op

    Raises:
        - 404 Not Found: User or role not found
    """
    result = await AssignRoleUseCase(uow).execute(request.user_id, request.role_id)
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.get(
    "/user/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=List[RoleInfo],
    dependencies=[Depends(require("roles.user_roles"))],
)
async def get_user_roles(user_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await GetUserRolesUseCase(uow).execute(user_id)
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.get(
    "/user/{user_id}/permissions",
    status_code=status.HTTP_200_OK,
    response_model=List[PermissionInfo],
    dependencies=[Depends(require("roles.user_permissions"))],
)
async def get_user_permissions(user_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    """Effective permissions: union over the user's roles"""
    result = await GetUserPermissionsUseCase(uow).execute(user_id)
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.get(
    "/{role_id}",
    status_code=status.HTTP_200_OK,
    response_model=RoleInfo,
    dependencies=[Depends(require("roles.get"))],
)
async def get_role(role_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Raises:
        - 404 Not Found: Role not found
    """
    result = await GetRoleUseCase(uow).execute(role_id)
    if result.is_err():
        _raise_for(result.error)
    return result.value
