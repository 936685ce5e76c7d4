from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.error import ClientError, ServerError
from src.api.guard import require
from src.app.services.access_guard import Identity
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import GetActiveSessionsUseCase
from src.app.use_cases.sessions import (
    GetSessionUseCase,
    SessionInfo,
    SessionListResponse,
    TerminateOtherSessionsUseCase,
    TerminateSessionResponse,
    TerminateSessionUseCase,
)
from src.depends import get_clock, get_unit_of_work

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.get("", status_code=status.HTTP_200_OK, response_model=SessionListResponse)
async def list_sessions(
    identity: Identity = Depends(require("sessions.list")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock=Depends(get_clock),
):
    """Active sessions of the caller; the current one is flagged"""
    use_case = GetActiveSessionsUseCase(uow, clock)
    result = await use_case.execute(identity.user_id, identity.session_id)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.delete("", status_code=status.HTTP_200_OK, response_model=TerminateSessionResponse)
async def terminate_other_sessions(
    identity: Identity = Depends(require("sessions.terminate_others")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock=Depends(get_clock),
):
    """
    Terminate every session of the caller except the current one

    Raises:
        - 400 Bad Request: Access token carries no session id
    """
    use_case = TerminateOtherSessionsUseCase(uow, clock)
    result = await use_case.execute(identity.user_id, identity.session_id)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.get("/{session_id}", status_code=status.HTTP_200_OK, response_model=SessionInfo)
async def get_session(
    session_id: UUID,
    identity: Identity = Depends(require("sessions.get")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock=Depends(get_clock),
):
    """
    Read one session

    Raises:
        - 403 Forbidden: Session belongs to another user
        - 404 Not Found: Session not found
    """
    use_case = GetSessionUseCase(uow, clock)
    result = await use_case.execute(identity.user_id, session_id, identity.session_id)

    if result.is_err():
        error = result.error
        if error.code == "SESSION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "FORBIDDEN":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


@router.delete(
    "/{session_id}", status_code=status.HTTP_200_OK, response_model=TerminateSessionResponse
)
async def terminate_session(
    session_id: UUID,
    identity: Identity = Depends(require("sessions.terminate")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock=Depends(get_clock),
):
    """
    Terminate one of the caller's sessions

    Raises:
        - 403 Forbidden: Session belongs to another user
        - 404 Not Found: Session not found
    """
    use_case = TerminateSessionUseCase(uow, clock)
    result = await use_case.execute(identity.user_id, session_id)

    if result.is_err():
        error = result.error
        if error.code == "SESSION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "FORBIDDEN":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value
