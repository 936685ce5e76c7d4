from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.api.guard import require
from src.app.services.access_guard import Identity
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_service import CONFLICT_CODES
from src.app.use_cases.auth import (
    ClientContext,
    GetActiveSessionsUseCase,
    LoginCommand,
    LoginResponse,
    LoginUseCase,
    LogoutAllUseCase,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    VerifyPhoneResponse,
    VerifyPhoneUseCase,
)
from src.app.use_cases.sessions import SessionListResponse
from src.depends import get_cache, get_clock, get_config, get_notifier, get_unit_of_work

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Password strength is checked by the use case so it reports WEAK_PASSWORD.
    """

    email: EmailStr = Field(..., description="User email address")
    phone: str = Field(..., min_length=5, max_length=32, description="Phone number")
    password: str = Field(..., description="User password")
    username: Optional[str] = Field(None, max_length=64)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    dependencies=[Depends(require("auth.register"))],
)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    cache=Depends(get_cache),
    notifier=Depends(get_notifier),
    clock=Depends(get_clock),
):
    """
    Register a new account

    Creates a pending user, assigns the default role and sends a phone code.

    Raises:
        - 400 Bad Request: Weak password
        - 409 Conflict: Email, phone or username already taken
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    command = RegisterCommand(
        email=request.email,
        phone=request.phone,
        password=request.password,
        username=request.username,
        first_name=request.first_name,
        last_name=request.last_name,
    )

    use_case = RegisterUseCase(uow, config, cache, notifier, clock)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code in CONFLICT_CODES:
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "WEAK_PASSWORD":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class VerifyPhoneRequest(BaseModel):
    phone: str = Field(..., description="Phone number the code was sent to")
    code: str = Field(..., min_length=1, max_length=12, description="One-time code")


@router.post(
    "/verify-phone",
    status_code=status.HTTP_200_OK,
    response_model=VerifyPhoneResponse,
    dependencies=[Depends(require("auth.verify_phone"))],
)
async def verify_phone(
    request: VerifyPhoneRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    cache=Depends(get_cache),
    notifier=Depends(get_notifier),
    clock=Depends(get_clock),
):
    """
    Verify phone with the registration code; activates a pending account

    Raises:
        - 400 Bad Request: Wrong, expired or missing code
        - 404 Not Found: No user with this phone
        - 429 Too Many Requests: Attempt limit reached
    """
    use_case = VerifyPhoneUseCase(uow, config, cache, notifier, clock)
    result = await use_case.execute(request.phone, request.code)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in ("OTP_INVALID", "OTP_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "OTP_TOO_MANY_ATTEMPTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Exactly one of email or phone identifies the account.
    """

    email: Optional[EmailStr] = Field(None, description="User email address")
    phone: Optional[str] = Field(None, description="User phone number")
    password: str = Field(..., description="User password")
    device_id: Optional[str] = Field(None, max_length=255)
    device_type: Optional[str] = Field(None, max_length=64)
    device_name: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)


def _client_context(request: Request, body: LoginRequest) -> ClientContext:
    return ClientContext(
        device_id=body.device_id,
        device_type=body.device_type,
        device_name=body.device_name,
        location=body.location,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
    dependencies=[Depends(require("auth.login"))],
)
async def login(
    body: LoginRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    clock=Depends(get_clock),
):
    """
    User Login

    Authenticates by email or phone and opens a device session.

    Raises:
        - 400 Bad Request: Neither or both identifiers given
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: Account suspended or inactive
    """
    command = LoginCommand(
        email=body.email,
        phone=body.phone,
        password=body.password,
        context=_client_context(request, body),
    )

    use_case = LoginUseCase(uow, config, clock)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "ACCOUNT_NOT_ACTIVE":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "IDENTIFIER_REQUIRED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., description="Refresh token")


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=RefreshTokenResponse,
    dependencies=[Depends(require("auth.refresh"))],
)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    clock=Depends(get_clock),
):
    """
    Refresh JWT Token

    Rotates the refresh token; the presented token cannot be used again.

    Raises:
        - 401 Unauthorized: Unknown, revoked or expired refresh token
    """
    use_case = RefreshTokenUseCase(uow, config, clock)
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_TOKEN":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class LogoutRequest(BaseModel):
    refresh_token: str = Field(..., description="Refresh token of this device")


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    request: LogoutRequest,
    identity: Identity = Depends(require("auth.logout")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    clock=Depends(get_clock),
):
    """Revoke this device's refresh token and end its session"""
    use_case = LogoutUseCase(uow, config, clock)
    result = await use_case.execute(request.refresh_token, identity.user_id)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class LogoutAllRequest(BaseModel):
    refresh_token: Optional[str] = Field(
        None, description="Current refresh token; its session is kept"
    )


@router.post("/logout-all", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout_all(
    request: Optional[LogoutAllRequest] = None,
    identity: Identity = Depends(require("auth.logout_all")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    clock=Depends(get_clock),
):
    """Revoke every refresh token and session of the caller, optionally keeping this one"""
    current = request.refresh_token if request else None

    use_case = LogoutAllUseCase(uow, config, clock)
    result = await use_case.execute(identity.user_id, current)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get("/sessions", status_code=status.HTTP_200_OK, response_model=SessionListResponse)
async def get_sessions(
    identity: Identity = Depends(require("auth.sessions")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock=Depends(get_clock),
):
    """Active sessions of the caller, most recently used first"""
    use_case = GetActiveSessionsUseCase(uow, clock)
    result = await use_case.execute(identity.user_id, identity.session_id)

    if result.is_err():
        raise ServerError(result.error)

    return result.value
