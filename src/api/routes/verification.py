from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.api.guard import require
from src.app.services.access_guard import Identity
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.verification import (
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
    SendOtpResponse,
    SendOtpUseCase,
    VerificationResponse,
    VerifyOtpUseCase,
)
from src.domain.entities import VerificationType
from src.depends import get_cache, get_clock, get_config, get_notifier, get_unit_of_work

router = APIRouter(prefix="/verification", tags=["Verification"])

_BAD_REQUEST_CODES = ("OTP_INVALID", "OTP_NOT_FOUND", "VALIDATION_ERROR", "WEAK_PASSWORD")
_TOO_MANY_CODES = ("OTP_COOLDOWN", "OTP_TOO_MANY_ATTEMPTS")


def _raise_for(error):
    if error.code in _BAD_REQUEST_CODES:
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    elif error.code in _TOO_MANY_CODES:
        raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
    elif error.code == "USER_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    elif error.code == "INVALID_CREDENTIALS":
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    raise ServerError(error)


class SendOtpRequest(BaseModel):
    type: VerificationType = Field(..., description="EMAIL, PHONE or PASSWORD_RESET")


@router.post("/send-otp", status_code=status.HTTP_200_OK, response_model=SendOtpResponse)
async def send_otp(
    request: SendOtpRequest,
    identity: Identity = Depends(require("verification.send_otp")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    cache=Depends(get_cache),
    notifier=Depends(get_notifier),
    clock=Depends(get_clock),
):
    """
    Send a verification code to the caller's email or phone on record

    Raises:
        - 400 Bad Request: No phone on file for a PHONE code
        - 429 Too Many Requests: Resend cooldown active
        - 500 Internal Server Error: Code could not be stored or delivered
    """
    use_case = SendOtpUseCase(uow, config, cache, notifier, clock)
    result = await use_case.execute(identity.user_id, request.type)

    if result.is_err():
        _raise_for(result.error)

    return result.value


class VerifyOtpRequest(BaseModel):
    type: VerificationType = Field(..., description="EMAIL, PHONE or PASSWORD_RESET")
    code: str = Field(..., min_length=1, max_length=12, description="One-time code")


@router.post("/verify-otp", status_code=status.HTTP_200_OK, response_model=VerificationResponse)
async def verify_otp(
    request: VerifyOtpRequest,
    identity: Identity = Depends(require("verification.verify_otp")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    cache=Depends(get_cache),
    notifier=Depends(get_notifier),
    clock=Depends(get_clock),
):
    """
    Check a verification code for the caller

    Raises:
        - 400 Bad Request: Wrong, expired or missing code
        - 429 Too Many Requests: Attempt limit reached; a new code is required
    """
    use_case = VerifyOtpUseCase(uow, config, cache, notifier, clock)
    result = await use_case.execute(identity.user_id, request.type, request.code)

    if result.is_err():
        _raise_for(result.error)

    return result.value


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=VerificationResponse,
    dependencies=[Depends(require("verification.forgot_password"))],
)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    cache=Depends(get_cache),
    notifier=Depends(get_notifier),
    clock=Depends(get_clock),
):
    """
    Request a password reset code

    Answers the same way whether or not the email is registered.

    Raises:
        - 429 Too Many Requests: Resend cooldown active
    """
    use_case = RequestPasswordResetUseCase(uow, config, cache, notifier, clock)
    result = await use_case.execute(request.email)

    if result.is_err():
        _raise_for(result.error)

    return result.value


class ResetPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")
    code: str = Field(..., min_length=1, max_length=12, description="Reset code")
    new_password: str = Field(..., description="New password")


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=VerificationResponse,
    dependencies=[Depends(require("verification.reset_password"))],
)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    cache=Depends(get_cache),
    notifier=Depends(get_notifier),
    clock=Depends(get_clock),
):
    """
    Reset the password with a code; signs the account out everywhere

    Raises:
        - 400 Bad Request: Weak password, unknown email, wrong or expired code
        - 429 Too Many Requests: Attempt limit reached
    """
    use_case = ResetPasswordUseCase(uow, config, cache, notifier, clock)
    result = await use_case.execute(request.email, request.code, request.new_password)

    if result.is_err():
        _raise_for(result.error)

    return result.value
