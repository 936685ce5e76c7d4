"""
Verification Use Cases

OTP send/verify and password reset flows.
"""

from .send_otp_use_case import SendOtpUseCase
from .verify_otp_use_case import VerifyOtpUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .dtos import SendOtpResponse, VerificationResponse

__all__ = [
    "SendOtpUseCase",
    "VerifyOtpUseCase",
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
    "SendOtpResponse",
    "VerificationResponse",
]
