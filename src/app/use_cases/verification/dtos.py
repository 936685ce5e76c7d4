"""
Verification Use Case DTOs
"""

from pydantic import BaseModel


class SendOtpResponse(BaseModel):
    """Response for sending a verification code"""

    success: bool
    message: str
    expires_in: int


class VerificationResponse(BaseModel):
    """Generic outcome of a verification step"""

    success: bool
    message: str
