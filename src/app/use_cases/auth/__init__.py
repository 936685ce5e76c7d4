"""
Authentication Use Cases

Register, login, token refresh, logout and phone verification flows.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .logout_all_use_case import LogoutAllUseCase
from .verify_phone_use_case import VerifyPhoneUseCase
from .get_active_sessions_use_case import GetActiveSessionsUseCase
from .dtos import (
    ClientContext,
    LoginCommand,
    LoginResponse,
    LogoutResponse,
    RefreshTokenResponse,
    RegisterCommand,
    RegisterResponse,
    UserProfile,
    VerifyPhoneResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "LogoutAllUseCase",
    "VerifyPhoneUseCase",
    "GetActiveSessionsUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "LoginCommand",
    "ClientContext",
    # DTOs - Responses
    "RegisterResponse",
    "LoginResponse",
    "RefreshTokenResponse",
    "LogoutResponse",
    "VerifyPhoneResponse",
    # DTOs - Nested Models
    "UserProfile",
]
