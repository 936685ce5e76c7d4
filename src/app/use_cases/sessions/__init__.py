"""
Session Use Cases

Read and terminate individual device sessions.
"""

from .get_session_use_case import GetSessionUseCase
from .terminate_session_use_case import TerminateOtherSessionsUseCase, TerminateSessionUseCase
from .dtos import SessionInfo, SessionListResponse, TerminateSessionResponse

__all__ = [
    "GetSessionUseCase",
    "TerminateSessionUseCase",
    "TerminateOtherSessionsUseCase",
    "SessionInfo",
    "SessionListResponse",
    "TerminateSessionResponse",
]
