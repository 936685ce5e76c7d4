"""
Session Use Case DTOs
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import UserSession


class SessionInfo(BaseModel):
    """Device session as shown to its owner; the session token is never exposed"""

    id: str
    device_id: Optional[str] = None
    device_type: Optional[str] = None
    device_name: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    location: Optional[str] = None
    is_active: bool
    is_current: bool = False
    created_at: datetime
    last_active_at: datetime
    expires_at: datetime

    @classmethod
    def from_session(
        cls, user_session: UserSession, current_session_id: Optional[UUID] = None
    ) -> "SessionInfo":
        return cls(
            id=str(user_session.id),
            device_id=user_session.device_id,
            device_type=user_session.device_type,
            device_name=user_session.device_name,
            ip_address=user_session.ip_address,
            user_agent=user_session.user_agent,
            location=user_session.location,
            is_active=user_session.is_active,
            is_current=current_session_id is not None and user_session.id == current_session_id,
            created_at=user_session.created_at,
            last_active_at=user_session.last_active_at,
            expires_at=user_session.expires_at,
        )


class SessionListResponse(BaseModel):
    """Response for listing sessions"""

    sessions: List[SessionInfo]
    total: int


class TerminateSessionResponse(BaseModel):
    """Response for terminating sessions"""

    success: bool
    message: str
    terminated: int
