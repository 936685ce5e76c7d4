from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import UserSession


class IUserSessionRepository(ABC):
    """UserSession repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[UserSession]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[UserSession]:
        """Get session by its session-tracking token"""
        pass

    @abstractmethod
    async def get_by_refresh_token_id(
        self, refresh_token_id: UUID
    ) -> Optional[UserSession]:
        """Get the session currently linked to a refresh token"""
        pass

    @abstractmethod
    async def get_active_by_user_id(
        self, user_id: UUID, now: datetime
    ) -> List[UserSession]:
        """Active, unexpired sessions ordered by last_active_at DESC"""
        pass

    @abstractmethod
    async def create(self, user_session: UserSession) -> UserSession:
        """Create a new session"""
        pass

    @abstractmethod
    async def touch(
        self,
        session_id: UUID,
        now: datetime,
        refresh_token_id: Optional[UUID] = None,
    ) -> Optional[UserSession]:
        """Move last_active_at forward (never backward) on an active session"""
        pass

    @abstractmethod
    async def deactivate(self, session_id: UUID) -> Optional[UserSession]:
        """Mark a session inactive"""
        pass

    @abstractmethod
    async def deactivate_all_by_user_id(
        self, user_id: UUID, except_session_id: Optional[UUID] = None
    ) -> int:
        """Deactivate all active sessions of a user. Returns count."""
        pass

    @abstractmethod
    async def deactivate_expired(self, now: datetime) -> int:
        """Deactivate active sessions whose expiry has passed. Returns count."""
        pass
