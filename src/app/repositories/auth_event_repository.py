from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import AuthEvent, AuthEventType


class IAuthEventRepository(ABC):
    """AuthEvent repository interface - application layer"""

    @abstractmethod
    async def create(self, auth_event: AuthEvent) -> AuthEvent:
        """Create a new auth event (immutable)"""
        pass

    @abstractmethod
    async def get_recent_by_user(
        self,
        user_id: UUID,
        event_type: AuthEventType,
        since: datetime,
        limit: int,
    ) -> List[AuthEvent]:
        """Events of one type for a user since a point in time, newest first"""
        pass

    @abstractmethod
    async def count_failures_since(
        self,
        since: datetime,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        user_id: Optional[UUID] = None,
    ) -> int:
        """
        Count LOGIN_FAILURE events since a point in time matching any of the
        supplied identifiers.
        """
        pass
