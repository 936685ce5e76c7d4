"""
Session Service

Tracks human-visible device sessions, separate from refresh token rotation.
"""

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import UserSession

logger = logging.getLogger(__name__)


def generate_session_token() -> str:
    return hashlib.sha256(str(uuid4()).encode("utf-8")).hexdigest()


@dataclass
class SessionCreateData:
    user_id: UUID
    expires_at: datetime
    refresh_token_id: Optional[UUID] = None
    device_id: Optional[str] = None
    device_type: Optional[str] = None
    device_name: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    location: Optional[str] = None


class SessionService:
    """
    Session registry.

    Business Rules:
    - Deactivating a session never touches refresh tokens
    - Activity bumps are best-effort: failures are logged, never raised
    - Sweeps only flip active -> inactive, so overlapping runs never double count
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or Clock()

    async def create_session(
        self, data: SessionCreateData, session_id: Optional[UUID] = None
    ) -> UserSession:
        now = self.clock.now()
        user_session = UserSession(
            id=session_id or uuid4(),
            token=generate_session_token(),
            user_id=data.user_id,
            refresh_token_id=data.refresh_token_id,
            device_id=data.device_id,
            device_type=data.device_type,
            device_name=data.device_name,
            ip_address=data.ip_address,
            user_agent=data.user_agent,
            location=data.location,
            expires_at=data.expires_at,
            is_active=True,
            created_at=now,
            last_active_at=now,
        )
        user_session = await self.uow.user_sessions.create(user_session)
        await self.uow.commit()
        return user_session

    async def find_session_by_id(self, session_id: UUID) -> Optional[UserSession]:
        return await self.uow.user_sessions.get_by_id(session_id)

    async def find_session_by_token(self, token: str) -> Optional[UserSession]:
        return await self.uow.user_sessions.get_by_token(token)

    async def find_session_by_refresh_token(
        self, refresh_token: str
    ) -> Optional[UserSession]:
        """Resolve the session whose chain currently ends at this refresh token"""
        stored = await self.uow.refresh_tokens.get_by_token(refresh_token)
        if stored is None:
            return None
        return await self.uow.user_sessions.get_by_refresh_token_id(stored.id)

    async def get_active_sessions(self, user_id: UUID) -> List[UserSession]:
        return await self.uow.user_sessions.get_active_by_user_id(user_id, self.clock.now())

    async def update_session_activity(
        self, session_id: UUID, refresh_token_id: Optional[UUID] = None
    ) -> Optional[UserSession]:
        try:
            user_session = await self.uow.user_sessions.touch(
                session_id, self.clock.now(), refresh_token_id
            )
            await self.uow.commit()
            return user_session
        except Exception as exc:
            logger.error(f"Failed to update session activity for {session_id}: {exc}")
            await self.uow.rollback()
            return None

    async def deactivate_session(self, session_id: UUID) -> Optional[UserSession]:
        user_session = await self.uow.user_sessions.deactivate(session_id)
        await self.uow.commit()
        return user_session

    async def deactivate_all_user_sessions(
        self, user_id: UUID, except_session_id: Optional[UUID] = None
    ) -> int:
        count = await self.uow.user_sessions.deactivate_all_by_user_id(
            user_id, except_session_id
        )
        await self.uow.commit()
        return count

    async def cleanup_expired_sessions(self) -> int:
        count = await self.uow.user_sessions.deactivate_expired(self.clock.now())
        await self.uow.commit()
        return count
