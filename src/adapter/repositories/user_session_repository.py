from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_session_repository import IUserSessionRepository
from src.domain.entities import UserSession


class UserSessionRepository(IUserSessionRepository):
    """UserSession repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: UUID) -> Optional[UserSession]:
        """Get session by ID"""
        stmt = select(UserSession).where(UserSession.id == session_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token(self, token: str) -> Optional[UserSession]:
        """Get session by its session-tracking token"""
        stmt = select(UserSession).where(UserSession.token == token)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_refresh_token_id(self, refresh_token_id: UUID) -> Optional[UserSession]:
        """Get the session currently linked to a refresh token"""
        stmt = select(UserSession).where(UserSession.refresh_token_id == refresh_token_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_active_by_user_id(self, user_id: UUID, now: datetime) -> List[UserSession]:
        """Active, unexpired sessions, most recently used first"""
        stmt = (
            select(UserSession)
            .where(
                UserSession.user_id == user_id,
                UserSession.is_active == True,
                UserSession.expires_at > now,
            )
            .order_by(UserSession.last_active_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, user_session: UserSession) -> UserSession:
        """Create a new session"""
        self.session.add(user_session)
        await self.session.flush()
        await self.session.refresh(user_session)
        return user_session

    async def touch(
        self,
        session_id: UUID,
        now: datetime,
        refresh_token_id: Optional[UUID] = None,
    ) -> Optional[UserSession]:
        """Bump last_active_at on an active session; never moves it backward"""
        values = {"last_active_at": now}
        if refresh_token_id is not None:
            values["refresh_token_id"] = refresh_token_id
        stmt = (
            update(UserSession)
            .where(
                UserSession.id == session_id,
                UserSession.is_active == True,
                UserSession.last_active_at <= now,
            )
            .values(**values)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        if result.rowcount == 0:
            return None
        return await self.get_by_id(session_id)

    async def deactivate(self, session_id: UUID) -> Optional[UserSession]:
        """Mark a session inactive"""
        user_session = await self.get_by_id(session_id)
        if user_session is None:
            return None
        user_session.is_active = False
        self.session.add(user_session)
        await self.session.flush()
        await self.session.refresh(user_session)
        return user_session

    async def deactivate_all_by_user_id(
        self, user_id: UUID, except_session_id: Optional[UUID] = None
    ) -> int:
        """Deactivate all active sessions of a user"""
        conditions = [UserSession.user_id == user_id, UserSession.is_active == True]
        if except_session_id is not None:
            conditions.append(UserSession.id != except_session_id)
        stmt = update(UserSession).where(*conditions).values(is_active=False)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def deactivate_expired(self, now: datetime) -> int:
        """Deactivate active sessions past their expiry"""
        stmt = (
            update(UserSession)
            .where(UserSession.expires_at < now, UserSession.is_active == True)
            .values(is_active=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
