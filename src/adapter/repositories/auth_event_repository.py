from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.auth_event_repository import IAuthEventRepository
from src.domain.entities import AuthEvent, AuthEventType


class AuthEventRepository(IAuthEventRepository):
    """AuthEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, auth_event: AuthEvent) -> AuthEvent:
        """Create a new auth event (immutable)"""
        self.session.add(auth_event)
        await self.session.flush()
        await self.session.refresh(auth_event)
        return auth_event

    async def get_recent_by_user(
        self,
        user_id: UUID,
        event_type: AuthEventType,
        since: datetime,
        limit: int,
    ) -> List[AuthEvent]:
        """Events of one type for a user since a point in time, newest first"""
        stmt = (
            select(AuthEvent)
            .where(
                AuthEvent.user_id == user_id,
                AuthEvent.event_type == event_type,
                AuthEvent.created_at >= since,
            )
            .order_by(AuthEvent.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_failures_since(
        self,
        since: datetime,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        user_id: Optional[UUID] = None,
    ) -> int:
        """Count LOGIN_FAILURE events since a point in time for any identifier"""
        identifiers = []
        if email:
            identifiers.append(AuthEvent.email == email)
        if phone:
            identifiers.append(AuthEvent.phone == phone)
        if user_id:
            identifiers.append(AuthEvent.user_id == user_id)
        if not identifiers:
            return 0

        stmt = (
            select(func.count())
            .select_from(AuthEvent)
            .where(
                AuthEvent.event_type == AuthEventType.LOGIN_FAILURE,
                AuthEvent.created_at >= since,
                or_(*identifiers),
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
