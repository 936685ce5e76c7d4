from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.domain.entities import RefreshToken


class RefreshTokenRepository(IRefreshTokenRepository):
    """RefreshToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_token(self, token: str) -> Optional[RefreshToken]:
        """Get refresh token by its opaque value"""
        stmt = select(RefreshToken).where(RefreshToken.token == token)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, token_id: UUID) -> Optional[RefreshToken]:
        """Get refresh token by ID"""
        stmt = select(RefreshToken).where(RefreshToken.id == token_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, refresh_token: RefreshToken) -> RefreshToken:
        """Persist a new refresh token"""
        self.session.add(refresh_token)
        await self.session.flush()
        await self.session.refresh(refresh_token)
        return refresh_token

    async def revoke(self, token_id: UUID, replaced_by: Optional[UUID] = None) -> bool:
        """Conditional revoke: only a non-revoked row is updated"""
        values = {"is_revoked": True}
        if replaced_by is not None:
            values["replaced_by_token"] = replaced_by
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.id == token_id, RefreshToken.is_revoked == False)
            .values(**values)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def revoke_all_by_user_id(
        self, user_id: UUID, except_token_id: Optional[UUID] = None
    ) -> int:
        """Revoke all non-revoked tokens of a user"""
        conditions = [RefreshToken.user_id == user_id, RefreshToken.is_revoked == False]
        if except_token_id is not None:
            conditions.append(RefreshToken.id != except_token_id)
        stmt = update(RefreshToken).where(*conditions).values(is_revoked=True)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def revoke_expired(self, now: datetime) -> int:
        """Revoke non-revoked tokens past their expiry"""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.expires_at < now, RefreshToken.is_revoked == False)
            .values(is_revoked=True)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
