from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import RefreshToken


class IRefreshTokenRepository(ABC):
    """RefreshToken repository interface - application layer"""

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[RefreshToken]:
        """Get refresh token by its opaque value"""
        pass

    @abstractmethod
    async def get_by_id(self, token_id: UUID) -> Optional[RefreshToken]:
        """Get refresh token by ID"""
        pass

    @abstractmethod
    async def create(self, refresh_token: RefreshToken) -> RefreshToken:
        """Persist a new refresh token"""
        pass

    @abstractmethod
    async def revoke(
        self, token_id: UUID, replaced_by: Optional[UUID] = None
    ) -> bool:
        """
        Revoke a token only if it is not already revoked.

        Returns True if this call performed the revocation.
        """
        pass

    @abstractmethod
    async def revoke_all_by_user_id(
        self, user_id: UUID, except_token_id: Optional[UUID] = None
    ) -> int:
        """Revoke all non-revoked tokens of a user. Returns count."""
        pass

    @abstractmethod
    async def revoke_expired(self, now: datetime) -> int:
        """Revoke non-revoked tokens whose expiry has passed. Returns count."""
        pass
