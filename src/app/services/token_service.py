"""
Token Service

Issues signed access tokens and opaque rotating refresh tokens.
"""

import logging
import re
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from uuid import UUID, uuid4

from jose import JWTError, jwt

from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RefreshToken, User

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
DEFAULT_DURATION_SECONDS = 900
REFRESH_TOKEN_BYTES = 40

_DURATION_PATTERN = re.compile(r"^(\d+)([smhd])$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 60 * 60, "d": 24 * 60 * 60}


def parse_duration(value: str) -> int:
    """
    Parse "<number><unit>" (unit in s, m, h, d) into seconds.

    Unparsable values fall back to 15 minutes.
    """
    match = _DURATION_PATTERN.match(str(value).strip())
    if not match:
        return DEFAULT_DURATION_SECONDS
    return int(match.group(1)) * _UNIT_SECONDS[match.group(2)]


def generate_refresh_token_value() -> str:
    return secrets.token_bytes(REFRESH_TOKEN_BYTES).hex()


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int
    refresh_token_id: UUID


class TokenService:
    """
    Access/refresh token lifecycle.

    Callers own the UnitOfWork context; methods that write commit their own
    changes so token state is durable before the caller moves on.
    """

    def __init__(self, uow: UnitOfWork, config, clock: Optional[Clock] = None):
        self.uow = uow
        self.config = config
        self.clock = clock or Clock()

    @property
    def access_token_ttl(self) -> int:
        return parse_duration(self.config.JWT_EXPIRATION)

    @property
    def refresh_token_ttl(self) -> int:
        return parse_duration(self.config.JWT_REFRESH_EXPIRATION)

    def create_access_token(self, user: User, session_id: Optional[UUID] = None) -> str:
        now = self.clock.now()
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "iss": self.config.JWT_ISSUER,
            "aud": self.config.JWT_AUDIENCE,
            "iat": now,
            "exp": now + timedelta(seconds=self.access_token_ttl),
        }
        if user.username:
            payload["username"] = user.username
        if user.phone:
            payload["phone"] = user.phone
        if session_id is not None:
            payload["sid"] = str(session_id)
        return jwt.encode(payload, self.config.JWT_SECRET, algorithm=JWT_ALGORITHM)

    def decode_access_token(self, token: str) -> Optional[dict]:
        """
        Verify signature, expiry, issuer and audience.

        Returns:
            Decoded claims or None if the token is invalid
        """
        try:
            return jwt.decode(
                token,
                self.config.JWT_SECRET,
                algorithms=[JWT_ALGORITHM],
                audience=self.config.JWT_AUDIENCE,
                issuer=self.config.JWT_ISSUER,
            )
        except JWTError as exc:
            logger.debug(f"Access token rejected: {exc}")
            return None

    async def create_refresh_token(
        self,
        user_id: UUID,
        device_id: Optional[str] = None,
        device_type: Optional[str] = None,
    ) -> RefreshToken:
        refresh_token = RefreshToken(
            id=uuid4(),
            token=generate_refresh_token_value(),
            user_id=user_id,
            device_id=device_id,
            device_type=device_type,
            is_revoked=False,
            expires_at=self.clock.now() + timedelta(seconds=self.refresh_token_ttl),
        )
        return await self.uow.refresh_tokens.create(refresh_token)

    async def generate_tokens(
        self,
        user: User,
        device_id: Optional[str] = None,
        device_type: Optional[str] = None,
        session_id: Optional[UUID] = None,
    ) -> TokenPair:
        refresh_token = await self.create_refresh_token(user.id, device_id, device_type)
        await self.uow.commit()

        return TokenPair(
            access_token=self.create_access_token(user, session_id),
            refresh_token=refresh_token.token,
            expires_in=self.access_token_ttl,
            refresh_token_id=refresh_token.id,
        )

    async def find_refresh_token(self, token: str) -> Optional[RefreshToken]:
        return await self.uow.refresh_tokens.get_by_token(token)

    def is_usable(self, refresh_token: RefreshToken) -> bool:
        return not refresh_token.is_revoked and refresh_token.expires_at > self.clock.now()

    async def refresh_access_token(
        self, token: str, session_id: Optional[UUID] = None
    ) -> Optional[TokenPair]:
        """
        Mint a new access token from a refresh token.

        With rotation enabled the presented token is revoked and a successor
        created in the same transaction. A token that was already rotated
        fails closed.

        Returns:
            TokenPair, or None if the token is unknown, revoked or expired
        """
        stored = await self.uow.refresh_tokens.get_by_token(token)
        if stored is None or not self.is_usable(stored):
            return None

        user = await self.uow.users.get_by_id(stored.user_id)
        if user is None:
            return None

        if not self.config.JWT_REFRESH_ROTATION:
            return TokenPair(
                access_token=self.create_access_token(user, session_id),
                refresh_token=stored.token,
                expires_in=self.access_token_ttl,
                refresh_token_id=stored.id,
            )

        successor = await self.create_refresh_token(
            stored.user_id, stored.device_id, stored.device_type
        )
        revoked = await self.uow.refresh_tokens.revoke(stored.id, replaced_by=successor.id)
        if not revoked:
            # Lost a race with another rotation or a logout of the same token
            await self.uow.rollback()
            logger.warning(f"Refresh token {stored.id} was revoked during rotation")
            return None
        await self.uow.commit()

        return TokenPair(
            access_token=self.create_access_token(user, session_id),
            refresh_token=successor.token,
            expires_in=self.access_token_ttl,
            refresh_token_id=successor.id,
        )

    async def revoke_refresh_token(self, token: str) -> bool:
        stored = await self.uow.refresh_tokens.get_by_token(token)
        if stored is None:
            return False
        revoked = await self.uow.refresh_tokens.revoke(stored.id)
        await self.uow.commit()
        return revoked

    async def revoke_all_user_refresh_tokens(
        self, user_id: UUID, except_token_id: Optional[UUID] = None
    ) -> int:
        count = await self.uow.refresh_tokens.revoke_all_by_user_id(user_id, except_token_id)
        await self.uow.commit()
        return count

    async def cleanup_expired_refresh_tokens(self) -> int:
        count = await self.uow.refresh_tokens.revoke_expired(self.clock.now())
        await self.uow.commit()
        return count
