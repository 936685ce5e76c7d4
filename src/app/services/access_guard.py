"""
Access Guard

Per-request authorization decision: public bypass, then authentication,
then role and permission requirements.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.role_service import RoleService
from src.app.services.session_service import SessionService
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequiredPermission:
    resource: str
    action: str

    def __str__(self) -> str:
        return f"{self.resource}:{self.action}"


@dataclass(frozen=True)
class OperationPolicy:
    """Declared access requirements of one operation"""

    public: bool = False
    roles: Tuple[str, ...] = ()
    permissions: Tuple[RequiredPermission, ...] = ()


@dataclass(frozen=True)
class Identity:
    """Decoded caller identity attached to the request context"""

    user_id: Optional[UUID]
    email: Optional[str] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    session_id: Optional[UUID] = None
    claims: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls(user_id=None)

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Identity":
        sid = claims.get("sid")
        return cls(
            user_id=UUID(claims["sub"]),
            email=claims.get("email"),
            username=claims.get("username"),
            phone=claims.get("phone"),
            session_id=UUID(sid) if sid else None,
            claims=claims,
        )


UNAUTHORIZED = Error("UNAUTHORIZED", "Unauthorized")
FORBIDDEN = Error("FORBIDDEN", "Insufficient permissions")


class AccessGuard:
    """
    Three gates evaluated in a fixed order.

    Business Rules:
    - A public operation is allowed without looking at the token at all
    - Missing, malformed, expired or foreign-audience tokens are UNAUTHORIZED
    - Every declared role AND every declared permission must be held,
      otherwise FORBIDDEN
    - Session activity is bumped on success; a failed bump never blocks
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: TokenService,
        role_service: RoleService,
        session_service: SessionService,
    ):
        self.uow = uow
        self.token_service = token_service
        self.role_service = role_service
        self.session_service = session_service

    async def authorize(
        self, policy: OperationPolicy, bearer_token: Optional[str]
    ) -> Result[Identity]:
        if policy.public:
            return Return.ok(Identity.anonymous())

        if not bearer_token:
            logger.debug("Rejected request without bearer token")
            return Return.err(UNAUTHORIZED)

        claims = self.token_service.decode_access_token(bearer_token)
        if claims is None:
            return Return.err(UNAUTHORIZED)

        try:
            identity = Identity.from_claims(claims)
        except (KeyError, ValueError) as exc:
            logger.warning(f"Access token with unusable subject: {exc}")
            return Return.err(UNAUTHORIZED)

        async with self.uow:
            for role_name in policy.roles:
                if not await self.role_service.user_has_role(identity.user_id, role_name):
                    logger.info(f"User {identity.user_id} lacks role {role_name}")
                    return Return.err(FORBIDDEN)

            for permission in policy.permissions:
                allowed = await self.role_service.user_has_permission(
                    identity.user_id, permission.resource, permission.action
                )
                if not allowed:
                    logger.info(f"User {identity.user_id} lacks permission {permission}")
                    return Return.err(FORBIDDEN)

            if identity.session_id is not None:
                await self.session_service.update_session_activity(identity.session_id)

        return Return.ok(identity)
