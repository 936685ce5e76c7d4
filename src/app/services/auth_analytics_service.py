"""
Auth Analytics Service

Records the append-only auth event log and runs detection heuristics on it.
Event recording never fails the calling flow.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Optional
from uuid import UUID

from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuthEvent, AuthEventType, User

logger = logging.getLogger(__name__)


@dataclass
class AuthEventData:
    user_id: Optional[UUID] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    device_id: Optional[str] = None
    device_type: Optional[str] = None
    device_name: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    location: Optional[str] = None
    success: Optional[bool] = None
    failure_reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class AuthAnalyticsService:
    def __init__(self, uow: UnitOfWork, config, clock: Optional[Clock] = None):
        self.uow = uow
        self.config = config
        self.clock = clock or Clock()

    async def track_event(self, event_type: AuthEventType, data: AuthEventData) -> None:
        """Persist an auth event; errors are logged and swallowed"""
        metadata = dict(data.metadata)
        if data.device_name:
            metadata.setdefault("device_name", data.device_name)
        try:
            await self.uow.auth_events.create(
                AuthEvent(
                    event_type=event_type,
                    user_id=data.user_id,
                    email=data.email,
                    phone=data.phone,
                    device_id=data.device_id,
                    device_type=data.device_type,
                    ip_address=data.ip_address,
                    user_agent=data.user_agent,
                    location=data.location,
                    success=data.success,
                    failure_reason=data.failure_reason,
                    event_metadata=metadata or None,
                    created_at=self.clock.now(),
                )
            )
            await self.uow.commit()
        except Exception as exc:
            logger.error(f"Failed to track auth event {event_type.value}: {exc}")
            try:
                await self.uow.rollback()
            except Exception as rollback_exc:
                logger.error(f"Rollback after auth event failure also failed: {rollback_exc}")

    async def track_login_success(self, user: User, data: AuthEventData) -> None:
        data.user_id = user.id
        data.email = user.email
        data.phone = user.phone
        data.success = True
        await self.track_event(AuthEventType.LOGIN_SUCCESS, data)

    async def track_login_failure(
        self,
        email: Optional[str],
        phone: Optional[str],
        failure_reason: str,
        data: AuthEventData,
    ) -> None:
        data.email = email
        data.phone = phone
        data.success = False
        data.failure_reason = failure_reason
        await self.track_event(AuthEventType.LOGIN_FAILURE, data)

    async def track_registration(self, user: User) -> None:
        await self.track_event(
            AuthEventType.REGISTRATION,
            AuthEventData(user_id=user.id, email=user.email, phone=user.phone, success=True),
        )

    async def track_logout(self, user_id: UUID, data: AuthEventData) -> None:
        data.user_id = user_id
        data.success = True
        await self.track_event(AuthEventType.LOGOUT, data)

    async def track_token_refresh(self, user_id: UUID, data: AuthEventData) -> None:
        data.user_id = user_id
        data.success = True
        await self.track_event(AuthEventType.TOKEN_REFRESH, data)

    async def track_suspicious_activity(
        self, user_id: UUID, reason: str, data: AuthEventData
    ) -> None:
        data.user_id = user_id
        data.success = False
        data.failure_reason = reason
        await self.track_event(AuthEventType.SUSPICIOUS_ACTIVITY, data)

    async def get_login_attempts(
        self,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        user_id: Optional[UUID] = None,
        window_seconds: Optional[int] = None,
    ) -> int:
        """Failed logins within the throttling window for any matching identifier"""
        window = window_seconds or self.config.LOGIN_WINDOW_SECONDS
        since = self.clock.now() - timedelta(seconds=window)
        return await self.uow.auth_events.count_failures_since(
            since, email=email, phone=phone, user_id=user_id
        )

    async def check_suspicious_activity(
        self,
        user_id: UUID,
        ip_address: str,
        device_id: str,
        device_type: str,
    ) -> bool:
        """
        Flag a login from a device and IP not seen among the user's recent
        successful logins. Detection only: the caller decides what to do.
        """
        since = self.clock.now() - timedelta(days=self.config.SUSPICIOUS_LOOKBACK_DAYS)
        recent_logins = await self.uow.auth_events.get_recent_by_user(
            user_id,
            AuthEventType.LOGIN_SUCCESS,
            since,
            self.config.SUSPICIOUS_RECENT_LOGINS,
        )

        if not recent_logins:
            return False

        seen_before = any(
            login.device_id == device_id or login.ip_address == ip_address
            for login in recent_logins
        )
        if seen_before:
            return False

        await self.track_suspicious_activity(
            user_id,
            "Login from new device/location",
            AuthEventData(
                ip_address=ip_address,
                device_id=device_id,
                device_type=device_type,
                metadata={
                    "known_devices": [
                        {
                            "device_id": login.device_id,
                            "ip_address": login.ip_address,
                            "device_type": login.device_type,
                        }
                        for login in recent_logins
                    ]
                },
            ),
        )
        return True
