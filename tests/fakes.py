"""
Test doubles shared by unit and integration tests.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Tuple

from config import ApplicationConfig
from src.app.services.clock import Clock
from src.app.services.notifier import INotifier
from src.domain.entities import NotificationChannel


class FrozenClock(Clock):
    """Clock that only moves when told to; starts at the real current time"""

    def __init__(self, start: datetime = None):
        self.current = start or Clock().now()

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current = self.current + timedelta(seconds=seconds)


class RecordingNotifier(INotifier):
    """Accepts every message (unless told to fail) and remembers it"""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: List[Tuple[str, NotificationChannel, Dict[str, Any]]] = []

    async def send(
        self,
        destination: str,
        channel: NotificationChannel,
        payload: Dict[str, Any],
    ) -> bool:
        self.sent.append((destination, channel, payload))
        return self.succeed

    def last_to(self, destination: str) -> Dict[str, Any]:
        for sent_to, _, payload in reversed(self.sent):
            if sent_to == destination:
                return payload
        raise AssertionError(f"Nothing was sent to {destination}")


class StubConfig(ApplicationConfig):
    CACHE_BACKEND = "memory"
    NOTIFIER_BACKEND = "log"
    NOTIFIER_RETRY_DELAY_SECONDS = 0.0
    SEED_ROLES = False
    DB_CREATE_ALL = False
    SESSION_CLEANUP_INTERVAL_SECONDS = 0
    JWT_SECRET = "test-secret"
    JWT_REFRESH_ROTATION = True
    CORS_ORIGINS = []


def make_config(**overrides):
    """Config class derived from StubConfig with per-test overrides"""
    return type("OverriddenConfig", (StubConfig,), overrides)
