import asyncio
import copy
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from src.app.services.cache import IEphemeralCache
from src.app.services.clock import Clock


class InMemoryCache(IEphemeralCache):
    """
    Process-local cache for development and tests.

    Expiry is evaluated against the injected clock, so a frozen clock
    controls TTLs deterministically. Not shared between processes.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or Clock()
        self._entries: Dict[str, Tuple[Any, datetime]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= self.clock.now():
                del self._entries[key]
                return None
            return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        async with self._lock:
            expires_at = self.clock.now() + timedelta(seconds=ttl_seconds)
            self._entries[key] = (copy.deepcopy(value), expires_at)

    async def increment_attempts(self, key: str) -> Optional[dict]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= self.clock.now():
                del self._entries[key]
                return None
            value["attempts"] = int(value.get("attempts", 0)) + 1
            return copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def close(self) -> None:
        async with self._lock:
            self._entries.clear()
