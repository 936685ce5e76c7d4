from abc import ABC, abstractmethod
from typing import Any, Optional


class CacheError(Exception):
    """Raised when the ephemeral cache is unreachable or misbehaves"""


class IEphemeralCache(ABC):
    """
    Shared key-value store with per-key TTL.

    Values are JSON-serializable. Each call is a single atomic operation on
    one key.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get a value, or None when missing or expired"""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value that expires after ttl_seconds"""
        pass

    @abstractmethod
    async def increment_attempts(self, key: str) -> Optional[dict]:
        """
        Atomically add one to the "attempts" field of a stored dict.

        The key keeps its remaining TTL. Returns the updated entry, or None
        when the key is missing or expired.
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key (no-op when missing)"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections"""
        pass
