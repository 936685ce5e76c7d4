import json
import logging
from typing import Any, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.app.services.cache import CacheError, IEphemeralCache

logger = logging.getLogger(__name__)


class RedisCache(IEphemeralCache):
    """Redis-backed ephemeral cache storing JSON values with SET EX"""

    def __init__(self, redis_url: str, *, socket_timeout: float = 5.0):
        self.redis_url = redis_url
        self.client = aioredis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )

    async def get(self, key: str) -> Optional[Any]:
        try:
            cached = await self.client.get(key)
        except RedisError as exc:
            raise CacheError(f"Redis GET failed for {key}: {exc}") from exc
        if cached is None:
            return None
        try:
            return json.loads(cached)
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Discarding undecodable cache value at {key}")
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            await self.client.set(key, json.dumps(value), ex=max(1, int(ttl_seconds)))
        except RedisError as exc:
            raise CacheError(f"Redis SET failed for {key}: {exc}") from exc

    async def increment_attempts(self, key: str) -> Optional[dict]:
        # Read, bump and write back in one server-side step; PTTL keeps the expiry
        lua_script = """
        local raw = redis.call('GET', KEYS[1])
        if not raw then
            return nil
        end
        local entry = cjson.decode(raw)
        entry['attempts'] = (tonumber(entry['attempts']) or 0) + 1
        local encoded = cjson.encode(entry)
        local ttl = redis.call('PTTL', KEYS[1])
        if ttl > 0 then
            redis.call('SET', KEYS[1], encoded, 'PX', ttl)
        else
            redis.call('SET', KEYS[1], encoded)
        end
        return encoded
        """
        try:
            updated = await self.client.eval(lua_script, 1, key)
        except RedisError as exc:
            raise CacheError(f"Redis attempt increment failed for {key}: {exc}") from exc
        if updated is None:
            return None
        try:
            return json.loads(updated)
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Discarding undecodable cache value at {key}")
            return None

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except RedisError as exc:
            raise CacheError(f"Redis DEL failed for {key}: {exc}") from exc

    async def close(self) -> None:
        """Close the connection pool on shutdown"""
        await self.client.aclose()
