"""
Application container

Process-wide handles built once per app and reachable from request
dependencies through app.state.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.memory_cache import InMemoryCache
from src.adapter.services.notifier import build_notifier
from src.adapter.services.redis_cache import RedisCache
from src.app.services.cache import IEphemeralCache
from src.app.services.clock import Clock
from src.app.services.notifier import INotifier

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    config: object
    engine: AsyncEngine
    session_factory: sessionmaker
    cache: IEphemeralCache
    notifier: INotifier
    clock: Clock
    cleanup_task: Optional[asyncio.Task] = None

    async def close(self) -> None:
        if self.cleanup_task is not None:
            self.cleanup_task.cancel()
            try:
                await self.cleanup_task
            except asyncio.CancelledError:
                pass
            self.cleanup_task = None
        await self.cache.close()
        await self.notifier.close()
        await self.engine.dispose()
        logger.info("Application container closed")


def build_container(
    config,
    *,
    cache: Optional[IEphemeralCache] = None,
    notifier: Optional[INotifier] = None,
    clock: Optional[Clock] = None,
) -> AppContainer:
    clock = clock or Clock()
    engine = create_async_engine(config.DB_URI, echo=False, future=True)
    session_factory = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    if cache is None:
        if config.CACHE_BACKEND == "memory":
            cache = InMemoryCache(clock)
        else:
            cache = RedisCache(config.REDIS_URL)

    return AppContainer(
        config=config,
        engine=engine,
        session_factory=session_factory,
        cache=cache,
        notifier=notifier or build_notifier(config),
        clock=clock,
    )
