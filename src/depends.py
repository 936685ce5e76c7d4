from fastapi import Request

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.container import AppContainer
from src.app.services.cache import IEphemeralCache
from src.app.services.clock import Clock
from src.app.services.notifier import INotifier


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def get_unit_of_work(request: Request):
    async with get_container(request).session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_config(request: Request):
    return get_container(request).config


def get_cache(request: Request) -> IEphemeralCache:
    return get_container(request).cache


def get_notifier(request: Request) -> INotifier:
    return get_container(request).notifier


def get_clock(request: Request) -> Clock:
    return get_container(request).clock
