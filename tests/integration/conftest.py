import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain.entities  # noqa: F401  registers tables on SQLModel.metadata
from src.adapter.services.memory_cache import InMemoryCache
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.role_service import RoleService
from src.depends import get_unit_of_work
from tests.fakes import FrozenClock, RecordingNotifier, make_config


@pytest_asyncio.fixture
async def db_uri(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def engine(db_uri):
    engine = create_async_engine(db_uri)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def uow(db_session):
    return SqlAlchemyUnitOfWork(db_session)


@pytest_asyncio.fixture
async def seeded(uow):
    async with uow:
        return await RoleService(uow).seed_roles()


@pytest_asyncio.fixture
async def clock():
    return FrozenClock()


@pytest_asyncio.fixture
async def cache(clock):
    return InMemoryCache(clock)


@pytest_asyncio.fixture
async def notifier():
    return RecordingNotifier()


@pytest_asyncio.fixture
async def config(db_uri):
    return make_config(DB_URI=db_uri)


@pytest_asyncio.fixture
async def client(db_session, seeded, config, cache, notifier, clock):
    from src.api.app import create_app

    app = create_app(config, cache=cache, notifier=notifier, clock=clock)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await app.state.container.close()
