import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.cache import IEphemeralCache
from src.app.services.clock import Clock
from src.app.services.notifier import INotifier
from src.app.use_cases.maintenance import CleanupExpiredUseCase
from src.app.use_cases.roles import SeedRolesUseCase
from .container import AppContainer, build_container
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    logger.warning(f"Client error on {request.url.path}: {exc.base_error.code}")
    return JSONResponse(
        status_code=exc.status_code, content=exc.to_body(), headers=exc.headers
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(
        f"Server error on {request.url.path}: {exc.base_error.code} {exc.base_error.message}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=exc.to_body()
    )


async def seed_roles(container: AppContainer) -> None:
    async with container.session_factory() as session:
        result = await SeedRolesUseCase(SqlAlchemyUnitOfWork(session)).execute()
    counts = result.value
    logger.info(
        f"Role seeding done: {counts.permissions_created} permission(s), "
        f"{counts.roles_created} role(s) created"
    )


async def run_cleanup_once(container: AppContainer) -> dict:
    async with container.session_factory() as session:
        use_case = CleanupExpiredUseCase(
            SqlAlchemyUnitOfWork(session), container.config, container.clock
        )
        result = await use_case.execute()
    return result.value


async def _cleanup_loop(container: AppContainer, interval_seconds: int) -> None:
    """Periodic expiry sweep; a failed run is logged and retried next period"""
    try:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await run_cleanup_once(container)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.error(f"Expiry sweep failed: {exc}")
    except asyncio.CancelledError:
        logger.info("Expiry sweep task cancelled")


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: AppContainer = app.state.container
    config = container.config

    if config.DB_CREATE_ALL:
        async with container.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    if config.SEED_ROLES:
        await seed_roles(container)

    interval = int(config.SESSION_CLEANUP_INTERVAL_SECONDS)
    if interval > 0:
        container.cleanup_task = asyncio.create_task(_cleanup_loop(container, interval))

    yield

    await container.close()


def create_app(
    ApplicationConfig,
    *,
    cache: Optional[IEphemeralCache] = None,
    notifier: Optional[INotifier] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    app = FastAPI(title="Identity API", version="0.1.0", lifespan=lifespan)
    app.state.container = build_container(
        ApplicationConfig, cache=cache, notifier=notifier, clock=clock
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import auth, health_check, roles, sessions, user, verification

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(verification.router, tags=["Verification"])
    app.include_router(sessions.router, tags=["Sessions"])
    app.include_router(roles.router, tags=["Roles"])
    app.include_router(user.router, tags=["User"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
