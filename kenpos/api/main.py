"""
FastAPI application for a KenPOS till.

Startup brings the schema up to date, opens the connection pool, makes sure
the walk-in customer exists and wires reconnect to the offline sync walk.
Shutdown stops any sync in progress before the pool is closed, so a queued
sale is never half moved.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kenpos import __version__
from kenpos.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from kenpos.api.middleware.error_handler import setup_exception_handlers
from kenpos.api.routes import (
    cart_router,
    customers_router,
    data_router,
    health_router,
    products_router,
    purchase_orders_router,
    quotations_router,
    sales_router,
    shifts_router,
    supplier_invoices_router,
    suppliers_router,
    sync_router,
)
from kenpos.application.connectivity import get_connectivity
from kenpos.config import configure_logging, get_logger, get_settings
from kenpos.core.exceptions import DatabaseError

logger = get_logger(__name__)

ROUTERS: tuple[APIRouter, ...] = (
    health_router,
    cart_router,
    sales_router,
    shifts_router,
    quotations_router,
    customers_router,
    suppliers_router,
    products_router,
    purchase_orders_router,
    supplier_invoices_router,
    sync_router,
    data_router,
)


async def _open_storage() -> None:
    from kenpos.infrastructure.storage.sqlite import get_pool
    from kenpos.infrastructure.storage.sqlite.migrations import run_migrations

    results = await run_migrations()
    failed = [r for r in results if not r.success]
    if failed:
        raise DatabaseError(f"migrate v{failed[0].version}", failed[0].error or "unknown error")
    logger.info("database_ready", migrations_applied=len(results))
    await get_pool()


async def _stop_sync() -> None:
    connectivity = get_connectivity()
    task = connectivity.sync_task
    if task is not None and not task.done():
        # Going offline asks the walk to stop between records
        connectivity.set_online(False)
        await task


async def _close_resources() -> None:
    from kenpos.infrastructure.storage.sqlite import close_pool
    from kenpos.infrastructure.sync import close_sync_endpoint

    for name, close in (("sync_endpoint", close_sync_endpoint), ("connection_pool", close_pool)):
        try:
            await close()
        except Exception as e:
            logger.warning("resource_close_failed", resource=name, error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info("till_starting", host=settings.api.host, port=settings.api.port)

    try:
        await _open_storage()
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    from kenpos.application.use_cases import RegistryUseCase, SyncOfflineSalesUseCase

    await RegistryUseCase().ensure_walk_in_customer()
    get_connectivity().set_sync_runner(SyncOfflineSalesUseCase().execute)
    logger.info("till_started", version=__version__)

    yield

    logger.info("till_stopping")
    await _stop_sync()
    await _close_resources()
    logger.info("till_stopped")


def create_app() -> FastAPI:
    """Build the application; routes, middleware and error mapping included."""
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="KenPOS API",
        description="Point of sale: checkout, shifts, purchasing and offline sync",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Last added runs first: request ids exist before errors are rendered
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {"name": settings.app_name, "version": __version__}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "kenpos.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
