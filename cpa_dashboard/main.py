"""Main FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cpa_dashboard.api import dashboard, health, sync
from cpa_dashboard.api import settings as settings_api
from cpa_dashboard.core.config import settings
from cpa_dashboard.db.redis import connect_redis
from cpa_dashboard.middleware.request_tracing import RequestTracingMiddleware
from cpa_dashboard.services.config_store import ConfigStore
from cpa_dashboard.services.dashboard_state import DashboardState
from cpa_dashboard.services.sync_worker import SyncWorker

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.WARNING if not settings.DEBUG else logging.DEBUG
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup and shutdown events."""
    logger.info("Starting application", app_name=settings.APP_NAME)

    try:
        redis = await connect_redis()
    except Exception:
        logger.exception("Failed to initialize Redis - application cannot start")
        raise

    dashboard_state = DashboardState(ConfigStore(redis))
    await dashboard_state.load_configuration()
    sync_worker = SyncWorker(dashboard_state)

    app.state.redis = redis
    app.state.dashboard = dashboard_state
    app.state.sync_worker = sync_worker
    await sync_worker.start()

    yield

    logger.info("Shutting down application")

    await sync_worker.stop()

    try:
        await redis.aclose()
    except Exception:
        logger.exception("Error closing Redis connection")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

app.include_router(health.router, tags=["health"])
app.include_router(settings_api.router)
app.include_router(dashboard.router)
app.include_router(sync.router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cpa_dashboard.main:app",
        host=settings.HOST,
        port=settings.PORT,
    )
