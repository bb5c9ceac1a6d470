"""
FastAPI Application Entry Point.

This is the main entry point for the CloudNotes backend.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from cloudnotes.backend.api import health
from cloudnotes.backend.api.v1 import router as api_v1_router
from cloudnotes.backend.core.concurrency import shutdown_pools
from cloudnotes.backend.core.config import AppConfig, find_project_root, get_app_config
from cloudnotes.backend.core.database import create_tables, dispose_engine
from cloudnotes.backend.core.exception_handlers import register_exception_handlers
from cloudnotes.backend.core.logging import get_logger, setup_logging
from cloudnotes.backend.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    if app_config.database.create_tables:
        await create_tables()

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
            "api_prefix": app_config.application.api_prefix,
        },
    )
    yield
    logger.info("Application shutting down")
    await shutdown_pools()
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=app_settings.api_prefix)

    _mount_frontend(app, app_config)

    return app


def _mount_frontend(app: FastAPI, app_config: AppConfig) -> None:
    """Serve the static web frontend at / when application.static_dir exists."""
    static_dir = app_config.application.static_dir
    if not static_dir:
        return

    directory = find_project_root() / static_dir
    if not directory.is_dir():
        logger.warning(
            "Static frontend directory missing, not mounted",
            extra={"static_dir": str(directory)},
        )
        return

    app.mount("/", StaticFiles(directory=directory, html=True), name="frontend")
    logger.debug("Static frontend mounted", extra={"static_dir": str(directory)})


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn cloudnotes.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
