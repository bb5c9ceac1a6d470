"""
Database Configuration.

SQLAlchemy async engine and session management for the note store.
Uses lazy initialization to prevent import-time failures when config is absent.

Store writes commit individually (see repositories/base.py), so the session
dependency only has to roll back whatever a failed request left pending.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from cloudnotes.backend.core.logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _create_engine() -> AsyncEngine:
    """Create async SQLAlchemy engine from database.yaml."""
    from cloudnotes.backend.core.config import get_app_config, get_database_url

    db_config = get_app_config().database
    url = get_database_url()
    kwargs: dict[str, Any] = {"echo": db_config.echo}

    if db_config.driver.startswith("sqlite"):
        if db_config.name != ":memory:":
            Path(url.split(":///", 1)[1]).parent.mkdir(parents=True, exist_ok=True)
    else:
        kwargs.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=db_config.pool_recycle,
        )

    engine = create_async_engine(url, **kwargs)
    logger.debug("Database engine created", extra={"driver": db_config.driver})
    return engine


def get_engine() -> AsyncEngine:
    """Get the database engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory, creating it on first use."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def create_tables() -> None:
    """Create the notes and trashed_notes tables if they do not exist."""
    from cloudnotes.backend.models.base import Base
    import cloudnotes.backend.models.note  # noqa: F401  registers tables

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def dispose_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _async_session_factory = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Usage in endpoints:
        @router.get("/notes")
        async def list_notes(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
