"""Database session management with the async SQLAlchemy engine."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from slotlist_service.core.database import Base
from slotlist_service.core.settings import get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from slotlist_service.core.settings import DatabaseSettings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine_from_settings(db_settings: DatabaseSettings) -> AsyncEngine:
    """Create an async engine for the configured database.

    In-memory SQLite shares one connection across the pool so every
    session sees the same database.
    """
    url = db_settings.get_sqlalchemy_url()
    kwargs: dict[str, Any] = db_settings.engine_kwargs()
    if db_settings.is_sqlite and ":memory:" in url:
        kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})

    engine = create_async_engine(url, **kwargs)
    _instrument_engine(engine, slow_query_threshold=0.5)
    return engine


def _instrument_engine(engine: AsyncEngine, *, slow_query_threshold: float) -> None:
    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def _before_cursor_execute(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        _ = cursor, statement, parameters, context, executemany
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(engine.sync_engine, "after_cursor_execute")
    def _after_cursor_execute(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        _ = cursor, parameters, context, executemany
        starts = conn.info.get("query_start_time")
        if not starts:
            return
        duration = time.perf_counter() - starts.pop()
        if duration >= slow_query_threshold:
            logger.warning(
                "Slow database query",
                extra={"duration": round(duration, 4), "statement": statement[:200]},
            )


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first use."""
    global _engine, _session_factory
    if _engine is None:
        _engine = create_engine_from_settings(get_db_settings())
        _session_factory = async_sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    get_engine()
    assert _session_factory is not None
    return _session_factory


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Uncommitted work is rolled back when the block raises.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(User))
            users = result.scalars().all()
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_database() -> None:
    """Verify connectivity and optionally create missing tables.

    Raises:
        Exception: If the database is unreachable
    """
    db_settings = get_db_settings()
    engine = get_engine()

    # Register mapped models on Base.metadata
    import slotlist_service.core.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        if db_settings.create_tables:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables ensured")

    logger.info(
        "Database connection established",
        extra={"sqlite": db_settings.is_sqlite},
    )


async def close_database() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _session_factory
    if _engine is None:
        return
    logger.info("Closing database connections")
    await _engine.dispose()
    _engine = None
    _session_factory = None


__all__ = [
    "close_database",
    "create_engine_from_settings",
    "get_async_session",
    "get_engine",
    "get_session_factory",
    "init_database",
]
