"""Async engine and session factory for the question pool store.

Both are created on first use from :func:`load_database_settings` and
shared for the life of the process.  The server calls
:func:`dispose_engine` from its lifespan handler on shutdown.
"""

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from riskcheck_db.config import DatabaseSettings, load_database_settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(settings: DatabaseSettings) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.echo}
    # SQLite uses a single-connection pool without sizing knobs
    if not settings.is_sqlite:
        options["pool_size"] = settings.pool_size
        options["max_overflow"] = settings.max_overflow
        options["pool_pre_ping"] = True
    return options


def get_engine() -> AsyncEngine:
    """Return the shared async engine, creating it on first call."""
    global _engine
    if _engine is None:
        settings = load_database_settings()
        _engine = create_async_engine(settings.url, **_engine_options(settings))
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the shared session factory bound to :func:`get_engine`."""
    global _session_factory
    if _session_factory is None:
        # Rows stay readable after commit; the repository converts them eagerly anyway
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine (no-op if never created)."""
    global _engine, _session_factory
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
