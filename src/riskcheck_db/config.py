"""Database settings for the question pool store.

The connection URL comes from ``DATABASE_URL`` when set, otherwise it is
assembled from ``PG_HOST`` / ``PG_PORT`` / ``PG_USER`` / ``PG_PASSWORD`` /
``PG_DATABASE``.  PostgreSQL URLs are normalised to the ``asyncpg``
driver, which both the server and the Alembic runner use.  Any other
async URL (e.g. ``sqlite+aiosqlite:///riskcheck.db`` for local editing)
is passed through unchanged.
"""

import os
from dataclasses import dataclass

_PG_SCHEMES = ("postgresql+asyncpg://", "postgresql://", "postgres://")
_ASYNC_PG = "postgresql+asyncpg://"


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection and pool settings read once per engine."""

    url: str
    pool_size: int = 5
    max_overflow: int = 10
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


def _url_from_parts() -> str:
    host = os.getenv("PG_HOST", "localhost")
    port = os.getenv("PG_PORT", "5432")
    user = os.getenv("PG_USER", "riskcheck")
    password = os.getenv("PG_PASSWORD", "riskcheck")
    database = os.getenv("PG_DATABASE", "riskcheck")
    return f"{_ASYNC_PG}{user}:{password}@{host}:{port}/{database}"


def get_async_url() -> str:
    """Return the async connection URL (asyncpg for PostgreSQL)."""
    url = os.getenv("DATABASE_URL")
    if not url:
        return _url_from_parts()
    for scheme in _PG_SCHEMES:
        if url.startswith(scheme):
            return _ASYNC_PG + url[len(scheme):]
    return url


def load_database_settings() -> DatabaseSettings:
    """Build settings from the environment (``PG_POOL_SIZE``, ``PG_MAX_OVERFLOW``, ``SQL_ECHO``)."""
    return DatabaseSettings(
        url=get_async_url(),
        pool_size=int(os.getenv("PG_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("PG_MAX_OVERFLOW", "10")),
        echo=os.getenv("SQL_ECHO", "false").strip().lower() in ("1", "true", "yes", "on"),
    )
