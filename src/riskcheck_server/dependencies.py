"""FastAPI dependency injection — DB sessions and the app.state singletons.

Each request that touches the database gets a fresh ``AsyncSession`` via
``get_db()``.  The session is committed on success and rolled back on error,
matching the convention where the repository calls ``flush()`` but never
``commit()``.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from riskcheck_db.engine import get_session_factory
from riskcheck_db.repository import QuestionRepository
from riskcheck_rulesets.interfaces import CodeCatalog
from riskcheck_rulesets.ruleset import RulesetStore

from riskcheck_server.sessions import SessionRegistry


# ------------------------------------------------------------------
# Database session: transaction boundary lives here
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session; commit on success, rollback on error."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ------------------------------------------------------------------
# Singletons stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_store(request: Request) -> RulesetStore:
    """Return the RulesetStore singleton from ``app.state``."""
    return request.app.state.store


def get_repository(request: Request) -> QuestionRepository:
    """Return the question repository from ``app.state``."""
    return request.app.state.repository


def get_sessions(request: Request) -> SessionRegistry:
    """Return the in-memory respondent session registry from ``app.state``."""
    return request.app.state.sessions


def get_code_catalog(request: Request) -> CodeCatalog:
    """Return the cached class-code catalog from ``app.state``."""
    return request.app.state.code_catalog
