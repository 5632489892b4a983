"""Application factory and CLI entry point.

``create_app()`` wires the questionnaire API:
  - lifespan: load ``v1/`` rulesets, seed an empty question table, create
    the respondent session registry and the cached class-code catalog
  - CORS middleware
  - exception handlers translating SDK errors to HTTP statuses
  - routers under ``/api/v1`` plus ``/health``

``cli()`` backs the ``riskcheck-server`` console script.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from riskcheck_db.engine import dispose_engine, get_session_factory
from riskcheck_db.repository import QuestionRepository
from riskcheck_rulesets.interfaces import CachedCodeCatalog, CodeCatalog, StaticCodeCatalog
from riskcheck_rulesets.ruleset import RulesetStore

from riskcheck_server.config import ServerSettings, load_settings
from riskcheck_server.errors import (
    generic_error_handler,
    key_error_handler,
    validation_error_handler,
    value_error_handler,
)
from riskcheck_server.routes import register_routes
from riskcheck_server.sessions import SessionRegistry

logger = logging.getLogger(__name__)


async def seed_questions(store: RulesetStore, repo: QuestionRepository) -> int:
    """Save the default pool when the question table is empty.

    Returns the number of seeded questions (0 if the table had data).
    """
    factory = get_session_factory()
    async with factory() as db:
        try:
            if await repo.count(db) > 0:
                logger.info("Question table already populated, skipping seed")
                return 0
            saved = await repo.reset(db, store.copy_defaults())
            await db.commit()
        except Exception:
            await db.rollback()
            raise
    logger.info("Seeded question pool with %d default questions", saved)
    return saved


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: ServerSettings = app.state.settings

    store = RulesetStore(ruleset_dir=settings.ruleset_dir)
    store.load()
    repo = QuestionRepository()

    if settings.seed_on_startup:
        await seed_questions(store, repo)

    app.state.store = store
    app.state.repository = repo
    app.state.sessions = SessionRegistry(settings.max_active_sessions)

    # Seed codes from routing.yaml unless create_app was given a backend
    backend = app.state.code_catalog_backend or StaticCodeCatalog(store.class_codes)
    app.state.code_catalog = CachedCodeCatalog(backend)

    yield

    logger.info("Shutting down with %d active sessions", len(app.state.sessions))
    await dispose_engine()


def create_app(
    settings: ServerSettings | None = None,
    code_catalog: CodeCatalog | None = None,
) -> FastAPI:
    """Build the FastAPI application from ``settings`` (env when None).

    ``code_catalog`` is the class-code backend behind
    ``/reference/class-codes``; it is wrapped in a TTL cache at startup.
    """
    settings = settings or load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Riskcheck API Server",
        description="Workplace risk questionnaire: respondent sessions and question editor",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.code_catalog_backend = code_catalog

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ValidationError subclasses ValueError; handlers resolve by MRO
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    register_routes(app)
    return app


# ASGI target for ``uvicorn riskcheck_server.app:app``
app = create_app()


def cli() -> None:
    """Console-script entry point: ``riskcheck-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "riskcheck_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
