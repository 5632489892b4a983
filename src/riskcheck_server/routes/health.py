"""Readiness probe, mounted outside the versioned API prefix."""

import logging

from fastapi import APIRouter
from sqlalchemy import text

from riskcheck_db.engine import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Report whether the question pool database answers a trivial query."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.error("Health check failed: %s", exc)
        return {"status": "error", "detail": "database unavailable"}
    return {"status": "ok"}
