"""Global exception handlers for the questionnaire API.

The SDK signals contract violations with ``ValueError`` (answering a
completed session, unknown session or question, duplicate ids in a
snapshot).  The handler classifies the message by keyword and answers
with a fixed client-safe detail; the raw message only goes to the log.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)

# (keyword in the lower-cased message, status, detail sent to the client)
# First match wins, so specific keywords come before generic ones.
_VALUE_ERROR_RULES: list[tuple[str, int, str]] = [
    ("already complete", 409, "Session is already complete"),
    ("session not found", 404, "Session not found"),
    ("question not found", 404, "Question not found"),
    ("not found", 404, "Resource not found"),
    ("duplicate", 409, "Question ids must be unique"),
]

_DEFAULT_RULE = (400, "Invalid request")


def classify_value_error(message: str) -> tuple[int, str]:
    """Return ``(status, client detail)`` for an SDK error message."""
    lowered = message.lower()
    for keyword, status, detail in _VALUE_ERROR_RULES:
        if keyword in lowered:
            return status, detail
    return _DEFAULT_RULE


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    status, detail = classify_value_error(str(exc))
    logger.warning("ValueError [%d] at %s: %s", status, request.url, exc)
    return JSONResponse(status_code=status, content={"detail": detail})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """A question rebuilt inside the SDK failed validation (e.g. negative points)."""
    logger.warning("Question validation failed at %s: %s", request.url, exc)
    return JSONResponse(status_code=422, content={"detail": "Invalid question data"})


async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
    """A session's queue references a question its graph does not hold."""
    logger.warning("KeyError at %s: %s", request.url, exc)
    return JSONResponse(status_code=404, content={"detail": "Resource not found"})


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
