"""Respondent session endpoints — start, step, answer, report.

A session's engine is built over the question pool loaded from the
database when the session starts.  Session state lives in the in-memory
registry; nothing about a respondent is persisted.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from riskcheck_db.repository import QuestionRepository
from riskcheck_rulesets.models.session import AssessmentReport, SessionInfo, StepResult
from riskcheck_rulesets.ruleset import RulesetStore

from riskcheck_server.dependencies import get_db, get_repository, get_sessions, get_store
from riskcheck_server.sessions import SessionRegistry

router = APIRouter(tags=["sessions"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class SubmitAnswerRequest(BaseModel):
    """Body for POST /sessions/{session_id}/answers.

    ``value`` is a binary token ("Yes" / "No" / "N/A"), free text, a
    number, a list of strings (multi-select, tag list) or a record of
    strings (composite form).
    """
    value: Any


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/sessions", status_code=201)
async def create_session(
    db: AsyncSession = Depends(get_db),
    store: RulesetStore = Depends(get_store),
    repo: QuestionRepository = Depends(get_repository),
    sessions: SessionRegistry = Depends(get_sessions),
) -> SessionInfo:
    """Start a respondent session over the current question pool."""
    questions = await repo.load_all(db)
    engine = store.build_engine(questions)
    return sessions.create(engine).info()


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    sessions: SessionRegistry = Depends(get_sessions),
) -> SessionInfo:
    """Get session info.  Raises 404 if the session does not exist."""
    return sessions.get(session_id).info()


@router.get("/sessions/{session_id}/step")
async def get_current_step(
    session_id: str,
    sessions: SessionRegistry = Depends(get_sessions),
) -> StepResult:
    """Return the current question, or the completion step with the risk profile."""
    session = sessions.get(session_id)
    return session.engine.current_step(session.state)


@router.post("/sessions/{session_id}/answers")
async def submit_answer(
    session_id: str,
    body: SubmitAnswerRequest,
    sessions: SessionRegistry = Depends(get_sessions),
) -> StepResult:
    """Answer the current question and return the next step.

    Raises 409 if the session is already complete.
    """
    session = sessions.get(session_id)
    return session.engine.submit_answer(session.state, body.value)


@router.get("/sessions/{session_id}/report")
async def get_report(
    session_id: str,
    sessions: SessionRegistry = Depends(get_sessions),
) -> AssessmentReport:
    """Return the score, risk profile and answered questions in queue order."""
    session = sessions.get(session_id)
    return session.engine.report(session.state)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    sessions: SessionRegistry = Depends(get_sessions),
) -> None:
    """Discard a session.  Returns 404 if it does not exist."""
    sessions.discard(session_id)
