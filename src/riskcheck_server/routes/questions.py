"""Question editor endpoints — list, add, update, delete, reorder, reset.

Every write loads the full pool, applies one editor operation, and saves
the resulting snapshot back in the same transaction.  Responses carry the
renumbered flat list, the derived tree and any graph warnings (cycles,
questions with several parents).
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from riskcheck_db.repository import QuestionRepository
from riskcheck_rulesets.editor import QuestionEditor
from riskcheck_rulesets.models.question import ControlType, Question
from riskcheck_rulesets.models.session import EditResult
from riskcheck_rulesets.ruleset import RulesetStore

from riskcheck_server.dependencies import get_db, get_repository, get_store

router = APIRouter(prefix="/questions", tags=["questions"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class ReorderRequest(BaseModel):
    """Body for POST /questions/reorder: move ``dragged_id`` before ``target_id``."""
    dragged_id: int
    target_id: int


class ControlTypeRequest(BaseModel):
    """Body for PUT /questions/{question_id}/control-type."""
    control_type: ControlType


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

async def _open_editor(db: AsyncSession, repo: QuestionRepository) -> QuestionEditor:
    return QuestionEditor(await repo.load_all(db))


def _require(editor: QuestionEditor, question_id: int) -> None:
    if editor.get(question_id) is None:
        raise ValueError(f"Question not found: id={question_id}")


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("")
async def list_questions(
    db: AsyncSession = Depends(get_db),
    repo: QuestionRepository = Depends(get_repository),
) -> EditResult:
    """Return the pool in display order with its tree and warnings."""
    editor = await _open_editor(db, repo)
    return editor.view()


@router.post("", status_code=201)
async def add_question(
    db: AsyncSession = Depends(get_db),
    repo: QuestionRepository = Depends(get_repository),
) -> EditResult:
    """Append a blank question; ``selected_id`` is the new question's id."""
    editor = await _open_editor(db, repo)
    result = editor.add()
    await repo.save_all(db, editor.questions)
    return result


@router.put("/{question_id}")
async def update_question(
    question_id: int,
    body: Question,
    db: AsyncSession = Depends(get_db),
    repo: QuestionRepository = Depends(get_repository),
) -> EditResult:
    """Replace a question's fields.  The id in the path wins over the body."""
    editor = await _open_editor(db, repo)
    _require(editor, question_id)
    result = editor.update(body.model_copy(update={"id": question_id}))
    await repo.save_all(db, editor.questions)
    return result


@router.put("/{question_id}/control-type")
async def change_control_type(
    question_id: int,
    body: ControlTypeRequest,
    db: AsyncSession = Depends(get_db),
    repo: QuestionRepository = Depends(get_repository),
) -> EditResult:
    """Switch the control type, dropping rules the new type cannot hold."""
    editor = await _open_editor(db, repo)
    _require(editor, question_id)
    result = editor.change_control_type(question_id, body.control_type)
    await repo.save_all(db, editor.questions)
    return result


@router.delete("/{question_id}")
async def delete_question(
    question_id: int,
    db: AsyncSession = Depends(get_db),
    repo: QuestionRepository = Depends(get_repository),
) -> EditResult:
    """Delete a question and every follow-up edge pointing at it."""
    editor = await _open_editor(db, repo)
    _require(editor, question_id)
    result = editor.delete(question_id)
    await repo.save_all(db, editor.questions)
    return result


@router.post("/reorder")
async def reorder_questions(
    body: ReorderRequest,
    db: AsyncSession = Depends(get_db),
    repo: QuestionRepository = Depends(get_repository),
) -> EditResult:
    """Move one question before another.  Unknown ids leave the pool unchanged."""
    editor = await _open_editor(db, repo)
    result = editor.reorder(body.dragged_id, body.target_id)
    await repo.save_all(db, editor.questions)
    return result


@router.post("/reset")
async def reset_questions(
    db: AsyncSession = Depends(get_db),
    store: RulesetStore = Depends(get_store),
    repo: QuestionRepository = Depends(get_repository),
) -> EditResult:
    """Replace the pool with the defaults from ``v1/questions.yaml``."""
    await repo.reset(db, store.copy_defaults())
    return QuestionEditor(store.copy_defaults()).view()
