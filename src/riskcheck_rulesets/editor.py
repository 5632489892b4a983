"""Editor operations on the question pool snapshot.

Every operation takes the full snapshot (a list of questions in pool
order) and returns a new one; nothing is mutated in place.  Structural
edits renumber the result.  Unknown ids are no-ops that return the
snapshot unchanged.

:class:`QuestionEditor` wraps these functions for an editing session: it
holds the only mutable reference to the snapshot, tracks the selected
question, and hands back an :class:`EditResult` after every operation.
The caller persists ``editor.questions`` with a full-snapshot save.
"""

from __future__ import annotations

import logging
from typing import Any

from riskcheck_rulesets.constants import (
    BINARY_TYPES,
    DEFAULT_CONTROL_TYPE,
    LEGAL_ANSWERS,
    NEW_QUESTION_TEXT,
)
from riskcheck_rulesets.models.question import Question
from riskcheck_rulesets.models.session import EditResult
from riskcheck_rulesets.tree import RenumberResult, build_forest, renumber

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Snapshot operations
# ---------------------------------------------------------------------------

def next_question_id(questions: list[Question]) -> int:
    """``max(existing ids) + 1``, or 1 for an empty pool."""
    return max((q.id for q in questions), default=0) + 1


def add_question(questions: list[Question]) -> tuple[RenumberResult, int]:
    """Append a blank binary question with a fresh id.

    Returns the renumbered snapshot and the new id.
    """
    new_id = next_question_id(questions)
    new_question = Question(
        id=new_id,
        text=NEW_QUESTION_TEXT,
        control_type=DEFAULT_CONTROL_TYPE,
    )
    return renumber([*questions, new_question]), new_id


def delete_question(questions: list[Question], qid: int) -> RenumberResult | None:
    """Remove ``qid`` and every follow-up edge pointing at it.

    Returns None if ``qid`` does not exist.
    """
    if not any(q.id == qid for q in questions):
        return None

    remaining: list[Question] = []
    for q in questions:
        if q.id == qid:
            continue
        if qid in q.follow_up.values():
            cleaned = {answer: t for answer, t in q.follow_up.items() if t != qid}
            q = q.model_copy(update={"follow_up": cleaned})
        remaining.append(q)
    return renumber(remaining)


def reorder_questions(
    questions: list[Question], dragged_id: int, target_id: int
) -> RenumberResult | None:
    """Move ``dragged_id`` to just before ``target_id`` in pool order.

    Follow-up edges are untouched; only sibling order changes.  Returns
    None if either id is unknown or both are the same question.
    """
    if dragged_id == target_id:
        return None
    dragged = next((q for q in questions if q.id == dragged_id), None)
    if dragged is None:
        return None

    remaining = [q for q in questions if q.id != dragged_id]
    target_index = next((i for i, q in enumerate(remaining) if q.id == target_id), None)
    if target_index is None:
        return None

    remaining.insert(target_index, dragged)
    return renumber(remaining)


def update_question(
    questions: list[Question], updated: Question
) -> tuple[list[Question], bool] | None:
    """Replace the question with ``updated.id`` in place.

    The display number is derived, so the stored one is kept and any value
    sent by the caller is ignored.  Returns ``(snapshot, edges_changed)``,
    renumbered only when the follow-up map changed; None if the id is
    unknown.
    """
    index = next((i for i, q in enumerate(questions) if q.id == updated.id), None)
    if index is None:
        return None

    old = questions[index]
    replacement = updated.model_copy(update={"display_number": old.display_number})
    snapshot = list(questions)
    snapshot[index] = replacement

    edges_changed = old.follow_up != replacement.follow_up
    if edges_changed:
        return renumber(snapshot).questions, True
    return snapshot, False


def normalize_control_type(question: Question, control_type: str) -> Question:
    """Return ``question`` switched to ``control_type`` with consistent rules.

    Non-binary types carry no risk points and no follow-ups.  ``binary2``
    has no N/A answer, so its N/A points and follow-up are dropped.
    """
    update: dict[str, Any] = {"control_type": control_type}
    if control_type not in BINARY_TYPES:
        update["risk_points"] = {}
        update["follow_up"] = {}
    else:
        legal = LEGAL_ANSWERS[control_type]
        update["risk_points"] = {
            a: p for a, p in question.risk_points.items() if a in legal
        }
        update["follow_up"] = {
            a: t for a, t in question.follow_up.items() if a in legal
        }
    # Round-trip through validation so dropped tokens are refilled with 0
    return Question.model_validate({**question.model_dump(), **update})


# ---------------------------------------------------------------------------
# Editing session
# ---------------------------------------------------------------------------

class QuestionEditor:
    """Stateful editing session over one snapshot of the question pool.

    Args:
        questions: the loaded pool in persisted display order
    """

    def __init__(self, questions: list[Question]) -> None:
        # Loading is a read; warnings are logged when an edit renumbers
        result = renumber(list(questions), log_warnings=False)
        self._questions: list[Question] = result.questions
        self._selected_id: int | None = None

    @property
    def questions(self) -> list[Question]:
        """Current snapshot (copy) in pool order."""
        return list(self._questions)

    @property
    def selected_id(self) -> int | None:
        return self._selected_id

    def view(self) -> EditResult:
        """Current snapshot, tree and warnings without editing anything."""
        forest = build_forest(self._questions)
        return EditResult(
            questions=self.questions,
            tree=forest.roots,
            warnings=forest.warnings,
            selected_id=self._selected_id,
        )

    def get(self, qid: int) -> Question | None:
        return next((q for q in self._questions if q.id == qid), None)

    def select(self, qid: int | None) -> EditResult:
        """Select a question for editing (None clears the selection)."""
        if qid is None or self.get(qid) is not None:
            self._selected_id = qid
        return self.view()

    def add(self) -> EditResult:
        """Add a blank question and select it."""
        result, new_id = add_question(self._questions)
        self._selected_id = new_id
        logger.info("Added question %s", new_id)
        return self._apply(result)

    def delete(self, qid: int) -> EditResult:
        """Delete a question and cascade its incoming follow-up edges."""
        result = delete_question(self._questions, qid)
        if result is None:
            logger.debug("Delete of unknown question %s ignored", qid)
            return self.view()
        if self._selected_id == qid:
            self._selected_id = None
        logger.info("Deleted question %s", qid)
        return self._apply(result)

    def reorder(self, dragged_id: int, target_id: int) -> EditResult:
        """Move ``dragged_id`` before ``target_id``."""
        result = reorder_questions(self._questions, dragged_id, target_id)
        if result is None:
            logger.debug("Reorder %s -> %s ignored", dragged_id, target_id)
            return self.view()
        return self._apply(result)

    def update(self, updated: Question) -> EditResult:
        """Replace one question; renumber only if its follow-ups changed."""
        outcome = update_question(self._questions, updated)
        if outcome is None:
            logger.debug("Update of unknown question %s ignored", updated.id)
            return self.view()
        self._questions, _ = outcome
        return self.view()

    def change_control_type(self, qid: int, control_type: str) -> EditResult:
        """Switch a question's control type, normalising its rules."""
        question = self.get(qid)
        if question is None:
            return self.view()
        return self.update(normalize_control_type(question, control_type))

    def _apply(self, result: RenumberResult) -> EditResult:
        self._questions = result.questions
        return EditResult(
            questions=self.questions,
            tree=result.tree,
            warnings=result.warnings,
            selected_id=self._selected_id,
        )
