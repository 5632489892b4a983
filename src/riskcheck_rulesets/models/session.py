"""Session, step and editor models — the contract between the SDK and callers.

These models define what the engine and editor return.  They are
intentionally decoupled from the ORM models in ``riskcheck_db`` so that API
consumers never see database internals.

Step types:
  - QuestionStep: present the current question to the respondent
  - CompletionStep: session finished with a score and risk profile

The ``StepResult`` union covers both cases so callers can dispatch on ``type``.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from riskcheck_rulesets.models.question import Question


class SessionState(BaseModel):
    """Ephemeral per-respondent state advanced by the queue engine.

    ``queue`` holds question ids in presentation order; it only grows
    until the session completes.  ``score`` only ever increases.
    """

    queue: list[int] = Field(default_factory=list)
    current_index: int = 0
    score: int = 0
    # question id -> raw answer value as submitted
    answers: dict[int, Any] = Field(default_factory=dict)
    complete: bool = False

    @property
    def current_qid(self) -> int | None:
        """Id of the question awaiting an answer, None once complete."""
        if self.complete or self.current_index >= len(self.queue):
            return None
        return self.queue[self.current_index]


class QuestionPayload(BaseModel):
    """Flattened question for API consumers.

    Strips branching details and presents only what the UI needs to
    render the question's input control.
    """

    id: int
    display_number: str
    text: str
    control_type: str
    # Answer tokens for binary types, None otherwise
    options: list[str] | None = None
    # Previously submitted answer, if the question was already answered
    answer: Any = None


class RiskProfile(BaseModel):
    """Risk band reached by a final score."""

    level: str
    message: str


class QuestionStep(BaseModel):
    """Engine step: present the current question and wait for an answer."""

    type: Literal["question"] = "question"
    current_index: int
    score: int
    question: QuestionPayload
    # Questions presented so far (answered ones plus the current one)
    history: list[QuestionPayload] = Field(default_factory=list)
    queue: list[int]


class CompletionStep(BaseModel):
    """Engine step: every queued question has been answered (or a jump ended the run)."""

    type: Literal["completed"] = "completed"
    score: int
    risk_profile: RiskProfile
    answered: int


# Callers can match on step.type to dispatch rendering logic.
StepResult = QuestionStep | CompletionStep


class ReportEntry(BaseModel):
    """One answered question in the final report."""

    qid: int
    question_text: str
    answer: Any


class AssessmentReport(BaseModel):
    """Final ``(score, answered questions)`` pair handed to report generation."""

    score: int
    risk_profile: RiskProfile
    entries: list[ReportEntry]


class SessionInfo(BaseModel):
    """Public view of a respondent session held by the server."""

    session_id: str
    score: int
    complete: bool
    current_index: int
    queue_length: int
    created_at: datetime


# --- Editor views ---

class TreeNode(BaseModel):
    """One question in the derived parent -> children forest."""

    id: int
    display_number: str
    text: str
    children: list["TreeNode"] = Field(default_factory=list)


class EditResult(BaseModel):
    """Snapshot returned by every editor operation.

    ``warnings`` carries graph problems found while renumbering (cycles,
    questions with several parents) that a human must fix.
    """

    questions: list[Question]
    tree: list[TreeNode]
    warnings: list[str] = Field(default_factory=list)
    selected_id: int | None = None
