"""QueueEngine — drives one respondent through the question graph.

The engine is a synchronous state machine over :class:`SessionState`.
Each call to :meth:`QueueEngine.submit_answer` consumes the answer for the
current question, updates the score, mutates the queue, and advances.  No
I/O happens here; callers own persistence of the session state.

States:
    Running   — ``state.complete`` is False and a current question exists
    Complete  — terminal; further answers raise ``ValueError``

Queue mutation on every answer, in order:
    1. record the answer
    2. score legal binary answers
    3. jump rule: an initial question answered "Yes" replaces the queue
       tail with its classification path (skips 4 and 5)
    4. follow-up: insert the configured target right after the question
    5. batch injection for designated questions (any control type)
    6. advance, or complete when the queue is exhausted

Every insertion checks queue membership by id, so the queue never holds
the same question twice.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from riskcheck_rulesets.constants import JUMP_ANSWER
from riskcheck_rulesets.evaluator import InjectionEvaluator
from riskcheck_rulesets.graph import QuestionGraph
from riskcheck_rulesets.models.question import Question
from riskcheck_rulesets.models.schema import RiskBand
from riskcheck_rulesets.models.session import (
    AssessmentReport,
    CompletionStep,
    QuestionPayload,
    QuestionStep,
    SessionState,
    StepResult,
)
from riskcheck_rulesets.report import build_report, risk_profile
from riskcheck_rulesets.router import ClassificationRouter

logger = logging.getLogger(__name__)


class QueueEngine:
    """Builds and advances per-session question queues.

    Args:
        graph: the question pool for this session
        router: classification table for the jump rule (empty if None)
        injections: batch injection rules (none if None)
        risk_bands: bands for the completion step (defaults if None)
    """

    def __init__(
        self,
        graph: QuestionGraph,
        router: ClassificationRouter | None = None,
        injections: InjectionEvaluator | None = None,
        risk_bands: Iterable[RiskBand] | None = None,
    ) -> None:
        self._graph = graph
        self._router = router or ClassificationRouter()
        self._injections = injections or InjectionEvaluator()
        self._risk_bands = list(risk_bands) if risk_bands is not None else None

    @property
    def graph(self) -> QuestionGraph:
        return self._graph

    # ==================================================================
    # Session lifecycle
    # ==================================================================

    def start(self) -> SessionState:
        """Create a fresh session positioned on the first initial question.

        If no question is flagged initial, the first question in pool order
        is used.  An empty pool yields a session that is already complete.
        """
        initial = [q.id for q in self._graph.initial_questions()]
        if not initial and len(self._graph) > 0:
            first = self._graph.all()[0]
            logger.warning("No initial question marked, starting from question %s", first.id)
            initial = [first.id]

        state = SessionState(queue=initial, complete=not initial)
        logger.debug("Session started with queue %s", state.queue)
        return state

    def current_step(self, state: SessionState) -> StepResult:
        """Return the current step without modifying the state.

        Raises:
            KeyError: if the current question is not in this engine's graph.
        """
        if state.complete:
            return CompletionStep(
                score=state.score,
                risk_profile=risk_profile(state.score, self._risk_bands),
                answered=len(state.answers),
            )

        qid = state.queue[state.current_index]
        question = self._graph.get_by_id(qid)
        if question is None:
            raise KeyError(f"Question {qid} is not in this engine's graph")
        history = [
            self._to_payload(self._graph.get_by_id(prev), state)
            for prev in state.queue[: state.current_index + 1]
            if prev in self._graph
        ]
        return QuestionStep(
            current_index=state.current_index,
            score=state.score,
            question=self._to_payload(question, state),
            history=history,
            queue=list(state.queue),
        )

    def report(self, state: SessionState) -> AssessmentReport:
        """Final score and answered questions, in queue order."""
        return build_report(self._graph, state, self._risk_bands)

    # ==================================================================
    # Answer submission
    # ==================================================================

    def submit_answer(self, state: SessionState, value: Any) -> StepResult:
        """Answer the current question and advance the session in place.

        Returns the step after processing.

        Raises:
            ValueError: if the session is already complete.
            KeyError: if the state was built against a different graph.
        """
        if state.complete or state.current_qid is None:
            raise ValueError("Cannot submit answer: session is already complete")

        index = state.current_index
        qid = state.queue[index]
        question = self._graph.get_by_id(qid)
        if question is None:
            raise KeyError(f"Question {qid} is not in this engine's graph")

        # 1. Record (re-answering overwrites)
        state.answers[qid] = value

        legal = question.accepts(value)
        if question.is_binary and not legal:
            logger.debug(
                "Answer %r is not legal for %s question %s, skipping scoring and branching",
                value, question.control_type, qid,
            )

        # 2. Score
        if legal:
            state.score += question.points_for(value)

        # 3. Jump rule
        if legal and question.is_initial and value == JUMP_ANSWER:
            return self._jump(state, question)

        # 4. Standard follow-up
        if legal:
            target = question.follow_up_target(value)
            if target is not None:
                self._insert_after(state, index, [target])

        # 5. Batch injection; a wrong-shape answer only gets the closing question
        if self._injections.has_rule(qid):
            fits = question.fits(value)
            if not fits:
                logger.debug(
                    "Answer %r does not fit %s question %s, skipping conditional injection",
                    value, question.control_type, qid,
                )
            self._insert_after(state, index, self._injections.plan(qid, value, answer_fits=fits))

        # 6. Advance
        return self._advance(state)

    # ==================================================================
    # Internal: queue mutation
    # ==================================================================

    def _jump(self, state: SessionState, question: Question) -> StepResult:
        """Replace everything after the current question with the classification path."""
        configured = self._router.resolve(question.id)
        resolved = [qid for qid in configured if qid in self._graph]
        if len(resolved) < len(configured):
            logger.debug(
                "Dropped dangling classification targets for %s: %s",
                question.id, [qid for qid in configured if qid not in self._graph],
            )

        if not resolved:
            logger.debug("No classification path for question %s, completing", question.id)
            state.complete = True
            return self.current_step(state)

        prefix = state.queue[: state.current_index + 1]
        tail: list[int] = []
        for qid in resolved:
            if qid not in prefix and qid not in tail:
                tail.append(qid)
        state.queue = prefix + tail
        logger.debug("Jumped from question %s to path %s", question.id, tail)
        return self._advance(state)

    def _insert_after(self, state: SessionState, index: int, qids: list[int]) -> int:
        """Splice ``qids`` in right after ``index``, keeping their relative order.

        Ids that are unknown or already queued are skipped.  Returns the
        number of inserted questions.
        """
        position = index + 1
        inserted = 0
        for qid in qids:
            if qid not in self._graph:
                logger.debug("Dropped dangling target %s", qid)
                continue
            if qid in state.queue:
                continue
            state.queue.insert(position, qid)
            position += 1
            inserted += 1
        return inserted

    def _advance(self, state: SessionState) -> StepResult:
        """Move to the next queued question or complete the session."""
        if state.current_index + 1 < len(state.queue):
            state.current_index += 1
        else:
            state.complete = True
            logger.debug("Session complete with score %d", state.score)
        return self.current_step(state)

    # ==================================================================
    # Internal: helpers
    # ==================================================================

    @staticmethod
    def _to_payload(question: Question, state: SessionState) -> QuestionPayload:
        """Convert a Question to the flat payload the presentation layer renders."""
        return QuestionPayload(
            id=question.id,
            display_number=question.display_number,
            text=question.text,
            control_type=question.control_type,
            options=list(question.legal_answers) if question.is_binary else None,
            answer=state.answers.get(question.id),
        )
