"""QuestionGraph — in-memory question pool with follow-up edges.

Pure data: the graph offers lookup by id and the pool order, nothing else.
Structural edits never mutate a graph; the editor produces a new snapshot
which is persisted and loaded into a fresh graph.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from riskcheck_rulesets.models.question import Question


class QuestionGraph:
    """Ordered question pool with O(1) lookup by id.

    Args:
        questions: questions in persisted display order (the order is the
            tie-break for renumbering and the initial queue)

    Raises:
        ValueError: if two questions share an id.
    """

    def __init__(self, questions: Iterable[Question]) -> None:
        self._questions: list[Question] = list(questions)
        self._by_id: dict[int, Question] = {}
        for q in self._questions:
            if q.id in self._by_id:
                raise ValueError(f"Duplicate question id: {q.id}")
            self._by_id[q.id] = q

    def get_by_id(self, qid: int) -> Question | None:
        """Return the question with ``qid``, or None if it does not exist."""
        return self._by_id.get(qid)

    def all(self) -> list[Question]:
        """All questions in pool order."""
        return list(self._questions)

    def by_id_map(self) -> dict[int, Question]:
        """Mapping id -> question (a copy; safe for callers to mutate)."""
        return dict(self._by_id)

    def initial_questions(self) -> list[Question]:
        """Questions flagged ``is_initial`` in pool order."""
        return [q for q in self._questions if q.is_initial]

    def __contains__(self, qid: object) -> bool:
        return qid in self._by_id

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)
