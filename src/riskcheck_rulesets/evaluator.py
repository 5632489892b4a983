"""InjectionEvaluator — resolves batch injections for designated questions.

Some questions insert several unrelated questions when answered (e.g. the
"states of operation" question queues a California-specific question when
California is selected, and always queues the closing class-code question).
These rules run regardless of control type.  The engine calls :meth:`plan`
to find out which question ids the answer asks for; membership checks and
insertion stay with the engine.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from riskcheck_rulesets.models.schema import InjectionRule, Predicate

logger = logging.getLogger(__name__)


class InjectionEvaluator:
    """Evaluates injection rules against a submitted answer.

    Args:
        rules: injection rules; at most one rule per trigger question
            (a later rule for the same trigger replaces an earlier one)
    """

    def __init__(self, rules: Iterable[InjectionRule] = ()) -> None:
        self._rules: dict[int, InjectionRule] = {}
        for rule in rules:
            if rule.trigger_qid in self._rules:
                logger.warning(
                    "Duplicate injection rule for question %s, keeping the last one",
                    rule.trigger_qid,
                )
            self._rules[rule.trigger_qid] = rule

    @property
    def rules(self) -> list[InjectionRule]:
        """Configured rules in definition order."""
        return list(self._rules.values())

    def has_rule(self, qid: int) -> bool:
        """True if answering ``qid`` may inject questions."""
        return qid in self._rules

    def plan(self, qid: int, value: Any, answer_fits: bool = True) -> list[int]:
        """Return the question ids to inject after ``qid``, in queue order.

        The conditional question comes first (only when the answer has the
        trigger question's shape and the predicate holds), then the closing
        question, which is queued for any answer.  Returns an empty list
        when ``qid`` has no rule.
        """
        rule = self._rules.get(qid)
        if rule is None:
            return []

        planned: list[int] = []
        if rule.conditional_qid is not None and answer_fits and self.matches(rule.when, value):
            planned.append(rule.conditional_qid)
        if rule.closing_qid is not None:
            planned.append(rule.closing_qid)
        return planned

    # ------------------------------------------------------------------
    # Predicate evaluation
    # ------------------------------------------------------------------

    def matches(self, pred: Predicate | None, answer: Any) -> bool:
        """Evaluate a predicate against a raw answer value.

        A missing answer never matches.
        """
        if pred is None or answer is None:
            return False
        return self._compare(pred.op, answer, pred.value)

    @staticmethod
    def _compare(op: str, answer: Any, value: Any) -> bool:
        """Apply an operator to an answer and an expected value."""
        if op == "eq":
            return answer == value

        if op == "ne":
            return answer != value

        # --- Collection / string membership ---
        if op == "contains":
            # Works for both "X in list" and "substring in string"
            if isinstance(answer, list):
                return value in answer
            return str(value) in str(answer)

        if op == "not_contains":
            if isinstance(answer, list):
                return value not in answer
            return str(value) not in str(answer)

        if op == "contains_any":
            if isinstance(answer, list):
                return any(v in answer for v in value)
            ans_str = str(answer)
            return any(str(v) in ans_str for v in value)

        if op == "contains_all":
            if isinstance(answer, list):
                return all(v in answer for v in value)
            ans_str = str(answer)
            return all(str(v) in ans_str for v in value)

        if op == "matches":
            return bool(re.search(str(value), str(answer)))

        logger.warning("Unknown predicate operator: %s", op)
        return False
