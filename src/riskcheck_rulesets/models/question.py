"""Question model for the assessment question graph.

Each question carries the answer shape it expects (``control_type``) and,
for binary questions, its scoring and branching rules:

  Binary (drive score and follow-ups):
    - binary3: Yes / No / N/A buttons
    - binary2: Yes / No buttons

  Non-binary (answer is recorded only):
    - free_text: open-ended text input
    - numeric: number input
    - multi_select: pick one or more options (e.g. states of operation)
    - tag_list: entries added one at a time (e.g. class codes)
    - composite_form: several named sub-fields submitted together

``id`` is the only identity used by edges.  ``display_number`` is a derived
hierarchical label recomputed by renumbering and is never used for lookup.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from riskcheck_rulesets.constants import ANSWER_TOKENS, BINARY_TYPES, LEGAL_ANSWERS, LIST_TYPES

# Answer token accepted by binary questions.
Answer = Literal["Yes", "No", "N/A"]

ControlType = Literal[
    "binary3",
    "binary2",
    "free_text",
    "numeric",
    "multi_select",
    "tag_list",
    "composite_form",
]


class Question(BaseModel):
    """A node in the question graph."""

    id: int
    text: str
    display_number: str = ""
    is_initial: bool = False
    control_type: ControlType = "binary3"
    # Score contribution per answer token; missing tokens count as 0
    risk_points: dict[Answer, int] = Field(default_factory=dict, validate_default=True)
    # Partial map answer token -> target question id
    follow_up: dict[Answer, int] = Field(default_factory=dict)

    @field_validator("risk_points")
    @classmethod
    def _fill_risk_points(cls, v: dict[str, int]) -> dict[str, int]:
        filled = {token: int(v.get(token, 0)) for token in ANSWER_TOKENS}
        # Scores only ever grow within a session
        negative = [token for token, points in filled.items() if points < 0]
        if negative:
            raise ValueError(f"risk_points must be >= 0, got negative values for {negative}")
        return filled

    @field_validator("follow_up", mode="before")
    @classmethod
    def _drop_empty_targets(cls, v: Any) -> Any:
        # The editor represents "no follow-up" as an empty selection
        if isinstance(v, dict):
            return {k: t for k, t in v.items() if t is not None and t != ""}
        return v

    @property
    def is_binary(self) -> bool:
        """True if answers to this question drive score and follow-ups."""
        return self.control_type in BINARY_TYPES

    @property
    def legal_answers(self) -> tuple[str, ...]:
        """Answer tokens this question accepts (empty for non-binary types)."""
        return LEGAL_ANSWERS.get(self.control_type, ())

    def accepts(self, value: Any) -> bool:
        """True if ``value`` is a legal binary token for this question."""
        return isinstance(value, str) and value in self.legal_answers

    def fits(self, value: Any) -> bool:
        """True if ``value`` has the shape this control type submits.

        Binary and free-text answers are strings, numeric answers are numbers
        (or numeric strings), list controls submit lists of strings and
        composite forms submit a record of strings.
        """
        kind = self.control_type
        if kind in BINARY_TYPES or kind == "free_text":
            return isinstance(value, str)
        if kind == "numeric":
            if isinstance(value, bool):
                return False
            if isinstance(value, (int, float)):
                return True
            try:
                float(value)
            except (TypeError, ValueError):
                return False
            return True
        if kind in LIST_TYPES:
            return isinstance(value, list) and all(isinstance(v, str) for v in value)
        # composite_form
        return isinstance(value, dict) and all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        )

    def points_for(self, answer: str) -> int:
        """Risk points for ``answer``, 0 for unknown tokens."""
        return self.risk_points.get(answer, 0)

    def follow_up_target(self, answer: str) -> Optional[int]:
        """The follow-up question id configured for ``answer``, if any."""
        return self.follow_up.get(answer)

    def follow_up_targets(self) -> list[int]:
        """Distinct follow-up target ids in answer-token order."""
        targets: list[int] = []
        for token in ANSWER_TOKENS:
            target = self.follow_up.get(token)
            if target is not None and target not in targets:
                targets.append(target)
        return targets
