"""Pydantic models for routing configuration and reference data.

These models mirror the YAML files in ``v1/``:

  - ClassificationEntry: initial question id -> ordered question ids to
    inject on a "Yes" answer (from routing.yaml ``classification``)
  - Predicate / InjectionRule: multi-question injection triggered by the
    answer to a designated question (from routing.yaml ``injections``)
  - RiskBand: score threshold and message for the risk profile
    (from routing.yaml ``risk_bands``)
  - ClassCode: entry of the class-code catalog served by an external lookup
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, model_validator


class ClassificationEntry(BaseModel):
    """One row of the classification table.

    ``tail`` names a shared list under ``tails`` in routing.yaml that is
    appended after ``questions`` (e.g. the general safety set).
    """

    qid: int
    label: str = ""
    questions: List[int] = []
    tail: Optional[str] = None


class Predicate(BaseModel):
    """A condition evaluated against a single answer value.

    Operators:
      - eq, ne: equality / inequality
      - contains, not_contains: element (list) or substring (str) membership
      - contains_any, contains_all: set membership against a list of values
      - matches: regex search against the string form of the answer
    """

    op: Literal[
        "eq", "ne", "contains", "not_contains",
        "contains_any", "contains_all", "matches",
    ]
    value: Any


class InjectionRule(BaseModel):
    """Batch injection attached to a trigger question.

    When ``trigger_qid`` is answered, ``conditional_qid`` is queued if the
    answer satisfies ``when``; ``closing_qid`` is queued unconditionally.
    Both land right after the trigger question, conditional first.
    """

    trigger_qid: int
    when: Optional[Predicate] = None
    conditional_qid: Optional[int] = None
    closing_qid: Optional[int] = None

    @model_validator(mode="after")
    def _chk(self):
        if self.conditional_qid is None and self.closing_qid is None:
            raise ValueError("injection rule must name a conditional_qid or closing_qid")
        if self.conditional_qid is not None and self.when is None:
            raise ValueError("conditional_qid requires a 'when' predicate")
        return self


class RiskBand(BaseModel):
    """Risk profile level reached when the score is at least ``min_score``."""

    level: str
    min_score: int
    message: str


class ClassCode(BaseModel):
    """A workers' compensation class code with a short description."""

    code: str
    description: str
