"""Report helpers — risk profile banding and the final answered-question list.

The report collaborator (PDF export, email, ...) receives an
:class:`AssessmentReport`: the final score, the risk band it falls into,
and every answered question in queue order.
"""

from __future__ import annotations

from typing import Iterable

from riskcheck_rulesets.constants import HIGH_RISK_THRESHOLD, MODERATE_RISK_THRESHOLD
from riskcheck_rulesets.graph import QuestionGraph
from riskcheck_rulesets.models.schema import RiskBand
from riskcheck_rulesets.models.session import (
    AssessmentReport,
    ReportEntry,
    RiskProfile,
    SessionState,
)

# Used when routing.yaml does not define ``risk_bands``.
DEFAULT_RISK_BANDS: list[RiskBand] = [
    RiskBand(
        level="High Risk",
        min_score=HIGH_RISK_THRESHOLD,
        message=(
            "Your business shows several significant risk factors. It is highly "
            "recommended to partner with a PEO to implement comprehensive safety "
            "and compliance solutions."
        ),
    ),
    RiskBand(
        level="Moderate Risk",
        min_score=MODERATE_RISK_THRESHOLD,
        message=(
            "There are some areas for improvement. A PEO can provide expert "
            "guidance and resources to help you mitigate these risks."
        ),
    ),
    RiskBand(
        level="Low Risk",
        min_score=0,
        message=(
            "You have strong safety practices in place. A PEO can help you "
            "maintain and document your excellent record."
        ),
    ),
]


def risk_profile(score: int, bands: Iterable[RiskBand] | None = None) -> RiskProfile:
    """Return the highest band whose ``min_score`` the score reaches.

    Scores below every threshold fall into the lowest band.
    """
    ordered = sorted(bands or DEFAULT_RISK_BANDS, key=lambda b: b.min_score, reverse=True)
    if not ordered:
        raise ValueError("At least one risk band is required")
    for band in ordered:
        if score >= band.min_score:
            return RiskProfile(level=band.level, message=band.message)
    lowest = ordered[-1]
    return RiskProfile(level=lowest.level, message=lowest.message)


def build_report(
    graph: QuestionGraph,
    state: SessionState,
    bands: Iterable[RiskBand] | None = None,
) -> AssessmentReport:
    """Build the final report: answered questions only, in queue order."""
    entries: list[ReportEntry] = []
    for qid in state.queue:
        if qid not in state.answers:
            continue
        question = graph.get_by_id(qid)
        if question is None:
            continue
        entries.append(ReportEntry(
            qid=qid,
            question_text=question.text,
            answer=state.answers[qid],
        ))

    return AssessmentReport(
        score=state.score,
        risk_profile=risk_profile(state.score, bands),
        entries=entries,
    )
