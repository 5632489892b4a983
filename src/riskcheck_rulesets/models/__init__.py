"""Public model re-exports for riskcheck_rulesets.

Consumers should import from ``riskcheck_rulesets.models`` rather than
reaching into sub-modules directly.
"""

# --- Questions ---
from riskcheck_rulesets.models.question import Answer, ControlType, Question

# --- Routing / reference data ---
from riskcheck_rulesets.models.schema import (
    ClassCode,
    ClassificationEntry,
    InjectionRule,
    Predicate,
    RiskBand,
)

# --- Session / step / editor ---
from riskcheck_rulesets.models.session import (
    AssessmentReport,
    CompletionStep,
    EditResult,
    QuestionPayload,
    QuestionStep,
    ReportEntry,
    RiskProfile,
    SessionInfo,
    SessionState,
    StepResult,
    TreeNode,
)

__all__ = [
    # Questions
    "Answer",
    "ControlType",
    "Question",
    # Schema
    "ClassCode",
    "ClassificationEntry",
    "InjectionRule",
    "Predicate",
    "RiskBand",
    # Session
    "AssessmentReport",
    "CompletionStep",
    "EditResult",
    "QuestionPayload",
    "QuestionStep",
    "ReportEntry",
    "RiskProfile",
    "SessionInfo",
    "SessionState",
    "StepResult",
    "TreeNode",
]
