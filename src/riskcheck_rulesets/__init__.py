"""riskcheck_rulesets — Dynamic risk questionnaire SDK.

Public API:
    QueueEngine          — per-session queue, score and completion state machine
    QuestionGraph        — in-memory question pool with lookup by id
    QuestionEditor       — editor operations (add, delete, reorder, update, ...)
    ClassificationRouter — initial question id -> industry question path
    InjectionEvaluator   — batch injections triggered by designated answers
    RulesetStore         — loads YAML rulesets into typed models
    build_forest         — derived parent -> children view with cycle guard
    renumber             — recompute hierarchical display numbers
    build_report         — final score, risk profile and answered questions
    risk_profile         — score -> risk band

Enrichment interfaces:
    EnrichmentLookup     — ABC for free-text business / code lookups
    CodeCatalog          — ABC for the class-code catalog
    StaticCodeCatalog    — fixed in-memory CodeCatalog
    CachedCodeCatalog    — TTL cache in front of a CodeCatalog
"""

from riskcheck_rulesets.editor import QuestionEditor
from riskcheck_rulesets.engine import QueueEngine
from riskcheck_rulesets.evaluator import InjectionEvaluator
from riskcheck_rulesets.graph import QuestionGraph
from riskcheck_rulesets.interfaces import (
    CachedCodeCatalog,
    CodeCatalog,
    EnrichmentLookup,
    StaticCodeCatalog,
)
from riskcheck_rulesets.models import (
    AssessmentReport,
    CompletionStep,
    EditResult,
    Question,
    QuestionPayload,
    QuestionStep,
    SessionInfo,
    SessionState,
    StepResult,
)
from riskcheck_rulesets.report import build_report, risk_profile
from riskcheck_rulesets.router import ClassificationRouter
from riskcheck_rulesets.ruleset import RulesetStore
from riskcheck_rulesets.tree import build_forest, renumber

__all__ = [
    # Engine & store
    "QueueEngine",
    "QuestionGraph",
    "QuestionEditor",
    "ClassificationRouter",
    "InjectionEvaluator",
    "RulesetStore",
    # Tree & report
    "build_forest",
    "renumber",
    "build_report",
    "risk_profile",
    # Session / step
    "AssessmentReport",
    "CompletionStep",
    "EditResult",
    "Question",
    "QuestionPayload",
    "QuestionStep",
    "SessionInfo",
    "SessionState",
    "StepResult",
    # Enrichment interfaces
    "EnrichmentLookup",
    "CodeCatalog",
    "StaticCodeCatalog",
    "CachedCodeCatalog",
]
