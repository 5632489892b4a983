"""RulesetStore — loads the YAML rulesets from ``v1/`` into typed models.

This is the single source of routing data at runtime.  The store is loaded
once at startup; the default question pool it carries seeds the database
and backs "reset to defaults" in the editor.

Files:

  - ``questions.yaml``: the default question pool, in pool order
  - ``routing.yaml``: classification table (``tails`` + ``classification``),
    batch injections (``injections``), optional ``risk_bands`` and
    ``class_codes``

Usage::

    store = RulesetStore()          # defaults to v1/ relative to repo root
    store.load()                    # parse all YAML files

    engine = store.build_engine(questions)   # questions from the database
    state = engine.start()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from riskcheck_rulesets.engine import QueueEngine
from riskcheck_rulesets.evaluator import InjectionEvaluator
from riskcheck_rulesets.graph import QuestionGraph
from riskcheck_rulesets.models.question import Question
from riskcheck_rulesets.models.schema import ClassCode, ClassificationEntry, InjectionRule, RiskBand
from riskcheck_rulesets.report import DEFAULT_RISK_BANDS
from riskcheck_rulesets.router import ClassificationRouter
from riskcheck_rulesets.tree import renumber

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upwards from *start* to find the repo root (dir with pyproject.toml or .git).

    Falls back to cwd if no marker is found.
    """
    p = (start or Path(__file__).resolve()).parent
    for parent in [p, *p.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return Path.cwd()


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


# ---------------------------------------------------------------------------
# RulesetStore
# ---------------------------------------------------------------------------

class RulesetStore:
    """Loads all YAML from ``v1/`` and builds engines over a question pool.

    Attributes populated after :meth:`load`:

        default_questions — list[Question], renumbered, in pool order
        classification    — list[ClassificationEntry] as configured
        router            — ClassificationRouter with tails expanded
        injections        — InjectionEvaluator over the configured rules
        risk_bands        — list[RiskBand] (defaults if none configured)
        class_codes       — list[ClassCode] seed catalog (may be empty)
    """

    def __init__(self, ruleset_dir: str | Path | None = None) -> None:
        if ruleset_dir is None:
            ruleset_dir = find_repo_root() / "v1"
        self._base = Path(ruleset_dir)

        # Populated by load()
        self.default_questions: list[Question] = []
        self.classification: list[ClassificationEntry] = []
        self.router = ClassificationRouter()
        self.injections = InjectionEvaluator()
        self.risk_bands: list[RiskBand] = list(DEFAULT_RISK_BANDS)
        self.class_codes: list[ClassCode] = []

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse all YAML files under the ruleset directory into typed models.

        Call this once at startup.  Raises ``FileNotFoundError`` if expected
        YAML files are missing and ``ValueError`` (or a pydantic
        ``ValidationError``) on invalid data.
        """
        self._load_questions()
        self._load_routing()
        logger.info(
            "RulesetStore loaded: %d questions, %d classification paths, %d injection rules",
            len(self.default_questions),
            len(self.router),
            len(self.injections.rules),
        )

    def _load_questions(self) -> None:
        """Load questions.yaml into the default pool (renumbered)."""
        raw_list = load_yaml(self._base / "questions.yaml") or []
        questions = [Question(**raw) for raw in raw_list]
        # Rejects duplicate ids
        QuestionGraph(questions)
        self.default_questions = renumber(questions).questions

    def _load_routing(self) -> None:
        """Load routing.yaml: classification table, injections, risk bands, class codes."""
        raw = load_yaml(self._base / "routing.yaml") or {}

        tails: dict[str, list[int]] = {
            name: [int(q) for q in ids] for name, ids in (raw.get("tails") or {}).items()
        }
        self.classification = [
            ClassificationEntry(**entry) for entry in raw.get("classification") or []
        ]
        try:
            self.router = ClassificationRouter.from_entries(self.classification, tails)
        except KeyError as exc:
            raise ValueError(f"Invalid routing.yaml: {exc.args[0]}") from exc

        self.injections = InjectionEvaluator(
            InjectionRule(**rule) for rule in raw.get("injections") or []
        )

        bands = raw.get("risk_bands")
        if bands:
            self.risk_bands = [RiskBand(**band) for band in bands]

        self.class_codes = [ClassCode(**code) for code in raw.get("class_codes") or []]

        self._check_references(tails)

    def _check_references(self, tails: dict[str, list[int]]) -> None:
        """Log routing targets that are missing from the default pool.

        Dangling ids are legal (they are dropped at traversal time) but
        usually point at a typo in the YAML.
        """
        known = {q.id for q in self.default_questions}
        referenced: set[int] = set()
        for entry in self.classification:
            referenced.add(entry.qid)
            referenced.update(entry.questions)
        for ids in tails.values():
            referenced.update(ids)
        for rule in self.injections.rules:
            referenced.update(
                qid for qid in (rule.trigger_qid, rule.conditional_qid, rule.closing_qid)
                if qid is not None
            )
        missing = sorted(referenced - known)
        if missing:
            logger.warning("routing.yaml references questions not in the default pool: %s", missing)

    # ------------------------------------------------------------------
    # Engine factory
    # ------------------------------------------------------------------

    def build_engine(self, questions: Iterable[Question] | None = None) -> QueueEngine:
        """Build a :class:`QueueEngine` over ``questions`` with this store's routing.

        Uses the default pool when ``questions`` is None.
        """
        pool = self.default_questions if questions is None else list(questions)
        return QueueEngine(
            QuestionGraph(pool),
            router=self.router,
            injections=self.injections,
            risk_bands=self.risk_bands,
        )

    def copy_defaults(self) -> list[Question]:
        """Deep copies of the default pool (safe to hand to an editor)."""
        return [q.model_copy(deep=True) for q in self.default_questions]
