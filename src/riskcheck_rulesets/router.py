"""ClassificationRouter — static table of industry-specific question paths.

A "Yes" to an initial classification question replaces the rest of the
queue with the ordered list configured for that question.  The table is
data, loaded from ``v1/routing.yaml`` at startup and read-only afterwards.

Usage::

    router = ClassificationRouter({1: [200, 100, 101], 6: [100, 101]})
    router.resolve(1)   # (200, 100, 101)
    router.resolve(42)  # ()
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from riskcheck_rulesets.models.schema import ClassificationEntry


class ClassificationRouter:
    """Immutable mapping: initial question id -> ordered question ids.

    The configured order is authoritative.  Ids shared between entries
    (e.g. a common general tail) are kept in every entry that lists them;
    duplicates inside a single entry are left for the engine's
    idempotent insertion to collapse.
    """

    def __init__(self, table: Mapping[int, Iterable[int]] | None = None) -> None:
        frozen = {int(k): tuple(int(q) for q in v) for k, v in (table or {}).items()}
        self._table: Mapping[int, tuple[int, ...]] = MappingProxyType(frozen)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[ClassificationEntry],
        tails: Mapping[str, Iterable[int]] | None = None,
    ) -> "ClassificationRouter":
        """Build a router from routing.yaml entries, expanding named tails.

        Raises:
            KeyError: if an entry references an undefined tail.
        """
        tails = tails or {}
        table: dict[int, list[int]] = {}
        for entry in entries:
            ids = list(entry.questions)
            if entry.tail is not None:
                if entry.tail not in tails:
                    raise KeyError(f"Unknown tail '{entry.tail}' in classification entry {entry.qid}")
                ids.extend(tails[entry.tail])
            table[entry.qid] = ids
        return cls(table)

    def resolve(self, qid: int) -> tuple[int, ...]:
        """Ordered question ids for ``qid``; empty if not configured."""
        return self._table.get(qid, ())

    def keys(self) -> list[int]:
        """Configured initial question ids in table order."""
        return list(self._table.keys())

    def as_dict(self) -> dict[int, list[int]]:
        """Plain-dict copy of the table (for API responses)."""
        return {k: list(v) for k, v in self._table.items()}

    def __contains__(self, qid: object) -> bool:
        return qid in self._table

    def __len__(self) -> int:
        return len(self._table)
