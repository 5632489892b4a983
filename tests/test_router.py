"""ClassificationRouter tests — lookup, tails, immutability."""

import pytest

from riskcheck_rulesets.models.schema import ClassificationEntry
from riskcheck_rulesets.router import ClassificationRouter


def test_resolve_returns_configured_order():
    """Order is exactly as configured."""
    router = ClassificationRouter({1: [200, 100, 101]})
    assert router.resolve(1) == (200, 100, 101)


def test_resolve_missing_is_empty():
    """An unconfigured id resolves to an empty path."""
    router = ClassificationRouter({1: [2]})
    assert router.resolve(42) == ()
    assert 42 not in router
    assert 1 in router


def test_shared_ids_kept_in_every_entry():
    """Duplicates across entries are preserved."""
    router = ClassificationRouter({1: [100, 101], 2: [300, 100, 101]})
    assert router.resolve(1) == (100, 101)
    assert router.resolve(2) == (300, 100, 101)
    assert router.keys() == [1, 2]
    assert len(router) == 2


def test_source_mapping_changes_do_not_leak():
    """The router snapshots its table at construction."""
    table = {1: [10]}
    router = ClassificationRouter(table)
    table[1].append(11)
    table[2] = [20]
    assert router.resolve(1) == (10,)
    assert 2 not in router


def test_as_dict_is_a_copy():
    """Mutating the exported dict leaves the router untouched."""
    router = ClassificationRouter({1: [10]})
    exported = router.as_dict()
    exported[1].append(99)
    assert router.resolve(1) == (10,)


def test_from_entries_expands_tails():
    """Named tails are appended after the entry's own questions."""
    entries = [
        ClassificationEntry(qid=1, questions=[200], tail="general"),
        ClassificationEntry(qid=6, tail="general"),
        ClassificationEntry(qid=7, questions=[400]),
    ]
    router = ClassificationRouter.from_entries(entries, {"general": [100, 101]})
    assert router.resolve(1) == (200, 100, 101)
    assert router.resolve(6) == (100, 101)
    assert router.resolve(7) == (400,)


def test_from_entries_unknown_tail():
    """A tail that is not defined is a configuration error."""
    with pytest.raises(KeyError, match="missing"):
        ClassificationRouter.from_entries([ClassificationEntry(qid=1, tail="missing")], {})


def test_default_routing(store):
    """The shipped table routes every industry question."""
    general = (100, 101, 104, 105, 106, 107)
    assert store.router.resolve(1) == (200, *general)
    assert store.router.resolve(2) == (300, 200, *general)
    assert store.router.resolve(3) == (400, 401, *general)
    assert store.router.resolve(4) == (200, *general)
    assert store.router.resolve(5) == (400, 500, *general)
    assert store.router.resolve(6) == general
