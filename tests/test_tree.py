"""Tree derivation and renumbering tests.

Covers hierarchical labels on the default pool, determinism, sibling
order, and graphs that are not trees (cycles, self-loops, several parents,
dangling edges).
"""

import logging

from helpers.factories import binary, numbers

from riskcheck_rulesets.tree import build_forest, derive_parents, renumber


# =====================================================================
# Default pool
# =====================================================================


def test_default_pool_numbering(default_questions):
    """Roots are numbered in pool order and follow-up chains nest."""
    labels = numbers(renumber(default_questions).questions)
    assert labels[7] == "1"
    assert labels[6] == "9"
    assert labels[100] == "10"
    assert labels[101] == "11"
    assert labels[102] == "11.1"
    assert labels[103] == "11.1.1"
    assert labels[104] == "12"
    assert labels[201] == "16.1"
    assert labels[402] == "19.1"
    assert labels[700] == "22"


def test_default_pool_has_no_warnings(default_questions):
    """The shipped pool is a proper forest."""
    assert renumber(default_questions).warnings == []


def test_renumber_is_deterministic(default_questions):
    """Renumbering twice yields identical labels."""
    first = renumber(default_questions)
    second = renumber(first.questions)
    assert numbers(first.questions) == numbers(second.questions)


def test_renumber_does_not_mutate_input():
    """Renumbering returns copies."""
    pool = [binary(1, follow_up={"Yes": 2}), binary(2)]
    renumber(pool)
    assert [q.display_number for q in pool] == ["", ""]


def test_tree_nodes_mirror_labels():
    """The tree view carries the same labels as the flat list."""
    result = renumber([binary(1, follow_up={"Yes": 2, "No": 3}), binary(2), binary(3)])
    assert len(result.tree) == 1
    root = result.tree[0]
    assert (root.id, root.display_number) == (1, "1")
    assert [(c.id, c.display_number) for c in root.children] == [(2, "1.1"), (3, "1.2")]


# =====================================================================
# Sibling order
# =====================================================================


def test_children_follow_pool_order():
    """Siblings are ordered by pool position, not by answer token."""
    pool = [binary(1, follow_up={"Yes": 3, "No": 2}), binary(2), binary(3)]
    labels = numbers(renumber(pool).questions)
    assert labels == {1: "1", 2: "1.1", 3: "1.2"}

    reordered = [pool[0], pool[2], pool[1]]
    labels = numbers(renumber(reordered).questions)
    assert labels == {1: "1", 3: "1.1", 2: "1.2"}


def test_dangling_edge_is_ignored():
    """A follow-up to a missing question leaves the source a plain root."""
    result = renumber([binary(1, follow_up={"Yes": 99}), binary(2)])
    assert numbers(result.questions) == {1: "1", 2: "2"}
    assert result.warnings == []


# =====================================================================
# Non-tree graphs
# =====================================================================


def test_pure_cycle_is_numbered_at_top_level(caplog):
    """Members of a cycle with no root still get labels, with warnings."""
    caplog.set_level(logging.WARNING, logger="riskcheck_rulesets")
    pool = [
        binary(1, follow_up={"Yes": 2}),
        binary(2, follow_up={"Yes": 1}),
        binary(3),
    ]
    result = renumber(pool)
    assert numbers(result.questions) == {1: "2", 2: "2.1", 3: "1"}
    assert any("cycle" in w for w in result.warnings)
    assert any("only reachable" in w for w in result.warnings)
    assert "cycle" in caplog.text


def test_cycle_below_root_stops_descent():
    """A back edge to an ancestor does not re-parent it."""
    pool = [
        binary(1, follow_up={"Yes": 2}),
        binary(2, follow_up={"Yes": 3}),
        binary(3, follow_up={"Yes": 2}),
    ]
    view = build_forest(pool)
    assert view.numbers == {1: "1", 2: "1.1", 3: "1.1.1"}
    assert view.warnings


def test_self_loop_is_reported():
    """A question that follows up into itself stays a root."""
    result = renumber([binary(1, follow_up={"Yes": 1})])
    assert numbers(result.questions) == {1: "1"}
    assert any("itself" in w for w in result.warnings)


def test_multiple_parents_use_first_in_pool_order():
    """A question targeted twice is numbered under the first parent."""
    pool = [
        binary(1, follow_up={"Yes": 3}),
        binary(2, follow_up={"No": 3}),
        binary(3),
    ]
    parents, warnings = derive_parents(pool)
    assert parents == {3: 1}
    assert len(warnings) == 1
    assert numbers(renumber(pool).questions) == {1: "1", 2: "2", 3: "1.1"}


def test_same_parent_twice_is_not_a_conflict():
    """Two answers of one question pointing at the same target is fine."""
    parents, warnings = derive_parents([binary(1, follow_up={"Yes": 2, "No": 2}), binary(2)])
    assert parents == {2: 1}
    assert warnings == []


def test_deep_chain_does_not_recurse():
    """Long follow-up chains are walked iteratively."""
    depth = 1500
    pool = [binary(i, follow_up={"Yes": i + 1}) for i in range(1, depth)] + [binary(depth)]
    view = build_forest(pool)
    assert len(view.numbers) == depth
    assert view.numbers[depth].count(".") == depth - 1
