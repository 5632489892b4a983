"""Tree view and renumbering over the flat question pool.

The pool is stored flat; the parent -> children hierarchy is derived from
follow-up edges every time it is needed:

  - a question is a **root** if no other question follows up into it
  - otherwise it is a **child** of the first question (in pool order) whose
    follow-up map targets it

Roots are numbered ``1``, ``2``, ... in pool order; children get
``<parent>.1``, ``<parent>.2``, ... also in pool order, so reordering the
pool reorders siblings.

Follow-up edges are not guaranteed to be acyclic.  Traversal keeps a
per-path visited set and a global one; a revisit stops that branch and is
reported as a warning.  Questions reachable only through a cycle are
numbered as extra top-level entries so every question gets a label.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from riskcheck_rulesets.models.question import Question
from riskcheck_rulesets.models.session import TreeNode

logger = logging.getLogger(__name__)


@dataclass
class ForestView:
    """Derived hierarchy: root nodes plus the labels assigned to every id."""

    roots: list[TreeNode] = field(default_factory=list)
    numbers: dict[int, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


@dataclass
class RenumberResult:
    """A renumbered snapshot with its tree and any graph warnings."""

    questions: list[Question]
    tree: list[TreeNode]
    warnings: list[str]


def derive_parents(questions: list[Question]) -> tuple[dict[int, int], list[str]]:
    """Map child id -> parent id from follow-up edges.

    Dangling targets are ignored.  Self-loops and extra parents are
    reported as warnings and do not create an edge.
    """
    known = {q.id for q in questions}
    parents: dict[int, int] = {}
    warnings: list[str] = []

    for q in questions:
        for target in q.follow_up_targets():
            if target not in known:
                continue
            if target == q.id:
                warnings.append(f"Question {q.id} follows up into itself")
                continue
            if target in parents:
                if parents[target] != q.id:
                    warnings.append(
                        f"Question {target} is a follow-up of both {parents[target]} "
                        f"and {q.id}; numbering it under {parents[target]}"
                    )
                continue
            parents[target] = q.id

    return parents, warnings


def build_forest(questions: list[Question]) -> ForestView:
    """Derive the parent -> children forest and hierarchical labels."""
    parents, warnings = derive_parents(questions)
    view = ForestView(warnings=warnings)

    # Children listed in pool order
    children: dict[int, list[int]] = {q.id: [] for q in questions}
    for q in questions:
        parent = parents.get(q.id)
        if parent is not None:
            children[parent].append(q.id)

    by_id = {q.id: q for q in questions}
    visited: set[int] = set()

    def walk(root_id: int, label: str) -> TreeNode:
        # Iterative DFS: deep follow-up chains must not hit the recursion limit
        root = TreeNode(id=root_id, display_number=label, text=by_id[root_id].text)
        view.numbers[root_id] = label
        visited.add(root_id)
        stack: list[tuple[TreeNode, frozenset[int]]] = [(root, frozenset({root_id}))]

        while stack:
            node, path = stack.pop()
            position = 0
            pending: list[tuple[TreeNode, frozenset[int]]] = []
            for child_id in children[node.id]:
                if child_id in path or child_id in visited:
                    view.warnings.append(
                        f"Follow-up cycle detected: {node.id} -> {child_id}; "
                        f"stopped descending"
                    )
                    continue
                position += 1
                child_label = f"{node.display_number}.{position}"
                child = TreeNode(id=child_id, display_number=child_label, text=by_id[child_id].text)
                view.numbers[child_id] = child_label
                visited.add(child_id)
                node.children.append(child)
                pending.append((child, path | {child_id}))
            # Reverse so siblings are expanded in order
            stack.extend(reversed(pending))

        return root

    top = 0
    for q in questions:
        if q.id not in parents:
            top += 1
            view.roots.append(walk(q.id, str(top)))

    # Whatever is left is only reachable through a cycle
    for q in questions:
        if q.id in visited:
            continue
        view.warnings.append(
            f"Question {q.id} is only reachable through a follow-up cycle; "
            f"numbering it at the top level"
        )
        top += 1
        view.roots.append(walk(q.id, str(top)))

    for warning in view.warnings:
        logger.debug("Question tree: %s", warning)
    return view


def renumber(questions: list[Question], log_warnings: bool = True) -> RenumberResult:
    """Recompute ``display_number`` for every question.

    Returns copies; the input list is not modified.  Running it twice on
    the same pool yields identical labels.  With ``log_warnings`` graph
    warnings are logged at WARNING; otherwise only
    :func:`build_forest` logs them, at DEBUG.
    """
    view = build_forest(questions)
    if log_warnings:
        for warning in view.warnings:
            logger.warning("Renumbering: %s", warning)
    renumbered = [
        q.model_copy(update={"display_number": view.numbers.get(q.id, "")})
        for q in questions
    ]
    return RenumberResult(questions=renumbered, tree=view.roots, warnings=view.warnings)
