"""
Depth recompute walker.

Restores the ``depth`` / ``parent_id`` bookkeeping of a tree from its shape.
Every structural operation (add, delete, reparent) finishes by running it, so
no caller has to reason about depth manually.
"""
from typing import Optional

from taskcanvas.models import Task, TaskList


def walk(node: Task, expected_depth: int, parent_id: Optional[str]) -> Task:
    """Set ``node``'s depth and parent id, then recurse into its subtasks.

    Mutates ``node`` in place; only call it on a tree you own (a fresh copy).
    """
    node.depth = expected_depth
    node.parent_id = parent_id
    for child in node.subtasks:
        walk(child, expected_depth + 1, node.id)
    return node


def walk_tree(tree: TaskList) -> TaskList:
    """Walk every root of an owned tree in place."""
    for root in tree:
        walk(root, 0, None)
    return tree


def clone_tree(tree: TaskList) -> TaskList:
    return [task.model_copy(deep=True) for task in tree]


def recompute_depths(tree: TaskList) -> TaskList:
    """Return a corrected copy of ``tree``; the input is left untouched."""
    return walk_tree(clone_tree(tree))
