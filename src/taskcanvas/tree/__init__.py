"""
Task tree operations: pure mutations, the depth walker, queries and drag reordering.
"""

from .walker import walk, walk_tree, clone_tree, recompute_depths
from .query import (
    iter_tasks,
    find_task,
    find_parent,
    find_siblings,
    collect_ids,
    count_tasks,
    all_subtasks,
    is_descendant,
    task_progress,
    check_invariants,
    assert_invariants,
)
from .mutate import (
    new_task_id,
    add_task,
    add_subtask,
    update_task,
    toggle_done,
    toggle_expanded,
    delete_task,
    append_tasks,
    move_task,
)
from .reorder import DragState, DragSession

__all__ = [
    'walk',
    'walk_tree',
    'clone_tree',
    'recompute_depths',
    'iter_tasks',
    'find_task',
    'find_parent',
    'find_siblings',
    'collect_ids',
    'count_tasks',
    'all_subtasks',
    'is_descendant',
    'task_progress',
    'check_invariants',
    'assert_invariants',
    'new_task_id',
    'add_task',
    'add_subtask',
    'update_task',
    'toggle_done',
    'toggle_expanded',
    'delete_task',
    'append_tasks',
    'move_task',
    'DragState',
    'DragSession',
]
