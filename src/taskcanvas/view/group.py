"""
Category grouping for display.
"""
from typing import Dict, List

from taskcanvas.models import UNCATEGORIZED, Task, TaskList


def category_of(task: Task) -> str:
    category = (task.category or "").strip()
    return category or UNCATEGORIZED


def group_by_category(tasks: TaskList) -> Dict[str, List[Task]]:
    """Partition a flat slice of tasks into buckets keyed by category.

    Only the slice's own top level is looked at; subtasks travel with their
    parent. Buckets appear in first-seen order and the "Uncategorized" bucket
    is always present, last, even when empty.
    """
    groups: Dict[str, List[Task]] = {}
    uncategorized: List[Task] = []

    for task in tasks:
        name = category_of(task)
        if name == UNCATEGORIZED:
            uncategorized.append(task)
        else:
            groups.setdefault(name, []).append(task)

    groups[UNCATEGORIZED] = uncategorized
    return groups


def category_names(tasks: TaskList) -> List[str]:
    """Every category used in the slice, in first-seen order."""
    return [name for name, members in group_by_category(tasks).items() if members]
