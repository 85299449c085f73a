"""
Read-only lookups over a task tree.
"""
from typing import Iterator, List, Optional, Set

from taskcanvas.models import Task, TaskList
from taskcanvas.recovery import InvariantViolation


def iter_tasks(tree: TaskList) -> Iterator[Task]:
    """Yield every node in pre-order (a parent before its subtasks)."""
    for task in tree:
        yield task
        yield from iter_tasks(task.subtasks)


def find_task(tree: TaskList, task_id: str) -> Optional[Task]:
    """Depth-first search for ``task_id`` at any level."""
    return next((t for t in iter_tasks(tree) if t.id == task_id), None)


def find_parent(tree: TaskList, task_id: str) -> Optional[Task]:
    """Return the task owning ``task_id``, or None for roots and unknown ids."""
    for task in iter_tasks(tree):
        if any(child.id == task_id for child in task.subtasks):
            return task
    return None


def find_siblings(tree: TaskList, task_id: str) -> Optional[TaskList]:
    """Return the list that holds ``task_id`` (the root list or a subtasks list)."""
    if any(t.id == task_id for t in tree):
        return tree
    parent = find_parent(tree, task_id)
    return parent.subtasks if parent else None


def collect_ids(tree: TaskList) -> Set[str]:
    return {t.id for t in iter_tasks(tree)}


def count_tasks(tree: TaskList) -> int:
    return sum(1 for _ in iter_tasks(tree))


def all_subtasks(task: Task) -> List[Task]:
    """Every descendant of ``task``, in pre-order."""
    return list(iter_tasks(task.subtasks))


def is_descendant(task: Task, candidate_id: str) -> bool:
    """True if ``candidate_id`` is a direct or indirect subtask of ``task``."""
    return any(t.id == candidate_id for t in iter_tasks(task.subtasks))


def preorder_index(tree: TaskList) -> dict:
    """Map every id to its position in pre-order."""
    return {t.id: i for i, t in enumerate(iter_tasks(tree))}


def task_progress(task: Task) -> int:
    """Percentage of completed subtasks, rounded.

    A leaf is 100 or 0 depending on ``done``. A subtask that has children of
    its own only counts as completed once its own progress reaches 100.
    """
    if not task.subtasks:
        return 100 if task.done else 0

    completed = 0
    for sub in task.subtasks:
        if sub.subtasks:
            if task_progress(sub) == 100:
                completed += 1
        elif sub.done:
            completed += 1

    return round(completed / len(task.subtasks) * 100)


def check_invariants(tree: TaskList) -> List[str]:
    """Return a description of every broken tree invariant (empty when sound)."""
    problems = []
    seen = set()

    def visit(task: Task, expected_depth: int, parent_id: Optional[str], ancestors: Set[int]):
        if id(task) in ancestors:
            problems.append(f"task {task.id} is its own ancestor")
            return
        if task.id in seen:
            problems.append(f"duplicate id {task.id}")
        seen.add(task.id)
        if task.depth != expected_depth:
            problems.append(f"task {task.id} has depth {task.depth}, expected {expected_depth}")
        if task.parent_id != parent_id:
            problems.append(f"task {task.id} has parent {task.parent_id}, expected {parent_id}")
        for child in task.subtasks:
            visit(child, expected_depth + 1, task.id, ancestors | {id(task)})

    for root in tree:
        visit(root, 0, None, set())
    return problems


def assert_invariants(tree: TaskList) -> None:
    """Raise InvariantViolation if the tree's bookkeeping is inconsistent."""
    problems = check_invariants(tree)
    if problems:
        raise InvariantViolation("; ".join(problems))
