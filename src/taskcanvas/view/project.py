"""
Filter/sort projection.

Builds derived, non-owning views of a task tree for display. The backing tree
is never modified: every node in a projection is a copy whose ``subtasks``
holds only the surviving, sorted children.
"""
from datetime import date, timedelta
from typing import Iterator, Optional

from taskcanvas.config import DEFAULT_UPCOMING_DAYS
from taskcanvas.models import (
    DueFilter, PriorityFilter, SortKey, SortSpec, StatusFilter, Task, TaskFilter, TaskList
)


def due_bucket(due: Optional[date], today: date, upcoming_days: int = DEFAULT_UPCOMING_DAYS) -> Optional[DueFilter]:
    """Classify a due date relative to ``today``; undated tasks have no bucket."""
    if due is None:
        return None
    if due < today:
        return DueFilter.OVERDUE
    if due == today:
        return DueFilter.TODAY
    if due <= today + timedelta(days=upcoming_days):
        return DueFilter.UPCOMING
    return DueFilter.FUTURE


def matches(task: Task, predicates: TaskFilter, today: date,
            upcoming_days: int = DEFAULT_UPCOMING_DAYS) -> bool:
    """True if ``task`` itself satisfies every active predicate."""
    if predicates.status == StatusFilter.ACTIVE and task.done:
        return False
    if predicates.status == StatusFilter.COMPLETED and not task.done:
        return False

    if predicates.priority != PriorityFilter.ALL:
        if task.priority is None or task.priority.value != predicates.priority.value:
            return False

    if predicates.due != DueFilter.ALL:
        if due_bucket(task.due_date, today, upcoming_days) != predicates.due:
            return False

    if predicates.search:
        needle = predicates.search.casefold()
        haystacks = [task.text, task.description or ""]
        if not any(needle in h.casefold() for h in haystacks):
            return False

    return True


def filter_tasks(tasks: TaskList, predicates: TaskFilter, today: date,
                 upcoming_days: int = DEFAULT_UPCOMING_DAYS) -> TaskList:
    """Ancestor-preserving recursive filter.

    A task survives if it matches, or if any of its subtasks survive; in the
    second case it is kept with only the surviving subtasks, so a deep match
    stays reachable through its ancestors.
    """
    result = []
    for task in tasks:
        children = filter_tasks(task.subtasks, predicates, today, upcoming_days)
        if children or matches(task, predicates, today, upcoming_days):
            result.append(task.model_copy(update={'subtasks': children}))
    return result


def _priority_key(task: Task):
    return task.priority.rank if task.priority else 0

def _due_key(task: Task):
    # Undated sorts after every date
    return (task.due_date is None, task.due_date or date.min)

def _text_key(task: Task):
    return task.text.casefold()

_SORT_KEYS = {
    SortKey.PRIORITY: _priority_key,
    SortKey.DUE_DATE: _due_key,
    SortKey.ALPHABETICAL: _text_key,
}


def sort_tasks(tasks: TaskList, sort: SortSpec) -> TaskList:
    """Stable sort of every sibling group, at every depth."""
    if sort.key == SortKey.NONE:
        ordered = tasks
    else:
        ordered = sorted(tasks, key=_SORT_KEYS[sort.key], reverse=sort.descending)
    return [t.model_copy(update={'subtasks': sort_tasks(t.subtasks, sort)}) for t in ordered]


def project(tree: TaskList, predicates: Optional[TaskFilter] = None, sort: Optional[SortSpec] = None,
            today: Optional[date] = None, upcoming_days: int = DEFAULT_UPCOMING_DAYS) -> TaskList:
    """Filter, then sort, ``tree`` into a new view."""
    predicates = predicates or TaskFilter()
    sort = sort or SortSpec()
    today = today or date.today()

    return sort_tasks(filter_tasks(tree, predicates, today, upcoming_days), sort)


def visible_rows(tasks: TaskList) -> Iterator[Task]:
    """Pre-order walk that skips the subtasks of collapsed tasks."""
    for task in tasks:
        yield task
        if task.is_expanded:
            yield from visible_rows(task.subtasks)
