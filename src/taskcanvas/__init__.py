"""
taskcanvas - a hierarchical task tree engine.

Tasks nest to any depth. The package provides pure tree mutations, a depth
walker that keeps parent/depth bookkeeping consistent, a drag reordering
state machine, filtered/sorted projections and category grouping.
"""

from .version import VERSION
from .models import (
    Priority,
    StatusFilter,
    PriorityFilter,
    DueFilter,
    SortKey,
    SortDirection,
    Placement,
    Task,
    TaskList,
    TaskFilter,
    SortSpec,
    BoundingBox,
    TaskTemplate,
    UNCATEGORIZED,
)
from .tree import (
    add_task,
    add_subtask,
    update_task,
    delete_task,
    move_task,
    recompute_depths,
    DragSession,
    DragState,
)
from .view import project, group_by_category
from .store import TaskStore

__version__ = VERSION

__all__ = [
    "VERSION",
    "Priority",
    "StatusFilter",
    "PriorityFilter",
    "DueFilter",
    "SortKey",
    "SortDirection",
    "Placement",
    "Task",
    "TaskList",
    "TaskFilter",
    "SortSpec",
    "BoundingBox",
    "TaskTemplate",
    "UNCATEGORIZED",
    "add_task",
    "add_subtask",
    "update_task",
    "delete_task",
    "move_task",
    "recompute_depths",
    "DragSession",
    "DragState",
    "project",
    "group_by_category",
    "TaskStore",
]
