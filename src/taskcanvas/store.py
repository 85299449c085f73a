"""
TaskStore - the single owner of the current task tree.

Callers send intents (add, edit, delete, drag) to the store; it runs the
matching pure operation and replaces its tree with the result. Views are
produced read-only, just before display.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from taskcanvas.config import DEFAULT_UPCOMING_DAYS
from taskcanvas.logs import get_logger
from taskcanvas.models import BoundingBox, Placement, SortSpec, Task, TaskFilter, TaskList, TaskTemplate
from taskcanvas.recovery import DragStateError
from taskcanvas.templates import apply_template
from taskcanvas.tree import mutate
from taskcanvas.tree.query import find_task
from taskcanvas.tree.reorder import DragSession
from taskcanvas.tree.walker import recompute_depths
from taskcanvas.view.group import group_by_category
from taskcanvas.view.project import project

log = get_logger("store")


class TaskStore:
    """Holds the authoritative tree and forwards intents to the engine."""

    def __init__(self, tasks: Optional[TaskList] = None, upcoming_days: int = DEFAULT_UPCOMING_DAYS):
        self.tasks: TaskList = recompute_depths(tasks or [])
        self.upcoming_days = upcoming_days
        self.drag = DragSession()

    def _commit(self, tasks: TaskList) -> TaskList:
        if tasks is not self.tasks:
            log.debug(f"Committed tree with {len(tasks)} top-level tasks")
        self.tasks = tasks
        return tasks

    def _require_idle(self, action: str):
        if self.drag.dragging:
            raise DragStateError(f"Cannot {action} while a drag is in progress")

    def get(self, task_id: str) -> Optional[Task]:
        return find_task(self.tasks, task_id)

    def add(self, text: str, **fields) -> Task:
        """Add a top-level task and return it."""
        self._require_idle("add a task")
        self._commit(mutate.add_task(self.tasks, text, **fields))
        return self.tasks[-1]

    def add_subtask(self, parent_id: str, text: str, **fields) -> Optional[Task]:
        """Add a subtask; returns None when the parent no longer exists."""
        self._require_idle("add a subtask")
        before = self.tasks
        self._commit(mutate.add_subtask(self.tasks, parent_id, text, **fields))
        if self.tasks is before:
            return None
        return find_task(self.tasks, parent_id).subtasks[-1]

    def update(self, task_id: str, patch: Dict[str, Any]) -> TaskList:
        self._require_idle("edit a task")
        return self._commit(mutate.update_task(self.tasks, task_id, patch))

    def toggle_done(self, task_id: str) -> TaskList:
        self._require_idle("edit a task")
        return self._commit(mutate.toggle_done(self.tasks, task_id))

    def toggle_expanded(self, task_id: str) -> TaskList:
        self._require_idle("edit a task")
        return self._commit(mutate.toggle_expanded(self.tasks, task_id))

    def delete(self, task_id: str) -> TaskList:
        self._require_idle("delete a task")
        return self._commit(mutate.delete_task(self.tasks, task_id))

    def move(self, drag_id: str, hover_id: str, placement: Placement = Placement.AFTER) -> TaskList:
        self._require_idle("move a task")
        return self._commit(mutate.move_task(self.tasks, drag_id, hover_id, placement))

    def apply_template(self, template: TaskTemplate) -> TaskList:
        self._require_idle("apply a template")
        return self._commit(apply_template(self.tasks, template))

    def begin_drag(self, task_id: str) -> bool:
        return self.drag.begin(self.tasks, task_id)

    def hover(self, target_id: str, pointer_y: float, bounds: BoundingBox) -> bool:
        return self.drag.hover(target_id, pointer_y, bounds)

    def drop(self) -> TaskList:
        return self._commit(self.drag.drop())

    def cancel_drag(self) -> TaskList:
        return self._commit(self.drag.cancel())

    def view(self, predicates: Optional[TaskFilter] = None, sort: Optional[SortSpec] = None,
             today: Optional[date] = None) -> TaskList:
        """Filtered, sorted projection of the tree being shown.

        During a drag this is the working tree, so the dragged task is shown
        where it currently hovers.
        """
        shown = self.drag.tree if self.drag.dragging else self.tasks
        return project(shown, predicates, sort, today=today, upcoming_days=self.upcoming_days)

    def groups(self, predicates: Optional[TaskFilter] = None, sort: Optional[SortSpec] = None,
               today: Optional[date] = None) -> Dict[str, List[Task]]:
        return group_by_category(self.view(predicates, sort, today))
