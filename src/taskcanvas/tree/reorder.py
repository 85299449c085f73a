"""
Drag reordering state machine.

A drag gesture is either idle or dragging one task. While dragging, hover
ticks move the task through a working copy of the tree; the gesture then
leaves through exactly one exit: ``drop`` (commit the working tree) or
``cancel`` (give back the snapshot taken when the drag began).
"""
from enum import Enum
from typing import Optional

from taskcanvas.logs import get_logger
from taskcanvas.models import BoundingBox, Placement, TaskList
from taskcanvas.recovery import DragStateError
from taskcanvas.tree.mutate import move_task
from taskcanvas.tree.query import find_task, is_descendant, preorder_index
from taskcanvas.tree.walker import clone_tree

log = get_logger("tree.reorder")


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragSession:
    """One pointer-driven drag gesture over a task tree."""

    def __init__(self):
        self.state = DragState.IDLE
        self.source_id: Optional[str] = None
        self._snapshot: Optional[TaskList] = None
        self._working: Optional[TaskList] = None
        self.moves = 0

    @property
    def dragging(self) -> bool:
        return self.state == DragState.DRAGGING

    @property
    def tree(self) -> Optional[TaskList]:
        """The working tree while dragging, None when idle."""
        return self._working

    def begin(self, tree: TaskList, source_id: str) -> bool:
        """Start dragging ``source_id``; returns False if it is not in the tree."""
        if self.dragging:
            raise DragStateError(f"A drag of {self.source_id} is already in progress")
        if find_task(tree, source_id) is None:
            log.debug(f"Drag start ignored, {source_id} not found")
            return False

        self._snapshot = clone_tree(tree)
        self._working = tree
        self.source_id = source_id
        self.moves = 0
        self.state = DragState.DRAGGING
        log.debug(f"Drag started for {source_id}")
        return True

    def hover(self, target_id: str, pointer_y: float, bounds: BoundingBox) -> bool:
        """Evaluate one hover tick over ``target_id``.

        The dragged task moves only once the pointer has crossed the
        target's vertical midpoint in the direction of travel: below the
        midpoint of a target further down the tree, above the midpoint of a
        target further up. Returns True when the working tree changed.
        Late hover ticks that arrive after the gesture ended are ignored.
        """
        if not self.dragging:
            return False
        if target_id == self.source_id:
            return False

        order = preorder_index(self._working)
        if target_id not in order:
            return False
        source = find_task(self._working, self.source_id)
        if is_descendant(source, target_id):
            return False

        moving_down = order[target_id] > order[self.source_id]
        midpoint = bounds.midpoint
        if moving_down and pointer_y <= midpoint:
            return False
        if not moving_down and pointer_y >= midpoint:
            return False

        placement = Placement.AFTER if moving_down else Placement.BEFORE
        self._working = move_task(self._working, self.source_id, target_id, placement)
        self.moves += 1
        log.debug(f"Moved {self.source_id} {placement.value} {target_id}")
        return True

    def drop(self) -> TaskList:
        """Commit the working tree and return to idle."""
        if not self.dragging:
            raise DragStateError("No drag in progress to drop")
        result = self._working
        log.info(f"Dropped {self.source_id} after {self.moves} move(s)")
        self._reset()
        return result

    def cancel(self) -> TaskList:
        """Abandon the gesture and return the pre-drag snapshot."""
        if not self.dragging:
            raise DragStateError("No drag in progress to cancel")
        result = self._snapshot
        log.info(f"Cancelled drag of {self.source_id}")
        self._reset()
        return result

    def _reset(self):
        self.state = DragState.IDLE
        self.source_id = None
        self._snapshot = None
        self._working = None
        self.moves = 0
