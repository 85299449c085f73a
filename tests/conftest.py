import os
import tempfile
from datetime import date

import pytest

# Keep test runs from writing into the user's log directory
os.environ.setdefault("TASKCANVAS_LOG_DIR", tempfile.mkdtemp(prefix="taskcanvas-logs-"))

from taskcanvas.models import Task
from taskcanvas.tree.walker import recompute_depths


def make_task(task_id, text=None, subtasks=None, **fields):
    """Build a task with shape only; depth and parent ids are left for the walker."""
    return Task(id=task_id, text=text or f"Task {task_id}", subtasks=subtasks or [], **fields)


@pytest.fixture
def sample_tree():
    """
    A (Home, high, due 2024-01-05)
      A1 (done)
    B (Work, low)
      B1
        B1a
    C
    """
    return recompute_depths([
        make_task("A", "Buy milk", category="Home", priority="high", due_date=date(2024, 1, 5),
                  subtasks=[make_task("A1", "Get receipt", done=True)]),
        make_task("B", "Write report", category="Work", priority="low",
                  description="Quarterly numbers for the board",
                  subtasks=[make_task("B1", "Draft outline",
                                      subtasks=[make_task("B1a", "Collect sources")])]),
        make_task("C", "Call mom"),
    ])
