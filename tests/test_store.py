"""Unit tests for TaskStore."""

import pytest
from datetime import date

from conftest import make_task
from taskcanvas.models import UNCATEGORIZED, BoundingBox, Placement, SortSpec, TaskFilter
from taskcanvas.recovery import DragStateError
from taskcanvas.store import TaskStore
from taskcanvas.templates import get_template
from taskcanvas.tree.query import assert_invariants, count_tasks


@pytest.fixture
def store(sample_tree):
    return TaskStore(sample_tree)


class TestTaskStore:
    """Test intents flowing through the store."""

    def test_walks_initial_tree(self):
        store = TaskStore([make_task("r", subtasks=[make_task("c", depth=8)])])
        assert store.get("c").depth == 1
        assert store.get("c").parent_id == "r"

    def test_empty_store(self):
        assert TaskStore().tasks == []

    def test_add_and_subtask(self):
        store = TaskStore()
        root = store.add("Plan trip", category="Travel")
        child = store.add_subtask(root.id, "Book flights")

        assert child.depth == 1
        assert child.category == "Travel"
        assert store.get(root.id).subtasks[0].id == child.id

    def test_add_subtask_to_missing_parent(self, store):
        before = store.tasks
        assert store.add_subtask("missing", "x") is None
        assert store.tasks is before

    def test_update_and_toggles(self, store):
        store.update("C", {"text": "Call mom tonight"})
        store.toggle_done("C")
        store.toggle_expanded("B")

        assert store.get("C").text == "Call mom tonight"
        assert store.get("C").done
        assert not store.get("B").is_expanded

    def test_delete(self, store):
        store.delete("B")
        assert store.get("B1a") is None
        assert count_tasks(store.tasks) == 3

    def test_move(self, store):
        store.move("C", "A", Placement.BEFORE)
        assert [t.id for t in store.tasks] == ["C", "A", "B"]

    def test_drag_drop_commits(self, store):
        assert store.begin_drag("A")
        # Rows: A, A1, B, B1, B1a, C at 20px each
        assert store.hover("C", pointer_y=111, bounds=BoundingBox(top=100, bottom=120))
        # Committed tree is unchanged until the drop
        assert [t.id for t in store.tasks] == ["A", "B", "C"]
        assert [t.id for t in store.view()] == ["B", "C", "A"]

        store.drop()
        assert [t.id for t in store.tasks] == ["B", "C", "A"]
        assert_invariants(store.tasks)

    def test_drag_cancel_restores(self, store, sample_tree):
        store.begin_drag("B1a")
        store.hover("C", pointer_y=119, bounds=BoundingBox(top=100, bottom=120))
        store.cancel_drag()
        assert store.tasks == sample_tree

    def test_structural_changes_blocked_while_dragging(self, store):
        store.begin_drag("A")
        with pytest.raises(DragStateError, match="Cannot delete a task while a drag is in progress"):
            store.delete("B")
        with pytest.raises(DragStateError):
            store.add("x")
        with pytest.raises(DragStateError):
            store.update("A", {"done": True})
        store.cancel_drag()
        store.delete("B")
        assert store.get("B") is None

    def test_apply_template(self, store):
        store.apply_template(get_template("Meeting Preparation"))
        assert [t.text for t in store.tasks[3:]] == ["Before Meeting", "During Meeting", "After Meeting"]

    def test_view_and_groups(self, store):
        view = store.view(TaskFilter(status="active"), SortSpec(key="alphabetical"))
        assert [t.id for t in view] == ["A", "C", "B"]

        groups = store.groups(TaskFilter(due="overdue"), today=date(2024, 2, 1))
        assert [t.id for t in groups["Home"]] == ["A"]
        assert groups[UNCATEGORIZED] == []

    def test_upcoming_window(self):
        store = TaskStore([make_task("x", due_date=date(2024, 1, 5))], upcoming_days=2)
        assert store.view(TaskFilter(due="upcoming"), today=date(2024, 1, 1)) == []
        assert len(store.view(TaskFilter(due="future"), today=date(2024, 1, 1))) == 1
