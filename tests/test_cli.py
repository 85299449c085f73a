"""Tests for the taskcanvas command line."""

import pytest
from click.testing import CliRunner

from taskcanvas.cli import main
from taskcanvas.data import load_tasks, save_tasks


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tasks_file(tmp_path):
    return tmp_path / "tasks.yml"


@pytest.fixture
def seeded(tasks_file, sample_tree):
    save_tasks(tasks_file, sample_tree)
    return tasks_file


def run(runner, path, *args):
    return runner.invoke(main, ["--file", str(path), *args])


class TestCommands:
    """Test each command against a temporary tasks file."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.3.0" in result.output

    def test_init(self, runner, tasks_file):
        result = run(runner, tasks_file, "init")
        assert result.exit_code == 0
        assert "📋 Created" in result.output
        assert load_tasks(tasks_file) == []

        again = run(runner, tasks_file, "init")
        assert "already exists" in again.output

    def test_add_and_subtask(self, runner, tasks_file):
        result = run(runner, tasks_file, "add", "Plan trip", "-c", "Travel", "--priority", "high",
                     "--due", "2024-06-01")
        assert result.exit_code == 0, result.output
        root = load_tasks(tasks_file)[0]
        assert root.category == "Travel"
        assert root.due_date.isoformat() == "2024-06-01"

        result = run(runner, tasks_file, "add", "Book flights", "-p", root.id[:6])
        assert result.exit_code == 0, result.output
        child = load_tasks(tasks_file)[0].subtasks[0]
        assert child.text == "Book flights"
        assert child.depth == 1
        assert child.category == "Travel"

    def test_empty_text_rejected(self, runner, tasks_file):
        result = run(runner, tasks_file, "add", "   ")
        assert result.exit_code == 1
        assert "Task text must not be empty" in result.output

    def test_edit(self, runner, seeded):
        result = run(runner, seeded, "edit", "A", "-t", "Buy oat milk", "--clear", "due")
        assert result.exit_code == 0, result.output
        task = load_tasks(seeded)[0]
        assert task.text == "Buy oat milk"
        assert task.due_date is None

    def test_edit_nothing(self, runner, seeded):
        result = run(runner, seeded, "edit", "A")
        assert "Nothing to change" in result.output

    def test_done_and_fold(self, runner, seeded):
        assert "done" in run(runner, seeded, "done", "C").output
        assert "collapsed" in run(runner, seeded, "fold", "B").output
        tasks = load_tasks(seeded)
        assert tasks[2].done
        assert not tasks[1].is_expanded

    def test_rm_counts_subtree(self, runner, seeded):
        result = run(runner, seeded, "rm", "B")
        assert "Removed 3 task(s)" in result.output
        assert [t.id for t in load_tasks(seeded)] == ["A", "C"]

    def test_unknown_id(self, runner, seeded):
        result = run(runner, seeded, "rm", "zzz")
        assert result.exit_code == 1
        assert "No task with id 'zzz'" in result.output

    def test_exact_id_beats_prefix(self, runner, seeded):
        result = run(runner, seeded, "done", "B1")
        # "B1" is an exact id, so it wins over the prefix match on B1a
        assert result.exit_code == 0
        result = run(runner, seeded, "done", "A")
        assert result.exit_code == 0

    def test_move(self, runner, seeded):
        result = run(runner, seeded, "move", "C", "A", "--before")
        assert result.exit_code == 0, result.output
        assert [t.id for t in load_tasks(seeded)] == ["C", "A", "B"]

    def test_move_into_own_subtree(self, runner, seeded):
        result = run(runner, seeded, "move", "B", "B1a")
        assert result.exit_code == 1
        assert "Cannot move" in result.output

    def test_list(self, runner, seeded):
        result = run(runner, seeded, "list", "--status", "completed")
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].startswith("[ ] A ")
        assert lines[1].startswith("  [x] A1 ")

    def test_list_grouped_and_sorted(self, runner, seeded):
        result = run(runner, seeded, "list", "-g", "--sort", "alphabetical")
        headers = [line for line in result.output.splitlines() if line.startswith("📂")]
        assert headers == ["📂 Home (1)", "📂 Work (1)", "📂 Uncategorized (1)"]

    def test_list_empty(self, runner, seeded):
        result = run(runner, seeded, "list", "-s", "no such words")
        assert "📭 No tasks" in result.output

    def test_templates_and_apply(self, runner, tasks_file):
        assert "Daily Tasks" in runner.invoke(main, ["templates"]).output

        result = run(runner, tasks_file, "apply", "daily tasks")
        assert result.exit_code == 0, result.output
        assert [t.text for t in load_tasks(tasks_file)] == ["Morning Routine", "Priority Tasks", "End of Day"]

    def test_apply_unknown(self, runner, tasks_file):
        result = run(runner, tasks_file, "apply", "Weekly")
        assert result.exit_code == 1
        assert "No template named 'Weekly'" in result.output

    def test_schema(self, runner):
        result = runner.invoke(main, ["schema"])
        assert '"title": "TaskList"' in result.output

    def test_check(self, runner, seeded):
        result = run(runner, seeded, "check")
        assert result.exit_code == 0
        assert "3 top-level, 6 total, 1 done" in result.output

    def test_check_missing_file(self, runner, tasks_file):
        result = run(runner, tasks_file, "check")
        assert result.exit_code == 1
        assert "No tasks file" in result.output

    def test_check_corrupt_file(self, runner, tasks_file):
        tasks_file.write_text("- text: no id\n")
        result = run(runner, tasks_file, "check")
        assert result.exit_code == 1
        assert "invalid" in result.output


class TestTemplateCommands:
    """Test saving, listing, applying and removing custom templates."""

    def test_save_list_apply_remove(self, runner, seeded, tmp_path):
        result = run(runner, seeded, "template", "save", "Reporting", "--from", "B", "-d", "Monthly report")
        assert result.exit_code == 0, result.output
        assert "Saved template 'Reporting' (3 tasks)" in result.output
        assert (tmp_path / "templates.yml").exists()

        listing = run(runner, seeded, "templates").output
        assert listing.index("Daily Tasks") < listing.index("Reporting")
        assert "[Custom]" in listing

        result = run(runner, seeded, "apply", "reporting")
        assert result.exit_code == 0, result.output
        tasks = load_tasks(seeded)
        assert [t.text for t in tasks] == ["Buy milk", "Write report", "Call mom", "Write report"]
        assert tasks[3].id != "B"
        assert tasks[3].subtasks[0].subtasks[0].depth == 2

        result = run(runner, seeded, "template", "rm", "Reporting")
        assert result.exit_code == 0, result.output
        assert "Reporting" not in run(runner, seeded, "templates").output

    def test_save_several_roots(self, runner, seeded):
        result = run(runner, seeded, "template", "save", "Mix", "--from", "A", "--from", "C", "-c", "Home")
        assert result.exit_code == 0, result.output
        assert "[Home]" in run(runner, seeded, "templates").output

    def test_save_duplicate_name(self, runner, seeded):
        result = run(runner, seeded, "template", "save", "Daily Tasks", "--from", "A")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_save_unknown_task(self, runner, seeded, tmp_path):
        result = run(runner, seeded, "template", "save", "Nothing", "--from", "zzz")
        assert result.exit_code == 1
        assert not (tmp_path / "templates.yml").exists()

    def test_remove_built_in(self, runner, seeded):
        result = run(runner, seeded, "template", "rm", "Daily Tasks")
        assert result.exit_code == 1
        assert "cannot be removed" in result.output
