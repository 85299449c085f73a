"""Unit tests for task templates."""

import pytest

from taskcanvas.models import TaskTemplate
from taskcanvas.recovery import MalformedInputError, TemplateNotFoundError
from taskcanvas.templates import (
    BUILT_IN_TEMPLATES, add_template, all_templates, apply_template, create_template, get_template,
    instantiate, remove_template,
)
from taskcanvas.tree.query import assert_invariants, collect_ids, count_tasks


class TestTemplates:
    """Test looking up and applying templates."""

    def test_built_ins(self):
        names = [t.name for t in BUILT_IN_TEMPLATES]
        assert names == ["Project Template", "Meeting Preparation", "Daily Tasks"]

    def test_lookup_ignores_case(self):
        assert get_template("daily tasks").name == "Daily Tasks"

    def test_lookup_missing(self):
        with pytest.raises(TemplateNotFoundError, match="No template named 'Weekly'"):
            get_template("Weekly")

    def test_lookup_in_custom_list(self):
        custom = TaskTemplate(name="Chores")
        assert get_template("chores", [custom]) is custom

    def test_instantiate_reissues_ids(self):
        template = get_template("Project Template")
        first = instantiate(template)
        second = instantiate(template)

        assert count_tasks(first) == count_tasks(template.tasks) == 10
        assert collect_ids(first).isdisjoint(collect_ids(template.tasks))
        assert collect_ids(first).isdisjoint(collect_ids(second))
        assert_invariants(first)

    def test_instantiate_leaves_template_alone(self):
        template = get_template("Meeting Preparation")
        ids_before = collect_ids(template.tasks)
        instantiate(template)
        assert collect_ids(template.tasks) == ids_before

    def test_apply_twice(self, sample_tree):
        template = get_template("Daily Tasks")
        result = apply_template(apply_template(sample_tree, template), template)

        assert count_tasks(result) == count_tasks(sample_tree) + 2 * count_tasks(template.tasks)
        assert [t.text for t in result[3:6]] == ["Morning Routine", "Priority Tasks", "End of Day"]
        assert result[3].subtasks[0].depth == 1
        assert result[3].subtasks[0].parent_id == result[3].id
        assert_invariants(result)


class TestCustomTemplates:
    """Test saving user templates from existing tasks."""

    def test_create_from_subtree(self, sample_tree):
        template = create_template("  Outline  ", [sample_tree[1].subtasks[0]])

        assert template.name == "Outline"
        assert template.category == "Custom"
        assert template.description == ""
        root = template.tasks[0]
        assert root.text == "Draft outline"
        assert root.depth == 0
        assert root.parent_id is None
        assert root.subtasks[0].parent_id == root.id
        assert collect_ids(template.tasks).isdisjoint(collect_ids(sample_tree))
        assert_invariants(template.tasks)

    def test_source_tree_untouched(self, sample_tree):
        template = create_template("Report", [sample_tree[1]], category="Work")
        template.tasks[0].text = "changed"
        assert sample_tree[1].text == "Write report"
        assert sample_tree[1].subtasks[0].depth == 1
        assert template.category == "Work"

    def test_needs_name_and_tasks(self, sample_tree):
        with pytest.raises(MalformedInputError, match="name must not be empty"):
            create_template("  ", [sample_tree[0]])
        with pytest.raises(MalformedInputError, match="at least one task"):
            create_template("Empty", [])

    def test_custom_listed_after_built_ins(self, sample_tree):
        custom = add_template([], create_template("Errands", [sample_tree[0]]))
        names = [t.name for t in all_templates(custom)]
        assert names == ["Project Template", "Meeting Preparation", "Daily Tasks", "Errands"]
        assert get_template("errands", all_templates(custom)) is custom[0]

    def test_names_are_unique(self, sample_tree):
        custom = add_template([], create_template("Errands", [sample_tree[0]]))
        with pytest.raises(MalformedInputError, match="already exists"):
            add_template(custom, create_template("ERRANDS", [sample_tree[2]]))
        with pytest.raises(MalformedInputError, match="already exists"):
            add_template(custom, create_template("daily tasks", [sample_tree[2]]))

    def test_apply_custom_twice(self, sample_tree):
        template = create_template("Errands", [sample_tree[0]])
        result = apply_template(apply_template([], template), template)
        assert [t.text for t in result] == ["Buy milk", "Buy milk"]
        assert result[0].id != result[1].id
        assert_invariants(result)

    def test_remove(self, sample_tree):
        custom = add_template([], create_template("Errands", [sample_tree[0]]))
        assert remove_template(custom, "ERRANDS") == []
        assert len(custom) == 1

    def test_remove_built_in_or_missing(self):
        with pytest.raises(MalformedInputError, match="cannot be removed"):
            remove_template([], "Daily Tasks")
        with pytest.raises(TemplateNotFoundError):
            remove_template([], "Weekly")
