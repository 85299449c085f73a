"""
Reusable task templates.

A template holds a small task tree. Applying it copies the tree with fresh
ids at every level, so a template can be applied any number of times to the
same tree. Three templates are built in; users can save more from their own
tasks, and those are listed after the built-ins.
"""
from typing import Iterable, List, Optional

from taskcanvas.logs import get_logger
from taskcanvas.models import Task, TaskList, TaskTemplate
from taskcanvas.recovery import MalformedInputError, TemplateNotFoundError
from taskcanvas.tree.mutate import append_tasks, new_task_id
from taskcanvas.tree.walker import walk_tree

log = get_logger("templates")


def _section(text: str, priority: str, steps: List[tuple]) -> Task:
    return Task(
        id=new_task_id(),
        text=text,
        priority=priority,
        subtasks=[Task(id=new_task_id(), text=step, priority=p) for step, p in steps],
    )


BUILT_IN_TEMPLATES = [
    TaskTemplate(
        name="Project Template",
        description="A template for managing a standard project with planning, execution, and review phases.",
        category="Project",
        tasks=[
            _section("Planning Phase", "high", [
                ("Define project scope", "high"),
                ("Create timeline", "medium"),
                ("Allocate resources", "medium"),
            ]),
            _section("Execution Phase", "medium", [
                ("Development task 1", "medium"),
                ("Development task 2", "medium"),
            ]),
            _section("Review Phase", "low", [
                ("Quality assurance", "medium"),
                ("Project retrospective", "low"),
            ]),
        ],
    ),
    TaskTemplate(
        name="Meeting Preparation",
        description="Prepare for and follow up after a meeting.",
        category="Meetings",
        tasks=[
            _section("Before Meeting", "high", [
                ("Create agenda", "high"),
                ("Send invitations", "medium"),
                ("Prepare materials", "medium"),
            ]),
            _section("During Meeting", "medium", [
                ("Take notes", "medium"),
                ("Record action items", "high"),
            ]),
            _section("After Meeting", "medium", [
                ("Send meeting summary", "high"),
                ("Follow up on action items", "medium"),
            ]),
        ],
    ),
    TaskTemplate(
        name="Daily Tasks",
        description="A template for organizing your day.",
        category="Personal",
        tasks=[
            _section("Morning Routine", "high", [
                ("Review calendar", "high"),
                ("Check emails", "medium"),
            ]),
            _section("Priority Tasks", "high", [
                ("Important task 1", "high"),
                ("Important task 2", "high"),
            ]),
            _section("End of Day", "medium", [
                ("Review completed tasks", "medium"),
                ("Plan for tomorrow", "medium"),
            ]),
        ],
    ),
]


def all_templates(custom: Iterable[TaskTemplate] = ()) -> List[TaskTemplate]:
    """Built-ins first, then custom templates in the order they were saved."""
    return BUILT_IN_TEMPLATES + list(custom)


def get_template(name: str, templates: List[TaskTemplate] = None) -> TaskTemplate:
    """Look a template up by name, ignoring case."""
    templates = BUILT_IN_TEMPLATES if templates is None else templates
    wanted = name.strip().casefold()
    for template in templates:
        if template.name.casefold() == wanted:
            return template
    raise TemplateNotFoundError(f"No template named '{name}'")


def _reissue_ids(task: Task) -> Task:
    task.id = new_task_id()
    for child in task.subtasks:
        _reissue_ids(child)
    return task


def instantiate(template: TaskTemplate) -> TaskList:
    """Copy the template's tasks with fresh ids and correct depths."""
    tasks = [_reissue_ids(t.model_copy(deep=True)) for t in template.tasks]
    return walk_tree(tasks)


def apply_template(tree: TaskList, template: TaskTemplate) -> TaskList:
    """Append a fresh instance of ``template`` to the root list."""
    log.info(f"Applying template '{template.name}'")
    return append_tasks(tree, instantiate(template))


def create_template(name: str, tasks: TaskList, description: Optional[str] = None,
                    category: Optional[str] = None) -> TaskTemplate:
    """
    Build a custom template from existing tasks.

    The tasks are copied with fresh ids, so later edits to the source tree
    never reach the template. Copied subtrees become template roots.
    """
    name = (name or "").strip()
    if not name:
        raise MalformedInputError("Template name must not be empty")
    if not tasks:
        raise MalformedInputError("A template needs at least one task")

    fields = {'name': name, 'tasks': walk_tree([_reissue_ids(t.model_copy(deep=True)) for t in tasks])}
    if description:
        fields['description'] = description
    if category and category.strip():
        fields['category'] = category.strip()
    return TaskTemplate(**fields)


def add_template(custom: List[TaskTemplate], template: TaskTemplate) -> List[TaskTemplate]:
    """Return ``custom`` with ``template`` appended; names are unique ignoring case."""
    wanted = template.name.casefold()
    if any(t.name.casefold() == wanted for t in all_templates(custom)):
        raise MalformedInputError(f"A template named '{template.name}' already exists")
    log.info(f"Saved template '{template.name}'")
    return list(custom) + [template]


def remove_template(custom: List[TaskTemplate], name: str) -> List[TaskTemplate]:
    """Return ``custom`` without the named template. Built-ins cannot be removed."""
    template = get_template(name, all_templates(custom))
    if any(template is t for t in BUILT_IN_TEMPLATES):
        raise MalformedInputError(f"Built-in template '{template.name}' cannot be removed")
    log.info(f"Removed template '{template.name}'")
    return [t for t in custom if t is not template]
