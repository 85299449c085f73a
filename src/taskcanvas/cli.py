"""
Command Line Interface for taskcanvas.
"""

import functools
import json
from pathlib import Path

import click

from .version import VERSION
from .config import load_settings, templates_file_for
from .data import load_tasks, load_templates, save_tasks, save_templates, task_list_schema
from .models import (
    DueFilter, Placement, Priority, PriorityFilter, SortDirection, SortKey, SortSpec,
    StatusFilter, Task, TaskFilter,
)
from .recovery import TaskCanvasError
from .store import TaskStore
from .templates import BUILT_IN_TEMPLATES, add_template, all_templates, create_template, get_template, remove_template
from .tree.query import count_tasks, iter_tasks, task_progress
from .view.group import group_by_category
from .view.project import visible_rows


def _reports_errors(command):
    """Turn engine errors into a message and a non-zero exit code."""
    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except TaskCanvasError as e:
            click.echo(f"❌ {e}", err=True)
            click.get_current_context().exit(1)
    return wrapper


def _resolve(store: TaskStore, ref: str) -> str:
    """Accept a full id or an unambiguous id prefix."""
    if store.get(ref) is not None:
        return ref
    candidates = [t.id for t in iter_tasks(store.tasks) if t.id.startswith(ref)]
    if len(candidates) == 1:
        return candidates[0]
    if candidates:
        click.echo(f"❌ Id prefix '{ref}' is ambiguous ({len(candidates)} tasks)", err=True)
    else:
        click.echo(f"❌ No task with id '{ref}'", err=True)
    click.get_current_context().exit(1)


def _format_task(task: Task, show_ids: bool = True) -> str:
    box = "[x]" if task.done else "[ ]"
    parts = ["  " * task.depth + box]
    if show_ids:
        parts.append(task.id[:8])
    parts.append(task.text)
    if task.subtasks:
        marker = "▾" if task.is_expanded else "▸"
        parts.append(f"{marker} {task_progress(task)}%")
    if task.priority:
        parts.append(f"!{task.priority.value}")
    if task.due_date:
        parts.append(f"📅 {task.due_date.isoformat()}")
    if task.category:
        parts.append(f"#{task.category}")
    return " ".join(parts)


def _echo_rows(tasks, show_all: bool):
    rows = iter_tasks(tasks) if show_all else visible_rows(tasks)
    for task in rows:
        click.echo(_format_task(task))


@click.group()
@click.version_option(version=VERSION, prog_name="taskcanvas")
@click.option('-f', '--file', 'tasks_file', type=click.Path(dir_okay=False, path_type=Path),
              envvar='TASKCANVAS_FILE', default=None,
              help='Tasks file (.yml/.yaml/.json). Defaults to .taskcanvas/tasks.yml')
@click.pass_context
def main(ctx, tasks_file):
    """
    taskcanvas - a hierarchical task tree with filtering, grouping and reordering.
    """
    settings = load_settings()
    ctx.obj = {
        'file': tasks_file or settings.tasks_file,
        'settings': settings,
    }


def _open(ctx) -> TaskStore:
    return TaskStore(load_tasks(ctx.obj['file']), upcoming_days=ctx.obj['settings'].upcoming_days)


def _save(ctx, store: TaskStore):
    save_tasks(ctx.obj['file'], store.tasks)


@main.command()
@click.pass_context
@_reports_errors
def init(ctx):
    """Create an empty tasks file."""
    path = ctx.obj['file']
    if path.exists():
        click.echo(f"❌ Tasks file already exists: {path}")
        return

    save_tasks(path, [])
    click.echo(f"📋 Created {path}")


@main.command()
@click.argument('text')
@click.option('-p', '--parent', help='Id (or id prefix) of the parent task')
@click.option('-c', '--category', help='Category name')
@click.option('--priority', type=click.Choice([p.value for p in Priority]), help='Task priority')
@click.option('--due', type=click.DateTime(formats=['%Y-%m-%d']), help='Due date (YYYY-MM-DD)')
@click.option('-d', '--description', help='Longer description')
@click.pass_context
@_reports_errors
def add(ctx, text, parent, category, priority, due, description):
    """Add a task, or a subtask with --parent."""
    store = _open(ctx)
    fields = {
        'category': category,
        'priority': priority,
        'due_date': due.date() if due else None,
        'description': description,
    }
    if parent:
        task = store.add_subtask(_resolve(store, parent), text, **fields)
    else:
        task = store.add(text, **fields)

    _save(ctx, store)
    click.echo(f"✅ Added {task.id[:8]} {task.text}")


@main.command()
@click.argument('task_id')
@click.option('-t', '--text', help='New text')
@click.option('-c', '--category', help='New category')
@click.option('--priority', type=click.Choice([p.value for p in Priority]), help='New priority')
@click.option('--due', type=click.DateTime(formats=['%Y-%m-%d']), help='New due date (YYYY-MM-DD)')
@click.option('-d', '--description', help='New description')
@click.option('--clear', multiple=True, type=click.Choice(['category', 'priority', 'due', 'description']),
              help='Unset a field (repeatable)')
@click.pass_context
@_reports_errors
def edit(ctx, task_id, text, category, priority, due, description, clear):
    """Edit fields of a task."""
    store = _open(ctx)
    task_id = _resolve(store, task_id)

    patch = {}
    if text is not None:
        patch['text'] = text
    if category is not None:
        patch['category'] = category
    if priority is not None:
        patch['priority'] = priority
    if due is not None:
        patch['due_date'] = due.date()
    if description is not None:
        patch['description'] = description
    for name in clear:
        patch['due_date' if name == 'due' else name] = None

    if not patch:
        click.echo("💡 Nothing to change")
        return

    store.update(task_id, patch)
    _save(ctx, store)
    click.echo(f"✏️  Updated {task_id[:8]}")


@main.command()
@click.argument('task_id')
@click.pass_context
@_reports_errors
def done(ctx, task_id):
    """Toggle a task between done and not done."""
    store = _open(ctx)
    task_id = _resolve(store, task_id)
    store.toggle_done(task_id)
    _save(ctx, store)
    state = "done" if store.get(task_id).done else "not done"
    click.echo(f"✅ Marked {task_id[:8]} {state}")


@main.command()
@click.argument('task_id')
@click.pass_context
@_reports_errors
def fold(ctx, task_id):
    """Collapse or expand a task's subtasks."""
    store = _open(ctx)
    task_id = _resolve(store, task_id)
    store.toggle_expanded(task_id)
    _save(ctx, store)
    state = "expanded" if store.get(task_id).is_expanded else "collapsed"
    click.echo(f"📂 {task_id[:8]} {state}")


@main.command()
@click.argument('task_id')
@click.pass_context
@_reports_errors
def rm(ctx, task_id):
    """Delete a task and all of its subtasks."""
    store = _open(ctx)
    task_id = _resolve(store, task_id)
    before = count_tasks(store.tasks)
    store.delete(task_id)
    _save(ctx, store)
    click.echo(f"🗑️  Removed {before - count_tasks(store.tasks)} task(s)")


@main.command()
@click.argument('drag_id')
@click.argument('hover_id')
@click.option('--before', is_flag=True, help='Place before the target instead of after it')
@click.pass_context
@_reports_errors
def move(ctx, drag_id, hover_id, before):
    """Move a task (with its subtasks) next to another task."""
    store = _open(ctx)
    drag_id = _resolve(store, drag_id)
    hover_id = _resolve(store, hover_id)
    placement = Placement.BEFORE if before else Placement.AFTER

    previous = store.tasks
    store.move(drag_id, hover_id, placement)
    if store.tasks is previous:
        click.echo(f"❌ Cannot move {drag_id[:8]} next to {hover_id[:8]}")
        click.get_current_context().exit(1)

    _save(ctx, store)
    click.echo(f"↕️  Moved {drag_id[:8]} {placement.value} {hover_id[:8]}")


@main.command(name='list')
@click.option('--status', type=click.Choice([s.value for s in StatusFilter]), default='all')
@click.option('--priority', type=click.Choice([p.value for p in PriorityFilter]), default='all')
@click.option('--due', type=click.Choice([d.value for d in DueFilter]), default='all')
@click.option('-s', '--search', default='', help='Search text and descriptions')
@click.option('--sort', 'sort_key', type=click.Choice([k.value for k in SortKey]), default='none')
@click.option('--desc', is_flag=True, help='Sort descending')
@click.option('-g', '--group', is_flag=True, help='Group top-level tasks by category')
@click.option('-a', '--all', 'show_all', is_flag=True, help='Show subtasks of collapsed tasks too')
@click.pass_context
@_reports_errors
def list_tasks(ctx, status, priority, due, search, sort_key, desc, group, show_all):
    """Show the task tree, filtered and sorted."""
    store = _open(ctx)
    predicates = TaskFilter(status=status, priority=priority, due=due, search=search)
    sort = SortSpec(key=sort_key, direction=SortDirection.DESC if desc else SortDirection.ASC)
    view = store.view(predicates, sort)

    if not view:
        click.echo("📭 No tasks")
        return

    if not group:
        _echo_rows(view, show_all)
        return

    for name, members in group_by_category(view).items():
        if not members:
            continue
        click.echo(f"📂 {name} ({len(members)})")
        _echo_rows(members, show_all)


def _templates_file(ctx) -> Path:
    return templates_file_for(ctx.obj['file'])


@main.command()
@click.pass_context
@_reports_errors
def templates(ctx):
    """List built-in and saved task templates."""
    custom = load_templates(_templates_file(ctx))
    for template in all_templates(custom):
        marker = "🗂️ " if any(template is t for t in BUILT_IN_TEMPLATES) else "⭐"
        click.echo(f"{marker} {template.name} [{template.category}]")
        if template.description:
            click.echo(f"   {template.description}")
        click.echo(f"   📋 {count_tasks(template.tasks)} tasks")


@main.command()
@click.argument('name')
@click.pass_context
@_reports_errors
def apply(ctx, name):
    """Append a copy of a template to the tree."""
    template = get_template(name, all_templates(load_templates(_templates_file(ctx))))
    store = _open(ctx)
    store.apply_template(template)
    _save(ctx, store)
    click.echo(f"✅ Applied '{template.name}' ({count_tasks(template.tasks)} tasks)")


@main.group()
def template():
    """Save and remove custom templates."""
    pass


@template.command(name='save')
@click.argument('name')
@click.option('--from', 'source_ids', multiple=True, required=True,
              help='Id (or id prefix) of a task to copy, with its subtasks (repeatable)')
@click.option('-d', '--description', help='What the template is for')
@click.option('-c', '--category', help='Template category (default: Custom)')
@click.pass_context
@_reports_errors
def template_save(ctx, name, source_ids, description, category):
    """Save tasks as a reusable template."""
    store = _open(ctx)
    tasks = [store.get(_resolve(store, ref)) for ref in source_ids]
    new = create_template(name, tasks, description=description, category=category)

    path = _templates_file(ctx)
    save_templates(path, add_template(load_templates(path), new))
    click.echo(f"⭐ Saved template '{new.name}' ({count_tasks(new.tasks)} tasks)")


@template.command(name='rm')
@click.argument('name')
@click.pass_context
@_reports_errors
def template_rm(ctx, name):
    """Remove a saved template."""
    path = _templates_file(ctx)
    save_templates(path, remove_template(load_templates(path), name))
    click.echo(f"🗑️  Removed template '{name}'")


@main.command()
def schema():
    """Print the JSON Schema of the tasks file."""
    click.echo(json.dumps(task_list_schema(), indent=2))


@main.command()
@click.pass_context
@_reports_errors
def check(ctx):
    """Validate the tasks file and show a summary."""
    path = ctx.obj['file']
    if not path.exists():
        click.echo(f"❌ No tasks file at {path}")
        click.echo("💡 Run 'taskcanvas init' to create one")
        click.get_current_context().exit(1)

    tasks = load_tasks(path)
    total = count_tasks(tasks)
    completed = sum(1 for t in iter_tasks(tasks) if t.done)
    click.echo(f"📍 {path}")
    click.echo(f"   📋 {len(tasks)} top-level, {total} total, {completed} done")
    click.echo("✅ Tasks file is valid")


if __name__ == "__main__":
    main()
