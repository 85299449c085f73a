"""
Pure tree mutations.

Every function takes the current tree and returns a new one; the input list
and its nodes are never modified. Work happens on a deep copy which is walked
by the depth walker before it is returned. Operations aimed at an id that is
not in the tree are silent no-ops that hand back the input tree itself.
"""
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from taskcanvas.logs import get_logger
from taskcanvas.models import Placement, Priority, Task, TaskList
from taskcanvas.recovery import MalformedInputError
from taskcanvas.tree.query import collect_ids, find_task, is_descendant, iter_tasks
from taskcanvas.tree.walker import clone_tree, walk_tree

log = get_logger("tree.mutate")

# Structural fields are owned by the walker and by the id allocator
_STRUCTURAL_FIELDS = {'id', 'depth', 'parent_id'}

_FIELD_BY_KEY = {}
for _name in Task.model_fields:
    _FIELD_BY_KEY[_name] = _name
    _FIELD_BY_KEY[to_camel(_name)] = _name


def new_task_id() -> str:
    return uuid.uuid4().hex


def _check_text(text: str) -> str:
    if text is None or not str(text).strip():
        raise MalformedInputError("Task text must not be empty")
    return text


def _claim_id(tree: TaskList, task_id: Optional[str]) -> str:
    if task_id is None:
        return new_task_id()
    if not str(task_id).strip():
        raise MalformedInputError("Task id must not be empty")
    if find_task(tree, task_id) is not None:
        raise MalformedInputError(f"Task id already in use: {task_id}")
    return task_id


def _locate(tasks: List[Task], task_id: str) -> Optional[Tuple[List[Task], int]]:
    """Find the list holding ``task_id`` and the index inside it."""
    for i, task in enumerate(tasks):
        if task.id == task_id:
            return tasks, i
        found = _locate(task.subtasks, task_id)
        if found:
            return found
    return None


def _build_task(task_id: str, text: str, depth: int, parent_id: Optional[str], **fields) -> Task:
    try:
        return Task(id=task_id, text=text, depth=depth, parent_id=parent_id,
                    subtasks=[], is_expanded=True, **fields)
    except ValidationError as e:
        raise MalformedInputError(f"Invalid task fields: {e}") from e


def add_task(tree: TaskList, text: str, task_id: Optional[str] = None,
             category: Optional[str] = None, priority: Optional[Priority] = None,
             due_date=None, description: Optional[str] = None) -> TaskList:
    """Append a new top-level task."""
    _check_text(text)
    task_id = _claim_id(tree, task_id)

    task = _build_task(task_id, text, 0, None, category=category, priority=priority,
                       due_date=due_date, description=description)
    work = clone_tree(tree)
    work.append(task)
    log.debug(f"Added task {task_id}")
    return walk_tree(work)


def add_subtask(tree: TaskList, parent_id: str, text: str, task_id: Optional[str] = None,
                category: Optional[str] = None, priority: Optional[Priority] = None,
                due_date=None, description: Optional[str] = None) -> TaskList:
    """Append a new child under ``parent_id``, wherever it sits in the tree.

    The child inherits the parent's category unless one is given, and the
    parent is expanded so the new child is visible.
    """
    _check_text(text)
    task_id = _claim_id(tree, task_id)

    work = clone_tree(tree)
    parent = find_task(work, parent_id)
    if parent is None:
        log.debug(f"add_subtask: parent {parent_id} not found, tree unchanged")
        return tree

    child = _build_task(task_id, text, parent.depth + 1, parent.id,
                        category=category if category is not None else parent.category,
                        priority=priority, due_date=due_date, description=description)
    parent.subtasks.append(child)
    parent.is_expanded = True
    log.debug(f"Added subtask {task_id} under {parent_id}")
    return walk_tree(work)


def _normalize_patch(patch: Dict[str, Any]) -> Dict[str, Any]:
    fields = {}
    for key, value in patch.items():
        name = _FIELD_BY_KEY.get(key)
        if name is None:
            raise MalformedInputError(f"Unknown task field: {key}")
        if name in _STRUCTURAL_FIELDS:
            log.debug(f"Ignoring structural field '{key}' in patch")
            continue
        fields[name] = value
    if 'text' in fields:
        _check_text(fields['text'])
    return fields


def update_task(tree: TaskList, task_id: str, patch: Dict[str, Any]) -> TaskList:
    """Shallow-merge ``patch`` into the task with ``task_id``.

    Subtasks are only touched when the patch replaces them explicitly.
    """
    fields = _normalize_patch(patch)
    work = clone_tree(tree)
    found = _locate(work, task_id)
    if found is None:
        log.debug(f"update_task: {task_id} not found, tree unchanged")
        return tree

    siblings, index = found
    current = siblings[index]
    merged = current.model_dump(exclude={'subtasks'})
    merged.update(fields)
    merged['subtasks'] = fields.get('subtasks', current.subtasks)
    try:
        updated = Task.model_validate(merged)
    except ValidationError as e:
        raise MalformedInputError(f"Invalid update for task {task_id}: {e}") from e

    siblings[index] = updated
    if 'subtasks' in fields:
        ids = [t.id for t in iter_tasks(work)]
        if len(ids) != len(set(ids)):
            raise MalformedInputError(f"Replacing subtasks of {task_id} would duplicate ids")
    return walk_tree(work)


def toggle_done(tree: TaskList, task_id: str) -> TaskList:
    task = find_task(tree, task_id)
    if task is None:
        return tree
    return update_task(tree, task_id, {'done': not task.done})


def toggle_expanded(tree: TaskList, task_id: str) -> TaskList:
    task = find_task(tree, task_id)
    if task is None:
        return tree
    return update_task(tree, task_id, {'is_expanded': not task.is_expanded})


def delete_task(tree: TaskList, task_id: str) -> TaskList:
    """Remove ``task_id`` and its whole subtree."""
    work = clone_tree(tree)
    found = _locate(work, task_id)
    if found is None:
        log.debug(f"delete_task: {task_id} not found, tree unchanged")
        return tree

    siblings, index = found
    removed = siblings.pop(index)
    log.debug(f"Deleted task {task_id} with {len(list(iter_tasks(removed.subtasks)))} descendants")
    return walk_tree(work)


def append_tasks(tree: TaskList, tasks: Iterable[Task]) -> TaskList:
    """Append already-built top-level tasks, refusing any id collision."""
    incoming = [t.model_copy(deep=True) for t in tasks]
    incoming_ids = [t.id for t in iter_tasks(incoming)]
    if len(incoming_ids) != len(set(incoming_ids)):
        raise MalformedInputError("Appended tasks contain duplicate ids")
    clashes = collect_ids(tree) & set(incoming_ids)
    if clashes:
        raise MalformedInputError(f"Task ids already in use: {', '.join(sorted(clashes))}")

    work = clone_tree(tree)
    work.extend(incoming)
    return walk_tree(work)


def move_task(tree: TaskList, drag_id: str, hover_id: str,
              placement: Placement = Placement.AFTER) -> TaskList:
    """Move ``drag_id`` (with its subtree) next to ``hover_id``.

    The dragged task becomes the immediate next (or, with
    ``Placement.BEFORE``, previous) sibling of the hover target, inside the
    target's parent list, so it may change parent and depth. If the target
    cannot be found once the dragged task is lifted out, the dragged task is
    appended to the root list instead of being dropped.
    """
    if drag_id == hover_id:
        return tree

    work = clone_tree(tree)
    found = _locate(work, drag_id)
    if found is None:
        log.debug(f"move_task: dragged task {drag_id} not found, tree unchanged")
        return tree

    siblings, index = found
    if is_descendant(siblings[index], hover_id):
        log.debug(f"move_task: {hover_id} is inside the subtree of {drag_id}, tree unchanged")
        return tree

    dragged = siblings.pop(index)
    target = _locate(work, hover_id)
    if target is None:
        log.warning(f"Could not find task {hover_id} to insert after, appending {drag_id} to the root list")
        work.append(dragged)
    else:
        target_siblings, target_index = target
        offset = 1 if placement == Placement.AFTER else 0
        target_siblings.insert(target_index + offset, dragged)

    return walk_tree(work)
