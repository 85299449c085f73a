import tempfile, yaml, json, os
from typing import Any, List, Union
from pathlib import Path

from pydantic import ValidationError

from taskcanvas.recovery import CorruptionError, FileOperationError, FatalError
from taskcanvas.logs import get_logger
from taskcanvas.models import TaskList, TaskTemplate
from taskcanvas.tree.query import check_invariants
from taskcanvas.tree.walker import walk_tree
from .validate import TASK_LIST_ADAPTER, TEMPLATE_LIST_ADAPTER, validate_task_data, validate_template_data

log = get_logger("io")

DATA_YAML = 0
DATA_JSON = 1

_SUFFIXES = {
    ".yml": DATA_YAML,
    ".yaml": DATA_YAML,
    ".json": DATA_JSON,
}

def data_format_for(file_path: Union[Path, str]) -> int:
    """Pick YAML or JSON from the file suffix."""
    suffix = Path(file_path).suffix.lower()
    if suffix not in _SUFFIXES:
        raise FileOperationError(f"Unsupported tasks file type '{suffix}', use .yml, .yaml or .json")
    return _SUFFIXES[suffix]

def _remove_partial(temp_path):
    if temp_path is None or not os.path.exists(temp_path):
        return
    try:
        os.unlink(temp_path)
        log.debug(f"Removed partial write {temp_path}")
    except OSError as e:
        log.warning(f"Left partial write behind at {temp_path}: {e}")

def _ensure_parent(file_path: Path):
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        error_msg = f"Cannot create directory {file_path.parent}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

def _dump_yaml(data, stream):
    yaml.safe_dump(data, stream, default_flow_style=False, sort_keys=False, indent=2, allow_unicode=True)

def _dump_json(data, stream):
    json.dump(data, stream, indent=2, ensure_ascii=False)
    stream.write("\n")

_DUMPERS = {
    DATA_YAML: _dump_yaml,
    DATA_JSON: _dump_json,
}

def atomic_write(data_type: int, file_path: Union[Path, str], data: Any, create_dirs: bool = False):
    """
    Write ``data`` as YAML or JSON so readers see either the old file or the new one.

    The document goes to a hidden temp file next to the target, is fsynced and
    then renamed over the target. Serialization failures are fatal; I/O
    failures raise FileOperationError and leave the old file in place.
    """
    file_path = Path(file_path)
    if data_type not in _DUMPERS:
        raise FatalError(f"Unknown data format {data_type!r}")
    if create_dirs:
        _ensure_parent(file_path)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', dir=file_path.parent,
                                         prefix=f".{file_path.name}.", suffix='.tmp',
                                         delete=False) as stream:
            temp_path = stream.name
            _DUMPERS[data_type](data, stream)
            stream.flush()
            os.fsync(stream.fileno())
        os.replace(temp_path, file_path)
    except (yaml.YAMLError, TypeError, ValueError) as e:
        _remove_partial(temp_path)
        error_msg = f"Cannot serialize tasks for {file_path}: {e}"
        log.critical(error_msg)
        raise FatalError(error_msg) from e
    except OSError as e:
        _remove_partial(temp_path)
        error_msg = f"Cannot write {file_path}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

    log.debug(f"Wrote {file_path}")
    return True

def _parse(data_type: int, text: str, file_path: Path) -> Any:
    try:
        if data_type == DATA_YAML:
            return yaml.safe_load(text)
        return json.loads(text)
    except yaml.YAMLError as e:
        # Syntax errors are fatal for this file (corrupted)
        raise CorruptionError(f"YAML syntax error in {file_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CorruptionError(f"JSON syntax error in {file_path}: {e}") from e

def tasks_from_data(data: Any) -> TaskList:
    """
    Turn a parsed document into a walked task tree.

    Missing optional fields are filled with their defaults (absent subtasks
    become an empty list, absent depth becomes 0) and the depth walker then
    corrects depth and parent ids from the tree shape.
    """
    if data is None:
        return []

    data = validate_task_data(data)
    try:
        tasks = TASK_LIST_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise CorruptionError(f"Task data could not be parsed: {e}") from e

    walk_tree(tasks)
    problems = check_invariants(tasks)
    if problems:
        raise CorruptionError(f"Task data is inconsistent: {'; '.join(problems)}")
    return tasks

def _read_document(file_path: Path) -> Any:
    """Parse a YAML/JSON file; a missing file reads as None."""
    data_type = data_format_for(file_path)
    if not file_path.exists():
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        raise FileOperationError(f"Cannot read {file_path}: {e}") from e
    return _parse(data_type, text, file_path)

def load_tasks(file_path: Union[Path, str]) -> TaskList:
    """
    Load a task tree from a YAML or JSON file.

    Args:
        file_path: Path to the tasks file

    Returns:
        The task tree, or an empty tree if the file doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        log.debug(f"No tasks file at {file_path}, starting empty")
    tasks = tasks_from_data(_read_document(file_path))
    log.info(f"Loaded {len(tasks)} top-level tasks from {file_path}")
    return tasks

def tasks_to_data(tasks: TaskList) -> list:
    """Plain nested records, camelCase keys, unset optional fields left out."""
    return TASK_LIST_ADAPTER.dump_python(tasks, mode='json', by_alias=True, exclude_none=True)

def save_tasks(file_path: Union[Path, str], tasks: TaskList, create_dirs: bool = True):
    """Atomically write the task tree to a YAML or JSON file."""
    file_path = Path(file_path)
    atomic_write(data_format_for(file_path), file_path, tasks_to_data(tasks), create_dirs=create_dirs)
    log.info(f"Saved {len(tasks)} top-level tasks to {file_path}")

def templates_from_data(data: Any) -> List[TaskTemplate]:
    """Turn a parsed templates document into templates with walked task trees."""
    if data is None:
        return []

    data = validate_template_data(data)
    try:
        templates = TEMPLATE_LIST_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise CorruptionError(f"Template data could not be parsed: {e}") from e

    for template in templates:
        walk_tree(template.tasks)
        problems = check_invariants(template.tasks)
        if problems:
            raise CorruptionError(f"Template '{template.name}' is inconsistent: {'; '.join(problems)}")
    return templates

def load_templates(file_path: Union[Path, str]) -> List[TaskTemplate]:
    """Load saved custom templates; a missing file means there are none."""
    file_path = Path(file_path)
    templates = templates_from_data(_read_document(file_path))
    log.debug(f"Loaded {len(templates)} custom templates from {file_path}")
    return templates

def save_templates(file_path: Union[Path, str], templates: List[TaskTemplate], create_dirs: bool = True):
    """Atomically write custom templates to a YAML or JSON file."""
    file_path = Path(file_path)
    data = TEMPLATE_LIST_ADAPTER.dump_python(templates, mode='json', by_alias=True, exclude_none=True)
    atomic_write(data_format_for(file_path), file_path, data, create_dirs=create_dirs)
    log.info(f"Saved {len(templates)} custom templates to {file_path}")
