from datetime import date, datetime
from typing import Any, List

from jsonschema import validate, ValidationError, SchemaError
from pydantic import TypeAdapter

from taskcanvas.logs import get_logger
from taskcanvas.models import Task, TaskTemplate
from taskcanvas.recovery import CorruptionError, FatalError

# Configure log for clear output
log = get_logger("data.validate")

TASK_LIST_ADAPTER = TypeAdapter(List[Task])
TEMPLATE_LIST_ADAPTER = TypeAdapter(List[TaskTemplate])

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"

# Null here means "use the default", same as a missing key
_NULL_MEANS_DEFAULT = ('subtasks', 'depth')

def _schema(adapter: TypeAdapter, title: str) -> dict:
    schema = adapter.json_schema(by_alias=True)
    schema["$schema"] = SCHEMA_DIALECT
    schema["title"] = title
    return schema

def task_list_schema() -> dict:
    """
    Build the JSON Schema of a persisted task tree.

    The schema is generated from the Task model using the serialized
    (camelCase) field names, so it describes the file exactly as written.
    """
    return _schema(TASK_LIST_ADAPTER, "TaskList")

def template_list_schema() -> dict:
    """JSON Schema of the saved custom templates file."""
    return _schema(TEMPLATE_LIST_ADAPTER, "TaskTemplateList")

def _jsonable(data: Any) -> Any:
    # YAML loads bare dates as date objects; the schema expects ISO strings
    if isinstance(data, dict):
        return {k: _jsonable(v) for k, v in data.items()
                if not (k in _NULL_MEANS_DEFAULT and v is None)}
    if isinstance(data, list):
        return [_jsonable(v) for v in data]
    if isinstance(data, (date, datetime)):
        return data.isoformat()
    return data

def _validate(data: Any, schema: dict, what: str) -> Any:
    data = _jsonable(data)
    try:
        validate(instance=data, schema=schema)
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        log.error(f"{what} FAILED validation at {location}: {e.message}")
        raise CorruptionError(f"{what} is invalid at {location}: {e.message}") from e
    except SchemaError as e:
        log.critical(f"{what} schema is invalid: {e.message}")
        raise FatalError(f"{what} schema is invalid: {e.message}") from e

    log.debug(f"{what} is VALID ({len(data)} top-level entries)")
    return data

def validate_task_data(data: Any) -> Any:
    """
    Validate raw loaded data against the task tree schema.

    Args:
        data: The parsed YAML/JSON document.

    Returns:
        The data with dates normalized to ISO strings and null ``subtasks`` /
        ``depth`` dropped, ready for model parsing.

    Raises:
        CorruptionError: If the document does not match the schema.
        FatalError: If the generated schema itself is invalid.
    """
    return _validate(data, task_list_schema(), "Task data")

def validate_template_data(data: Any) -> Any:
    """Validate a loaded templates document; see validate_task_data."""
    return _validate(data, template_list_schema(), "Template data")
