"""
Data submodule: loading, saving and validating task and template files.
"""

from .io import (
    atomic_write, data_format_for, load_tasks, save_tasks, tasks_from_data, tasks_to_data,
    load_templates, save_templates, templates_from_data, DATA_YAML, DATA_JSON,
)
from .validate import task_list_schema, template_list_schema, validate_task_data, validate_template_data

# Define what gets imported with `from data import *`
__all__ = [
    'atomic_write',
    'data_format_for',
    'load_tasks',
    'save_tasks',
    'tasks_from_data',
    'tasks_to_data',
    'load_templates',
    'save_templates',
    'templates_from_data',
    'DATA_YAML',
    'DATA_JSON',
    'task_list_schema',
    'template_list_schema',
    'validate_task_data',
    'validate_template_data',
]
