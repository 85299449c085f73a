"""
Read-only views over a task tree: filtering, sorting and category grouping.
"""

from .project import due_bucket, matches, filter_tasks, sort_tasks, project, visible_rows
from .group import category_of, group_by_category, category_names

__all__ = [
    'due_bucket',
    'matches',
    'filter_tasks',
    'sort_tasks',
    'project',
    'visible_rows',
    'category_of',
    'group_by_category',
    'category_names',
]
