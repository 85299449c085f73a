from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from datetime import date
from enum import Enum
from typing import Optional, List

UNCATEGORIZED = "Uncategorized"

class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]

PRIORITY_RANK = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}

class StatusFilter(Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

class PriorityFilter(Enum):
    ALL = "all"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

class DueFilter(Enum):
    ALL = "all"
    OVERDUE = "overdue"
    TODAY = "today"
    UPCOMING = "upcoming"
    FUTURE = "future"

class SortKey(Enum):
    NONE = "none"
    PRIORITY = "priority"
    DUE_DATE = "due_date"
    ALPHABETICAL = "alphabetical"

class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"

class Placement(Enum):
    BEFORE = "before"
    AFTER = "after"

class Task(BaseModel):
    """One node of the task tree.

    A node exclusively owns its ``subtasks``. ``parent_id`` and ``depth`` are
    denormalized from the tree shape and are rewritten by the depth walker
    after every structural change; never treat them as a source of truth.
    Serialized field names are camelCase (``dueDate``, ``isExpanded``,
    ``parentId``) to match the persisted record shape.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Identifier, unique across the whole tree")
    text: str = Field(description="The task's one-line text")
    done: bool = Field(default=False, description="Whether the task is completed")
    category: Optional[str] = Field(default=None, description="Free-form category used for grouping")
    priority: Optional[Priority] = Field(default=None, description="Optional priority")
    due_date: Optional[date] = Field(default=None, description="Optional due date")
    description: Optional[str] = Field(default=None, description="Longer free-form notes, searchable")
    subtasks: List['Task'] = Field(
        default_factory=list,
        description="Ordered child tasks, owned by this node"
    )
    is_expanded: bool = Field(default=True, description="Whether the subtasks are shown")
    parent_id: Optional[str] = Field(default=None, description="Id of the owning task, recomputed from shape")
    depth: int = Field(default=0, ge=0, description="Distance from the root list; roots are 0")

    @field_validator('subtasks', mode='before')
    @classmethod
    def default_subtasks(cls, v):
        return [] if v is None else v

    @field_validator('depth', mode='before')
    @classmethod
    def default_depth(cls, v):
        return 0 if v is None else v

    @property
    def has_subtasks(self) -> bool:
        return bool(self.subtasks)

Task.model_rebuild()

TaskList = List[Task]

class TaskFilter(BaseModel):
    """Predicates for the filter projection; all active predicates are ANDed."""

    status: StatusFilter = Field(default=StatusFilter.ALL, description="Completion status filter")
    priority: PriorityFilter = Field(default=PriorityFilter.ALL, description="Priority filter")
    due: DueFilter = Field(default=DueFilter.ALL, description="Due-date bucket filter")
    search: str = Field(default="", description="Case-insensitive substring over text and description")

    @field_validator('search', mode='before')
    @classmethod
    def strip_search(cls, v):
        return (v or "").strip()

    @property
    def is_identity(self) -> bool:
        return (self.status == StatusFilter.ALL and
                self.priority == PriorityFilter.ALL and
                self.due == DueFilter.ALL and
                not self.search)

class SortSpec(BaseModel):
    key: SortKey = Field(default=SortKey.NONE, description="What sibling groups are ordered by")
    direction: SortDirection = Field(default=SortDirection.ASC, description="Applied uniformly to every comparison")

    @property
    def descending(self) -> bool:
        return self.direction == SortDirection.DESC

    def toggled(self) -> 'SortSpec':
        """Return a copy with the direction flipped."""
        flipped = SortDirection.ASC if self.descending else SortDirection.DESC
        return self.model_copy(update={'direction': flipped})

class BoundingBox(BaseModel):
    """On-screen vertical extent of a hover candidate."""

    top: float = Field(description="Y coordinate of the top edge")
    bottom: float = Field(description="Y coordinate of the bottom edge")

    @model_validator(mode='after')
    def validate_edges(self):
        if self.bottom < self.top:
            raise ValueError("bottom must not be above top")
        return self

    @property
    def midpoint(self) -> float:
        return (self.top + self.bottom) / 2

class TaskTemplate(BaseModel):
    name: str = Field(description="Human readable template name")
    description: str = Field(default="", description="What the template is for")
    category: str = Field(default="Custom", description="Template category")
    tasks: List[Task] = Field(default_factory=list, description="Task tree copied on every use")
