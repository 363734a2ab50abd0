"""
Task schema for the board.

Board lanes:
  Backlog → In Progress → Review → Done

A task's column is the only thing drag-and-drop changes; ordering inside a
column is not persisted. Values coming from the API are normalized here so the
rest of the package can rely on enum members instead of raw strings.
"""
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class TaskColumn(Enum):
    """The four fixed board lanes."""
    BACKLOG = "backlog"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"

    @property
    def label(self) -> str:
        return _COLUMN_LABELS[self]

    @classmethod
    def from_str(cls, value: Any) -> Optional["TaskColumn"]:
        """Look up a column by value; None for anything unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


_COLUMN_LABELS = {
    TaskColumn.BACKLOG: "To Do",
    TaskColumn.IN_PROGRESS: "In Progress",
    TaskColumn.REVIEW: "In Review",
    TaskColumn.DONE: "Done",
}


class TaskPriority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_str(cls, value: Any) -> "TaskPriority":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.LOW


# Fields a PATCH may carry. The id is assigned by the API and never edited.
EDITABLE_FIELDS = ("title", "description", "column", "priority")


@dataclass
class Task:
    """A task as held by the client. The API owns the durable copy."""

    id: int
    title: str
    description: str = ""
    column: Optional[TaskColumn] = TaskColumn.BACKLOG
    priority: TaskPriority = TaskPriority.LOW

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on title or description."""
        q = query.strip().lower()
        if not q:
            return True
        return q in self.title.lower() or q in (self.description or "").lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "column": self.column.value if self.column else None,
            "priority": self.priority.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Build a Task from API JSON, normalizing column and priority."""
        raw_column = data.get("column")
        column = TaskColumn.from_str(raw_column)
        if column is None:
            logger.warning(f"Task {data.get('id')} has unrecognized column {raw_column!r}")

        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            description=data.get("description") or "",
            column=column,
            priority=TaskPriority.from_str(data.get("priority")),
        )


@dataclass
class TaskInput:
    """Payload for creating a task. The API assigns the id."""

    title: str
    description: str = ""
    column: TaskColumn = TaskColumn.BACKLOG
    priority: TaskPriority = TaskPriority.LOW

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskInput":
        """Coerce loose input; unknown column means backlog, unknown priority low."""
        return cls(
            title=str(data.get("title") or "").strip(),
            description=str(data.get("description") or "").strip(),
            column=TaskColumn.from_str(data.get("column")) or TaskColumn.BACKLOG,
            priority=TaskPriority.from_str(data.get("priority")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "column": self.column.value,
            "priority": self.priority.value,
        }


def normalize_patch(partial: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a partial update and convert it to its JSON form.

    Accepts enum members or their string values for column and priority.
    Raises ValueError on unknown fields or invalid enum values.
    """
    unknown = set(partial) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Fields not editable: {sorted(unknown)}")

    patch: Dict[str, Any] = {}
    for key, value in partial.items():
        if key == "column":
            column = TaskColumn.from_str(value)
            if column is None:
                raise ValueError(f"Invalid column: {value!r}")
            patch[key] = column.value
        elif key == "priority":
            if isinstance(value, TaskPriority):
                patch[key] = value.value
            elif value in {p.value for p in TaskPriority}:
                patch[key] = value
            else:
                raise ValueError(f"Invalid priority: {value!r}")
        else:
            patch[key] = value
    return patch
