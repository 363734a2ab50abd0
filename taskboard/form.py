"""Create/edit dialog form state."""
from typing import Any, Dict, Optional

from .errors import ValidationRejected
from .schema import Task, TaskColumn, TaskInput, TaskPriority, normalize_patch


def check_title(title: Any) -> str:
    """Trimmed title, or ValidationRejected when it is missing or blank."""
    trimmed = str(title or "").strip()
    if not trimmed:
        raise ValidationRejected("Task title is required")
    return trimmed


def clean_patch(partial: Dict[str, Any]) -> Dict[str, Any]:
    """
    Trim and validate an edit before it is sent. A present title must not be
    blank; unknown fields, columns or priorities raise ValidationRejected.
    """
    cleaned = dict(partial)
    if "title" in cleaned:
        cleaned["title"] = check_title(cleaned["title"])
    if "description" in cleaned:
        cleaned["description"] = str(cleaned["description"] or "").strip()
    try:
        return normalize_patch(cleaned)
    except ValueError as e:
        raise ValidationRejected(str(e)) from e


class TaskForm:
    """Editable fields of the task dialog."""

    def __init__(self):
        self.reset()

    def reset(self, column: Optional[TaskColumn] = None) -> None:
        self.title = ""
        self.description = ""
        self.column = column or TaskColumn.BACKLOG
        self.priority = TaskPriority.LOW
        self._initial: Dict[str, Any] = {}

    def load(self, task: Task) -> None:
        self.title = task.title
        self.description = task.description or ""
        self.column = task.column or TaskColumn.BACKLOG
        self.priority = task.priority or TaskPriority.LOW
        self._initial = {
            "title": self.title.strip(),
            "description": self.description.strip(),
            "column": self.column.value,
            "priority": self.priority.value,
        }

    def submit(self) -> TaskInput:
        """Trimmed form contents. Raises ValidationRejected when the title is blank."""
        return TaskInput(
            title=check_title(self.title),
            description=(self.description or "").strip(),
            column=self.column,
            priority=self.priority,
        )

    def changes(self) -> Dict[str, Any]:
        """Submitted fields that differ from what load() filled in."""
        submitted = self.submit().to_dict()
        return {k: v for k, v in submitted.items() if self._initial.get(k) != v}
