"""
Drag-and-drop transition resolution.

A drag ends over one of three things: an (often empty) column, another task
card, or nothing. The raw drop id is parsed once into a DropTarget and then
resolved to a destination column. Only column membership is persisted, so a
drop that resolves to the task's current column is a no-op.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .schema import Task, TaskColumn


@dataclass(frozen=True)
class ColumnTarget:
    column: TaskColumn


@dataclass(frozen=True)
class TaskTarget:
    task_id: int


class _NoTarget:
    """Dropped outside any column or card."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_TARGET"

    def __bool__(self) -> bool:
        return False


NO_TARGET = _NoTarget()

DropTarget = Union[ColumnTarget, TaskTarget, _NoTarget]


def parse_drop_target(raw) -> DropTarget:
    """Classify a raw drop id as a column, a task, or nothing."""
    if raw is None or raw == "":
        return NO_TARGET
    if isinstance(raw, (ColumnTarget, TaskTarget, _NoTarget)):
        return raw

    column = TaskColumn.from_str(raw)
    if column is not None:
        return ColumnTarget(column)

    if isinstance(raw, bool):
        return NO_TARGET
    if isinstance(raw, int):
        return TaskTarget(raw)
    if isinstance(raw, str) and raw.strip().isdigit():
        return TaskTarget(int(raw.strip()))
    return NO_TARGET


def resolve_destination(target: DropTarget, tasks: Iterable[Task]) -> Optional[TaskColumn]:
    """Column the drop lands in, or None when it cannot be resolved."""
    if isinstance(target, ColumnTarget):
        return target.column
    if isinstance(target, TaskTarget):
        for task in tasks:
            if task.id == target.task_id:
                return task.column
    return None


def plan_move(source: Task, target: DropTarget, tasks: Iterable[Task]) -> Optional[TaskColumn]:
    """
    Destination column for a drop, or None if nothing should change.

    None covers: no target, an unknown target task, a target task without a
    column, and a drop into the column the task is already in.
    """
    destination = resolve_destination(target, tasks)
    if destination is None or destination == source.column:
        return None
    return destination
