"""Tests for drop target parsing and column transition planning."""
from helpers import make_task

from taskboard.dnd import (
    NO_TARGET,
    ColumnTarget,
    TaskTarget,
    parse_drop_target,
    plan_move,
    resolve_destination,
)
from taskboard.schema import TaskColumn


TASKS = [
    make_task(1, "a", TaskColumn.BACKLOG),
    make_task(2, "b", TaskColumn.REVIEW),
    make_task(3, "c", None),
]


class TestParseDropTarget:

    def test_column_id(self):
        assert parse_drop_target("done") == ColumnTarget(TaskColumn.DONE)

    def test_int_task_id(self):
        assert parse_drop_target(2) == TaskTarget(2)

    def test_numeric_string_task_id(self):
        assert parse_drop_target("12") == TaskTarget(12)

    def test_nothing(self):
        assert parse_drop_target(None) is NO_TARGET
        assert parse_drop_target("") is NO_TARGET
        assert parse_drop_target("sidebar") is NO_TARGET

    def test_no_target_is_falsy(self):
        assert not NO_TARGET


class TestResolveDestination:

    def test_column_target(self):
        assert resolve_destination(ColumnTarget(TaskColumn.DONE), TASKS) is TaskColumn.DONE

    def test_task_target_uses_that_tasks_column(self):
        assert resolve_destination(TaskTarget(2), TASKS) is TaskColumn.REVIEW

    def test_unknown_task(self):
        assert resolve_destination(TaskTarget(99), TASKS) is None

    def test_task_without_column(self):
        assert resolve_destination(TaskTarget(3), TASKS) is None

    def test_no_target(self):
        assert resolve_destination(NO_TARGET, TASKS) is None


class TestPlanMove:

    def test_move_to_other_column(self):
        assert plan_move(TASKS[0], ColumnTarget(TaskColumn.DONE), TASKS) is TaskColumn.DONE

    def test_move_onto_task_in_other_column(self):
        assert plan_move(TASKS[0], TaskTarget(2), TASKS) is TaskColumn.REVIEW

    def test_same_column_is_noop(self):
        assert plan_move(TASKS[0], ColumnTarget(TaskColumn.BACKLOG), TASKS) is None

    def test_reorder_within_column_is_noop(self):
        tasks = TASKS + [make_task(4, "d", TaskColumn.BACKLOG)]
        assert plan_move(tasks[0], TaskTarget(4), tasks) is None

    def test_unresolvable_is_noop(self):
        assert plan_move(TASKS[0], NO_TARGET, TASKS) is None
