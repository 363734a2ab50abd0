"""Tests for the create/edit dialog form."""
import pytest

from helpers import make_task

from taskboard.errors import ValidationRejected
from taskboard.form import TaskForm, clean_patch
from taskboard.schema import TaskColumn, TaskPriority


def test_reset_defaults():
    form = TaskForm()
    assert form.title == ""
    assert form.column is TaskColumn.BACKLOG
    assert form.priority is TaskPriority.LOW


def test_reset_with_column():
    form = TaskForm()
    form.reset(TaskColumn.REVIEW)
    assert form.column is TaskColumn.REVIEW


def test_load_copies_task():
    form = TaskForm()
    form.load(make_task(4, "Ship", TaskColumn.DONE, "publish", TaskPriority.HIGH))
    assert (form.title, form.description, form.column, form.priority) == (
        "Ship", "publish", TaskColumn.DONE, TaskPriority.HIGH,
    )


def test_submit_trims():
    form = TaskForm()
    form.title = "  Write docs  "
    form.description = "\n details \n"
    data = form.submit()
    assert data.title == "Write docs"
    assert data.description == "details"


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_blank_title_rejected(title):
    form = TaskForm()
    form.title = title
    with pytest.raises(ValidationRejected):
        form.submit()


def test_changes_lists_only_edited_fields():
    form = TaskForm()
    form.load(make_task(4, "Ship", TaskColumn.DONE, "publish", TaskPriority.HIGH))
    form.title = " Ship it "
    form.priority = TaskPriority.LOW
    assert form.changes() == {"title": "Ship it", "priority": "low"}


def test_changes_keep_unrecognized_column_untouched():
    form = TaskForm()
    form.load(make_task(7, "Legacy", column=None))
    form.description = "migrated"
    assert form.changes() == {"description": "migrated"}


def test_clean_patch_trims_and_converts():
    cleaned = clean_patch({"title": "  Docs ", "description": " x ", "column": TaskColumn.REVIEW})
    assert cleaned == {"title": "Docs", "description": "x", "column": "review"}


@pytest.mark.parametrize("partial, message", [
    ({"priority": "urgent"}, "Invalid priority"),
    ({"column": "icebox"}, "Invalid column"),
    ({"id": 3}, "not editable"),
    ({"title": "  "}, "title is required"),
])
def test_clean_patch_rejects(partial, message):
    with pytest.raises(ValidationRejected, match=message):
        clean_patch(partial)
