"""Shared test fixtures for the taskboard tests."""

import sys
from pathlib import Path

import pytest

# Make the fake API and helper modules importable
sys.path.insert(0, str(Path(__file__).parent))

from fake_api import BASE_URL, FlaskSession, create_app  # noqa: E402
from helpers import FakeClock, StubClient, make_task  # noqa: E402

from taskboard.client import TaskApiClient  # noqa: E402
from taskboard.schema import TaskColumn, TaskPriority  # noqa: E402


SEED_TASKS = [
    {"id": 1, "title": "Write API docs", "description": "Document the endpoints",
     "column": "backlog", "priority": "high"},
    {"id": 2, "title": "Fix login bug", "description": "Users cannot sign in",
     "column": "in_progress", "priority": "medium"},
    {"id": 3, "title": "Review PR", "description": "", "column": "review"},
    {"id": 4, "title": "Ship release", "description": "Tag and publish",
     "column": "done", "priority": "low"},
]


@pytest.fixture
def api_app():
    return create_app(SEED_TASKS)


@pytest.fixture
def api_client(api_app):
    return TaskApiClient(BASE_URL, session=FlaskSession(api_app))


@pytest.fixture
def stub_client():
    return StubClient([
        make_task(1, "Write API docs", TaskColumn.BACKLOG, "Document the endpoints", TaskPriority.HIGH),
        make_task(2, "Fix login bug", TaskColumn.IN_PROGRESS, "Users cannot sign in"),
        make_task(3, "Review PR", TaskColumn.REVIEW),
        make_task(4, "Ship release", TaskColumn.DONE, "Tag and publish"),
    ])


@pytest.fixture
def clock():
    return FakeClock()
