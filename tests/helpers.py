"""Test doubles and helpers shared across the taskboard tests."""

import asyncio

from taskboard.errors import RequestFailed
from taskboard.schema import Task, TaskColumn, TaskPriority


def make_task(task_id, title="Task", column=TaskColumn.BACKLOG, description="",
              priority=TaskPriority.LOW) -> Task:
    return Task(id=task_id, title=title, description=description, column=column, priority=priority)


class StubClient:
    """
    Scriptable TaskApiClient replacement.

    ``tasks`` is the server-side list returned by list_tasks. ``fail`` maps an
    operation name to how many upcoming calls of it should raise RequestFailed.
    Optional ``gates`` hold list_tasks calls until the test releases them.
    """

    def __init__(self, tasks=None):
        self.tasks = list(tasks or [])
        self.fail = {}
        self.calls = []
        self.gates = []
        self._next_id = max((t.id for t in self.tasks), default=0) + 1

    def _maybe_fail(self, operation):
        self.calls.append(operation)
        if self.fail.get(operation, 0) > 0:
            self.fail[operation] -= 1
            raise RequestFailed(operation, status=500)

    async def list_tasks(self):
        self._maybe_fail("list_tasks")
        snapshot = [Task(**t.__dict__) for t in self.tasks]
        if self.gates:
            gate = self.gates.pop(0)
            await gate.wait()
        return snapshot

    async def get_task(self, task_id):
        self._maybe_fail("get_task")
        for t in self.tasks:
            if t.id == task_id:
                return t
        raise RequestFailed("get_task", status=404)

    async def create_task(self, task_input):
        self._maybe_fail("create_task")
        task = Task(id=self._next_id, title=task_input.title, description=task_input.description,
                    column=task_input.column, priority=task_input.priority)
        self._next_id += 1
        self.tasks.append(task)
        return Task(**task.__dict__)

    async def update_task(self, task_id, partial):
        self._maybe_fail("update_task")
        for i, t in enumerate(self.tasks):
            if t.id == task_id:
                fields = dict(t.__dict__)
                for key, value in partial.items():
                    if key == "column":
                        value = TaskColumn.from_str(value)
                    elif key == "priority":
                        value = TaskPriority.from_str(value)
                    fields[key] = value
                self.tasks[i] = Task(**fields)
                return Task(**fields)
        raise RequestFailed("update_task", status=404)

    async def delete_task(self, task_id):
        self._maybe_fail("delete_task")
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        if len(self.tasks) == before:
            raise RequestFailed("delete_task", status=404)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, secs):
        self.now += secs


def run(coro):
    """Drive a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)
