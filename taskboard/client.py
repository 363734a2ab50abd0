"""
REST client for the external task API.

    GET    /tasks        → [Task]
    GET    /tasks/{id}   → Task
    POST   /tasks        → Task (API assigns id)
    PATCH  /tasks/{id}   → Task
    DELETE /tasks/{id}   → empty body

Requests are made with a requests.Session on a worker thread so callers on
the event loop are never blocked. Every failure surfaces as RequestFailed
carrying the operation name. Retrying is the cache layer's concern.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from .errors import RequestFailed
from .schema import Task, TaskInput, normalize_patch

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:4000"


class TaskApiClient:
    """Async facade over the task API."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()

    def _url(self, task_id: Optional[int] = None) -> str:
        if task_id is None:
            return f"{self.base_url}/tasks"
        return f"{self.base_url}/tasks/{task_id}"

    def _request(
        self,
        operation: str,
        method: str,
        url: str,
        body: Optional[Dict[str, Any]] = None,
        expect_body: bool = True,
    ) -> Any:
        """Blocking request; runs on a worker thread."""
        logger.debug(f"{operation}: {method} {url}")
        try:
            r = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise RequestFailed(operation, reason=str(e)) from e

        if not r.ok:
            raise RequestFailed(operation, status=r.status_code, reason=r.reason or "")

        if not expect_body:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise RequestFailed(operation, status=r.status_code, reason="invalid JSON body") from e

    async def _call(self, *args, **kwargs) -> Any:
        return await asyncio.to_thread(self._request, *args, **kwargs)

    @staticmethod
    def _to_task(operation: str, data: Any) -> Task:
        if not isinstance(data, dict):
            raise RequestFailed(operation, reason="expected a task object")
        try:
            return Task.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise RequestFailed(operation, reason=f"malformed task: {e}") from e

    # ── CRUD ──────────────────────────────────────────────────────────────

    async def list_tasks(self) -> List[Task]:
        data = await self._call("list_tasks", "GET", self._url())
        if not isinstance(data, list):
            raise RequestFailed("list_tasks", reason="expected a list of tasks")
        return [self._to_task("list_tasks", item) for item in data]

    async def get_task(self, task_id: int) -> Task:
        data = await self._call("get_task", "GET", self._url(task_id))
        return self._to_task("get_task", data)

    async def create_task(self, task: TaskInput) -> Task:
        data = await self._call("create_task", "POST", self._url(), body=task.to_dict())
        return self._to_task("create_task", data)

    async def update_task(self, task_id: int, partial: Dict[str, Any]) -> Task:
        body = normalize_patch(partial)
        data = await self._call("update_task", "PATCH", self._url(task_id), body=body)
        return self._to_task("update_task", data)

    async def delete_task(self, task_id: int) -> None:
        await self._call("delete_task", "DELETE", self._url(task_id), expect_body=False)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
