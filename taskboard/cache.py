"""
Session-scoped task cache with optimistic updates.

One TaskCache instance holds the board's task list for the lifetime of a
session. It is created at start-up and closed at shutdown; consumers get it
passed in rather than reaching for a global.

Freshness:
  age <= stale_time             → served as is
  stale_time < age <= +gc_time  → served immediately, refreshed in background
  older / never loaded          → caller waits for a fetch

Mutations go through the API first. Only after the API confirms is the local
list patched (append / replace / remove), and then a refetch reconciles it
with server state.

Reconciliation ordering: every applied mutation bumps a sequence number and
stamps the task id with it. Each fetch remembers the sequence number it was
issued at. A fetch that completes after a later-issued fetch was applied is
dropped, and for task ids mutated after a fetch was issued the local entry
wins over the fetched one.
"""
import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from .client import TaskApiClient
from .errors import RequestFailed
from .schema import Task, TaskInput

logger = logging.getLogger(__name__)

STALE_TIME_SECS = 5 * 60
GC_TIME_SECS = 10 * 60


class TaskCache:
    """Shared, optimistic view of the remote task list."""

    def __init__(
        self,
        client: TaskApiClient,
        stale_time: float = STALE_TIME_SECS,
        gc_time: float = GC_TIME_SECS,
        retry: int = 1,
        retry_delay: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.stale_time = stale_time
        self.gc_time = gc_time
        self.retry = retry
        self.retry_delay = retry_delay
        self._clock = clock

        self._tasks: Optional[List[Task]] = None
        self._updated_at: Optional[float] = None
        self._invalidated = False

        self._seq = 0
        self._entity_seq: Dict[int, int] = {}
        self._applied_fetch_seq = -1

        self._inflight: Optional[asyncio.Task] = None
        self._inflight_seq = -1
        self._fetches: Set[asyncio.Task] = set()
        self._closed = False
        self._listeners: List[Callable[[], None]] = []

    # ── State ─────────────────────────────────────────────────────────────

    @property
    def updated_at(self) -> Optional[float]:
        return self._updated_at

    @property
    def is_loading(self) -> bool:
        """True while the first load (nothing cached yet) is in flight."""
        return self._tasks is None and self._inflight is not None and not self._inflight.done()

    @property
    def is_stale(self) -> bool:
        if self._tasks is None or self._updated_at is None or self._invalidated:
            return True
        return self._clock() - self._updated_at > self.stale_time

    def _expired(self) -> bool:
        if self._updated_at is None:
            return False
        return self._clock() - self._updated_at > self.stale_time + self.gc_time

    def peek(self) -> List[Task]:
        """Cached tasks without any I/O; empty if nothing is loaded."""
        return list(self._tasks or [])

    def find(self, task_id: int) -> Optional[Task]:
        for task in self._tasks or []:
            if task.id == task_id:
                return task
        return None

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Call `callback` whenever the cached task list changes."""
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in self._listeners:
            try:
                callback()
            except Exception as e:
                logger.error(f"Error in task cache listener: {e}")

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_tasks(self) -> List[Task]:
        """Return the task list, fetching or refreshing as freshness requires."""
        self._check_open()
        if self._expired():
            logger.debug("Task cache expired, dropping cached data")
            self._tasks = None
            self._updated_at = None

        if self._tasks is None:
            await asyncio.shield(self._ensure_fetch())
            return self.peek()

        if self.is_stale:
            self._ensure_fetch()
        return self.peek()

    async def fetch_task(self, task_id: int) -> Task:
        """Read a single task straight from the API (retried, not cached)."""
        self._check_open()
        return await self._with_retry("get_task", self.client.get_task, task_id)

    async def invalidate(self) -> None:
        """Mark the list stale and wait for a refetch."""
        self._check_open()
        self._invalidated = True
        try:
            await asyncio.shield(self._ensure_fetch())
        except RequestFailed as e:
            logger.warning(f"Reconciliation fetch failed, keeping local tasks: {e}")

    def _ensure_fetch(self) -> asyncio.Task:
        """Start a fetch unless one issued at the current sequence is running."""
        running = self._inflight is not None and not self._inflight.done()
        if running and self._inflight_seq >= self._seq:
            return self._inflight

        issued_seq = self._seq
        fetch = asyncio.create_task(self._run_fetch(issued_seq))
        fetch.add_done_callback(self._fetch_done)
        self._fetches.add(fetch)
        self._inflight = fetch
        self._inflight_seq = issued_seq
        return fetch

    async def _run_fetch(self, issued_seq: int) -> List[Task]:
        tasks = await self._with_retry("list_tasks", self.client.list_tasks)
        self._apply_fetch(tasks, issued_seq)
        return self.peek()

    def _fetch_done(self, fetch: asyncio.Task) -> None:
        self._fetches.discard(fetch)
        if fetch.cancelled():
            return
        exc = fetch.exception()
        if exc is not None:
            logger.error(f"Task list fetch failed: {exc}")

    def _apply_fetch(self, fetched: List[Task], issued_seq: int) -> None:
        if issued_seq < self._applied_fetch_seq:
            logger.debug(
                f"Dropping fetch issued at seq {issued_seq}; seq {self._applied_fetch_seq} already applied"
            )
            return

        # Task ids mutated after this fetch was issued keep their local state
        newer = {tid for tid, seq in self._entity_seq.items() if seq > issued_seq}
        local = {t.id: t for t in self._tasks or []}

        merged: List[Task] = []
        seen = set()
        for task in fetched:
            seen.add(task.id)
            if task.id in newer:
                if task.id in local:
                    merged.append(local[task.id])
                continue
            merged.append(task)
        for task in self._tasks or []:
            if task.id in newer and task.id not in seen:
                merged.append(task)

        self._tasks = merged
        self._updated_at = self._clock()
        self._invalidated = False
        self._applied_fetch_seq = issued_seq
        self._entity_seq = {tid: seq for tid, seq in self._entity_seq.items() if seq > issued_seq}
        logger.debug(f"Applied task list ({len(merged)} tasks) at seq {issued_seq}")
        self._notify()

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create(self, task_input: TaskInput) -> Task:
        self._check_open()
        task = await self._with_retry("create_task", self.client.create_task, task_input)
        self._patch(task.id, lambda tasks: tasks + [task])
        logger.info(f"Created task {task.id}: {task.title}")
        await self.invalidate()
        return task

    async def update(self, task_id: int, partial: Dict[str, Any]) -> Task:
        self._check_open()
        task = await self._with_retry("update_task", self.client.update_task, task_id, partial)
        self._patch(task.id, lambda tasks: [task if t.id == task.id else t for t in tasks])
        logger.info(f"Updated task {task.id}: {sorted(partial)}")
        await self.invalidate()
        return task

    async def delete(self, task_id: int) -> None:
        self._check_open()
        await self._with_retry("delete_task", self.client.delete_task, task_id)
        self._patch(task_id, lambda tasks: [t for t in tasks if t.id != task_id])
        logger.info(f"Deleted task {task_id}")
        await self.invalidate()

    def _patch(self, task_id: int, fn: Callable[[List[Task]], List[Task]]) -> None:
        """Apply a confirmed mutation to the local list and stamp the task id."""
        self._seq += 1
        self._entity_seq[task_id] = self._seq
        self._tasks = fn(list(self._tasks or []))
        self._notify()

    # ── Retry ─────────────────────────────────────────────────────────────

    async def _with_retry(self, operation: str, fn: Callable[..., Awaitable[Any]], *args) -> Any:
        attempt = 0
        while True:
            try:
                return await fn(*args)
            except RequestFailed as e:
                if attempt >= self.retry:
                    raise
                attempt += 1
                logger.warning(
                    f"{operation} failed ({e}); retry {attempt}/{self.retry} in {self.retry_delay}s"
                )
                await asyncio.sleep(self.retry_delay)

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("TaskCache is closed")

    async def close(self) -> None:
        """Cancel background fetches and drop cached data."""
        self._closed = True
        pending = list(self._fetches)
        for fetch in pending:
            fetch.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._fetches.clear()
        self._inflight = None
        self._tasks = None
        self._updated_at = None
        self._entity_seq.clear()

    async def __aenter__(self) -> "TaskCache":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()
