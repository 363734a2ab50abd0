"""
Board state coordinator.

Owns the UI-facing state of the board: search query, create/edit dialog,
delete confirmation, the card being dragged and one pagination window per
column. Task data itself lives in the TaskCache; everything shown here is
derived from it on demand, and the windows re-sync whenever the cache
changes, including background refetches.

This is the UI boundary: mutation failures are caught, logged and emitted to
subscribers ("mutation_failed") instead of propagating.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Set, Union

from .cache import TaskCache
from .dnd import parse_drop_target, plan_move
from .errors import RequestFailed
from .form import TaskForm, check_title, clean_patch
from .pagination import ColumnWindow, DEFAULT_PAGE_SIZE, SCROLL_THRESHOLD
from .schema import Task, TaskColumn, TaskInput

logger = logging.getLogger(__name__)


class KanbanBoard:
    """Derived board state plus the intents the UI can issue."""

    def __init__(
        self,
        cache: TaskCache,
        page_size: int = DEFAULT_PAGE_SIZE,
        scroll_threshold: float = SCROLL_THRESHOLD,
    ):
        self.cache = cache
        self.search_query = ""

        self.dialog_open = False
        self.selected_task: Optional[Task] = None
        self.form = TaskForm()

        self.delete_dialog_open = False
        self.task_to_delete: Optional[Task] = None

        self.active_task: Optional[Task] = None

        self.windows: Dict[TaskColumn, ColumnWindow] = {
            column: ColumnWindow(page_size, scroll_threshold) for column in TaskColumn
        }
        self.subscribers: Dict[str, list] = {}  # event_type -> list of callbacks
        self._reported_unplaced: Set[int] = set()
        cache.add_listener(self._sync_windows)

    # ── Events ────────────────────────────────────────────────────────────

    def subscribe(self, event_type: str, callback: Callable) -> None:
        """Register a callback for an event type."""
        self.subscribers.setdefault(event_type, []).append(callback)

    def _emit(self, event_type: str, **kwargs) -> None:
        for callback in self.subscribers.get(event_type, []):
            try:
                callback(**kwargs)
            except Exception as e:
                logger.error(f"Error in {event_type} callback: {e}")

    # ── Derived state ─────────────────────────────────────────────────────

    @property
    def tasks(self) -> List[Task]:
        """Full, unfiltered task list as currently cached."""
        return self.cache.peek()

    @property
    def is_loading(self) -> bool:
        return self.cache.is_loading

    def find_task(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def filtered_tasks(self) -> List[Task]:
        if not self.search_query.strip():
            return self.tasks
        return [t for t in self.tasks if t.matches(self.search_query)]

    def tasks_by_column(self) -> Dict[TaskColumn, List[Task]]:
        # forget ids that were deleted or have since been placed
        self._reported_unplaced &= {t.id for t in self.tasks if t.column is None}
        grouped: Dict[TaskColumn, List[Task]] = {column: [] for column in TaskColumn}
        for task in self.filtered_tasks():
            if task.column in grouped:
                grouped[task.column].append(task)
            elif task.id not in self._reported_unplaced:
                self._reported_unplaced.add(task.id)
                logger.warning(f"Task {task.id} ({task.title!r}) has no column and is not shown")
        return grouped

    def unplaced_tasks(self) -> List[Task]:
        """Tasks that match the search but belong to no known column."""
        return [t for t in self.filtered_tasks() if t.column is None]

    def column_view(self, column: TaskColumn) -> List[Task]:
        """Tasks of a column currently inside its pagination window."""
        return self.windows[column].displayed_tasks

    def _sync_windows(self) -> None:
        """Re-cut every column window from the current cache contents."""
        for column, tasks in self.tasks_by_column().items():
            self.windows[column].sync(tasks)

    async def refresh(self) -> List[Task]:
        """Load tasks through the cache and re-sync the column windows."""
        tasks = await self.cache.get_tasks()
        self._sync_windows()
        return tasks

    def set_search(self, query: str) -> None:
        self.search_query = query
        self._sync_windows()

    # ── Drag and drop ─────────────────────────────────────────────────────

    def start_drag(self, task_id: int) -> None:
        self.active_task = self.find_task(task_id)

    async def end_drag(self, source_id: int, drop_target: Any) -> Optional[Task]:
        """
        Finish a drag. Issues a single column update when the drop lands in a
        different column; anything else is a no-op.
        """
        self.active_task = None

        source = self.find_task(source_id)
        if source is None:
            return None

        destination = plan_move(source, parse_drop_target(drop_target), self.tasks)
        if destination is None:
            return None

        logger.debug(f"Moving task {source.id}: {source.column} → {destination.value}")
        return await self._update(source.id, {"column": destination})

    # ── Create / edit dialog ──────────────────────────────────────────────

    def request_create(self, column: Optional[TaskColumn] = None) -> None:
        self.selected_task = None
        self.form.reset(column)
        self.dialog_open = True

    def request_edit(self, task: Task) -> None:
        self.selected_task = task
        self.form.load(task)
        self.dialog_open = True

    def close_dialog(self) -> None:
        self.dialog_open = False

    async def save_from_dialog(self, data: Union[TaskInput, Dict[str, Any], None] = None) -> Optional[Task]:
        """
        Submit the dialog. Input is checked before anything is sent: a blank
        title, unknown field or invalid column/priority raises
        ValidationRejected and the dialog stays open. Otherwise the dialog
        closes whatever the outcome of the mutation.

        In edit mode the form or a TaskInput sends only the fields that differ
        from the selected task, and an edit with no changes sends nothing. A
        dict is sent as given once it has been trimmed and validated.
        """
        selected = self.selected_task
        if selected is not None:
            partial = self._edit_patch(selected, data)
            self.dialog_open = False
            if not partial:
                logger.debug(f"No changes to task {selected.id}")
                return selected
            return await self._update(selected.id, partial)

        task_input = self._create_input(data)
        self.dialog_open = False
        return await self._create(task_input)

    def _create_input(self, data: Union[TaskInput, Dict[str, Any], None]) -> TaskInput:
        if data is None:
            return self.form.submit()
        if isinstance(data, TaskInput):
            check_title(data.title)
            return data
        check_title(data.get("title"))
        return TaskInput.from_dict(data)

    def _edit_patch(self, selected: Task, data: Union[TaskInput, Dict[str, Any], None]) -> Dict[str, Any]:
        if data is None:
            return self.form.changes()
        if isinstance(data, TaskInput):
            check_title(data.title)
            current = selected.to_dict()
            return {k: v for k, v in data.to_dict().items() if current.get(k) != v}
        return clean_patch(data)

    # ── Delete confirmation ───────────────────────────────────────────────

    def request_delete(self, task_id: int) -> bool:
        """Arm the delete confirmation; False if the task is unknown."""
        task = self.find_task(task_id)
        if task is None:
            return False
        self.task_to_delete = task
        self.delete_dialog_open = True
        return True

    def cancel_delete(self) -> None:
        self.delete_dialog_open = False
        self.task_to_delete = None

    async def confirm_delete(self) -> bool:
        task = self.task_to_delete
        self.delete_dialog_open = False
        self.task_to_delete = None
        if task is None:
            return False
        return await self._delete(task.id)

    # ── Mutations (UI boundary) ───────────────────────────────────────────

    async def _create(self, data: TaskInput) -> Optional[Task]:
        try:
            task = await self.cache.create(data)
        except RequestFailed as e:
            self._failed(e)
            return None
        self._sync_windows()
        self._emit("task_created", task=task)
        return task

    async def _update(self, task_id: int, partial: Dict[str, Any]) -> Optional[Task]:
        try:
            task = await self.cache.update(task_id, partial)
        except RequestFailed as e:
            self._failed(e)
            return None
        self._sync_windows()
        self._emit("task_updated", task=task)
        return task

    async def _delete(self, task_id: int) -> bool:
        try:
            await self.cache.delete(task_id)
        except RequestFailed as e:
            self._failed(e)
            return False
        self._sync_windows()
        self._emit("task_deleted", task_id=task_id)
        return True

    def _failed(self, error: RequestFailed) -> None:
        logger.error(f"Task mutation failed: {error}")
        self._emit("mutation_failed", error=error)
