"""Per-column "load more" / infinite-scroll windowing."""
from typing import List, Sequence

from .schema import Task

DEFAULT_PAGE_SIZE = 5
SCROLL_THRESHOLD = 100


class ColumnWindow:
    """How many of a column's tasks are shown at once."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE, scroll_threshold: float = SCROLL_THRESHOLD):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size
        self.scroll_threshold = scroll_threshold
        self.display_count = page_size
        self._tasks: List[Task] = []

    def sync(self, tasks: Sequence[Task]) -> None:
        """Replace the column's tasks; shrink back to one page when they fit."""
        self._tasks = list(tasks)
        if len(self._tasks) <= self.page_size:
            self.display_count = self.page_size

    @property
    def total(self) -> int:
        return len(self._tasks)

    @property
    def displayed_tasks(self) -> List[Task]:
        return self._tasks[:self.display_count]

    @property
    def has_more(self) -> bool:
        return self.total > self.display_count

    def load_more(self) -> None:
        if self.display_count >= self.total:
            return
        self.display_count = min(self.display_count + self.page_size, self.total)

    def on_scroll(self, scroll_height: float, scroll_top: float, client_height: float) -> bool:
        """Load the next page when the viewport is near the bottom. Returns True if it did."""
        remaining = scroll_height - scroll_top - client_height
        if remaining < self.scroll_threshold and self.has_more:
            self.load_more()
            return True
        return False
