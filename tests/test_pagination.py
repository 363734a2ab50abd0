"""Tests for per-column pagination windows."""
import pytest

from helpers import make_task

from taskboard.pagination import ColumnWindow


def tasks(n):
    return [make_task(i, f"t{i}") for i in range(1, n + 1)]


class TestColumnWindow:

    def test_twelve_tasks_page_of_five(self):
        window = ColumnWindow(page_size=5)
        window.sync(tasks(12))
        assert len(window.displayed_tasks) == 5
        assert window.has_more

        window.load_more()
        assert len(window.displayed_tasks) == 10
        assert window.has_more

        window.load_more()
        assert len(window.displayed_tasks) == 12
        assert not window.has_more

    def test_load_more_idempotent_at_end(self):
        window = ColumnWindow(page_size=5)
        window.sync(tasks(7))
        window.load_more()
        assert window.display_count == 7
        window.load_more()
        assert window.display_count == 7

    def test_load_more_noop_on_small_column(self):
        window = ColumnWindow(page_size=5)
        window.sync(tasks(3))
        window.load_more()
        assert window.display_count == 5
        assert len(window.displayed_tasks) == 3

    def test_resets_when_column_shrinks(self):
        window = ColumnWindow(page_size=5)
        window.sync(tasks(12))
        window.load_more()
        window.load_more()
        window.sync(tasks(4))
        assert window.display_count == 5

    def test_keeps_expansion_while_still_large(self):
        window = ColumnWindow(page_size=5)
        window.sync(tasks(12))
        window.load_more()
        window.sync(tasks(11))
        assert window.display_count == 10

    def test_scroll_near_bottom_loads(self):
        window = ColumnWindow(page_size=5)
        window.sync(tasks(12))
        assert window.on_scroll(scroll_height=1000, scroll_top=650, client_height=300)
        assert window.display_count == 10

    def test_scroll_far_from_bottom_does_nothing(self):
        window = ColumnWindow(page_size=5)
        window.sync(tasks(12))
        assert not window.on_scroll(scroll_height=1000, scroll_top=100, client_height=300)
        assert window.display_count == 5

    def test_scroll_without_more_does_nothing(self):
        window = ColumnWindow(page_size=5)
        window.sync(tasks(5))
        assert not window.on_scroll(scroll_height=300, scroll_top=0, client_height=300)

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError):
            ColumnWindow(page_size=0)
