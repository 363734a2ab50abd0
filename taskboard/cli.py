#!/usr/bin/env python3
"""
taskboard CLI
-------------
Drives the board coordinator against a running task API.

Usage:
    taskboard board [--search Q]
    taskboard add "Write docs" --column in_progress --priority high
    taskboard edit 3 --title "Write better docs"
    taskboard move 3 review        # drop onto a column
    taskboard move 3 7             # drop onto task 7 (takes its column)
    taskboard delete 3 --yes
    taskboard theme --toggle

API base URL: --api-url, TASKBOARD_API_URL or api_url in taskboard.yaml
(default http://localhost:4000).
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .board import KanbanBoard
from .cache import TaskCache
from .client import TaskApiClient
from .config import Config
from .errors import ConfigError, RequestFailed, ValidationRejected
from .schema import Task, TaskColumn, TaskPriority
from .theme import ThemePreference

logger = logging.getLogger("taskboard")

PRIORITY_MARK = {
    TaskPriority.HIGH: "!!!",
    TaskPriority.MEDIUM: "!! ",
    TaskPriority.LOW: "!  ",
}


def format_task(task: Task) -> str:
    line = f"  {PRIORITY_MARK[task.priority]} #{task.id} {task.title}"
    if task.description:
        line += f" - {task.description[:60]}"
    return line


def format_board(board: KanbanBoard) -> str:
    lines = []
    if board.search_query.strip():
        lines.append(f'Search: "{board.search_query.strip()}"')
    for column in TaskColumn:
        window = board.windows[column]
        lines.append(f"{column.label} ({window.total})")
        shown = window.displayed_tasks
        if not shown:
            lines.append("  (empty)")
        lines.extend(format_task(t) for t in shown)
        if window.has_more:
            lines.append(f"  … {window.total - window.display_count} more")
    unplaced = board.unplaced_tasks()
    if unplaced:
        lines.append(f"Not on board ({len(unplaced)}): no recognized column")
        lines.extend(format_task(t) for t in unplaced)
    return "\n".join(lines)


# ── Commands ──────────────────────────────────────────────────────────────


async def cmd_board(board: KanbanBoard, args) -> int:
    await board.refresh()
    board.set_search(args.search or "")
    if args.all:
        for window in board.windows.values():
            while window.has_more:
                window.load_more()
    print(format_board(board))
    return 0


async def cmd_add(board: KanbanBoard, args) -> int:
    board.request_create(TaskColumn(args.column))
    board.form.title = args.title
    board.form.description = args.description or ""
    board.form.priority = TaskPriority(args.priority)
    task = await board.save_from_dialog()
    if task is None:
        return 1
    print(f"Created #{task.id} in {task.column.label if task.column else '?'}")
    return 0


async def cmd_edit(board: KanbanBoard, args) -> int:
    await board.refresh()
    task = board.find_task(args.id)
    if task is None:
        print(f"No task #{args.id}", file=sys.stderr)
        return 1
    board.request_edit(task)
    if args.title is not None:
        board.form.title = args.title
    if args.description is not None:
        board.form.description = args.description
    if args.priority is not None:
        board.form.priority = TaskPriority(args.priority)
    updated = await board.save_from_dialog()
    if updated is None:
        return 1
    print(f"Updated #{updated.id}")
    return 0


async def cmd_move(board: KanbanBoard, args) -> int:
    await board.refresh()
    if board.find_task(args.id) is None:
        print(f"No task #{args.id}", file=sys.stderr)
        return 1
    board.start_drag(args.id)
    moved = await board.end_drag(args.id, args.target)
    if moved is None:
        print("Nothing to move")
        return 0
    print(f"Moved #{moved.id} to {moved.column.label if moved.column else '?'}")
    return 0


async def cmd_delete(board: KanbanBoard, args) -> int:
    await board.refresh()
    if not board.request_delete(args.id):
        print(f"No task #{args.id}", file=sys.stderr)
        return 1
    if not args.yes:
        answer = input(f'Delete "{board.task_to_delete.title}"? [y/N] ')
        if answer.strip().lower() not in ("y", "yes"):
            board.cancel_delete()
            print("Cancelled")
            return 0
    if not await board.confirm_delete():
        return 1
    print(f"Deleted #{args.id}")
    return 0


async def run(cfg: Config, args) -> int:
    client = TaskApiClient(cfg.api_url, timeout=cfg.request_timeout)
    cache = TaskCache(
        client,
        stale_time=cfg.stale_time_secs,
        gc_time=cfg.gc_time_secs,
        retry=cfg.retry,
        retry_delay=cfg.retry_delay_secs,
    )
    board = KanbanBoard(cache, page_size=args.page_size or cfg.page_size,
                        scroll_threshold=cfg.scroll_threshold)
    board.subscribe("mutation_failed", lambda error: print(f"⚠️ {error}", file=sys.stderr))
    try:
        return await args.handler(board, args)
    finally:
        await cache.close()
        client.close()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="taskboard", description="Kanban task board client")
    ap.add_argument("--config", default=None, help="Path to taskboard.yaml")
    ap.add_argument("--api-url", default=None, help="Task API base URL (e.g. http://localhost:4000)")
    ap.add_argument("--page-size", type=int, default=None, help="Tasks shown per column page")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    columns = [c.value for c in TaskColumn]
    priorities = [p.value for p in TaskPriority]

    p = sub.add_parser("board", help="Show the board")
    p.add_argument("--search", default="", help="Filter by title/description substring")
    p.add_argument("--all", action="store_true", help="Expand every column fully")
    p.set_defaults(handler=cmd_board)

    p = sub.add_parser("add", help="Create a task")
    p.add_argument("title")
    p.add_argument("--description", default="")
    p.add_argument("--column", choices=columns, default=TaskColumn.BACKLOG.value)
    p.add_argument("--priority", choices=priorities, default=TaskPriority.LOW.value)
    p.set_defaults(handler=cmd_add)

    p = sub.add_parser("edit", help="Edit a task's title, description or priority")
    p.add_argument("id", type=int)
    p.add_argument("--title", default=None)
    p.add_argument("--description", default=None)
    p.add_argument("--priority", choices=priorities, default=None)
    p.set_defaults(handler=cmd_edit)

    p = sub.add_parser("move", help="Move a task as if dragged onto a column or another task")
    p.add_argument("id", type=int)
    p.add_argument("target", help="Column id or task id")
    p.set_defaults(handler=cmd_move)

    p = sub.add_parser("delete", help="Delete a task")
    p.add_argument("id", type=int)
    p.add_argument("--yes", action="store_true", help="Skip confirmation")
    p.set_defaults(handler=cmd_delete)

    p = sub.add_parser("theme", help="Show or toggle the light/dark preference")
    p.add_argument("--toggle", action="store_true")
    p.set_defaults(handler=None)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        cfg = Config.load(args.config)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    if args.api_url:
        cfg.api_url = args.api_url

    if args.command == "theme":
        pref = ThemePreference(cfg.theme_path)
        pref.load()
        mode = pref.toggle() if args.toggle else pref.mode
        print(f"Theme: {mode}")
        return 0

    try:
        return asyncio.run(run(cfg, args))
    except ValidationRejected as e:
        print(f"⚠️ {e}", file=sys.stderr)
        return 2
    except RequestFailed as e:
        logger.error(f"Task API unavailable at {cfg.api_url}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
