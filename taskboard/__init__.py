# Kanban board client: task API access, optimistic caching, board state
#
# Components:
#   schema.py     - Data model (Task, TaskInput, TaskColumn, TaskPriority)
#   client.py     - REST client for the external task API
#   cache.py      - Session-scoped optimistic task cache
#   board.py      - Board state: search, grouping, dialogs, drag and drop
#   dnd.py        - Drop target parsing and column transition rules
#   pagination.py - Per-column "load more" windows
#   form.py       - Create/edit dialog form state
#   theme.py      - Light/dark preference
#   config.py     - YAML configuration
#   cli.py        - Command-line front end
