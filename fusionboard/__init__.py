# Fusion Board: single-user kanban with optimistic drag-and-drop
#
# Components:
#   schema.py     - Data model (Task, Status, Context, ViewType, BoardSnapshot)
#   seed.py       - Initial board and card colour palette
#   store.py      - SQLite persistence layer
#   gateway.py    - Fire-and-forget mutations + invalidation events
#   optimistic.py - Confirmed vs displayed task lists
#   reorder.py    - Drag-and-drop move engine (pure)
#   projection.py - Per-column grouping (pure)
#   board.py      - Board session: view, drag state machine, CRUD callbacks
#   config.py     - YAML / environment configuration
#   server.py     - Flask JSON API
