"""
Initial board content, inserted the first time the store opens an empty DB.
"""
from .schema import Status, Context, Task


INITIAL_STATUSES = (
    Status(id="todo", title="To Do"),
    Status(id="doing", title="In Progress"),
    Status(id="done", title="Done"),
)

INITIAL_CONTEXTS = (
    Context(id="c1", title="Urgent", color="#ff5252"),      # Red
    Context(id="c2", title="Deep Work", color="#448aff"),   # Blue
    Context(id="c3", title="Routine", color="#69f0ae"),     # Green
)

INITIAL_TASKS = (
    Task(id="t1", title="Fix Login Bug", status="doing", context="c1", tags=("Bug",), color="#fff0f0"),
    Task(id="t2", title="Write Documentation", status="todo", context="c2", tags=("Docs",), color="#ffffff"),
    Task(id="t3", title="Weekly Review", status="done", context="c3", tags=("Admin",), color="#f0f8ff"),
    Task(id="t4", title="Buy Groceries", status="todo", context="c3", tags=("Personal",), color="#fffff0"),
    Task(id="t5", title="Design System Update", status="todo", context="c2", tags=("Design",), color="#e6e6fa"),
)

# Palette offered by the card editor
CARD_COLORS = (
    {"hex": "#ffffff", "name": "Default"},
    {"hex": "#fff0f0", "name": "Red"},
    {"hex": "#fffacd", "name": "Yellow"},
    {"hex": "#e0ffff", "name": "Cyan"},
    {"hex": "#f0fff0", "name": "Green"},
    {"hex": "#e6e6fa", "name": "Purple"},
)

DEFAULT_STATUS = "todo"
DEFAULT_CONTEXT = "c1"
DEFAULT_TASK_TITLE = "New Task"
DEFAULT_TASK_COLOR = "#ffffff"
DEFAULT_CONTEXT_TITLE = "New List"
