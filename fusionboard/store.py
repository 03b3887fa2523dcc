"""
Board storage backend (SQLite).

Sole source of truth for statuses, contexts and tasks. Every call opens its
own connection, so the store can be used from the gateway's worker thread.
Errors are not swallowed here: foreign-key violations surface as
sqlite3.IntegrityError and store-detected problems as StoreError.
"""
import sqlite3
import json
import logging
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .schema import BoardSnapshot, Context, Status, Task, ViewType
from .seed import INITIAL_CONTEXTS, INITIAL_STATUSES, INITIAL_TASKS

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".local" / "share" / "fusionboard" / "board.db"


class StoreError(Exception):
    """Raised when a store operation cannot be applied."""
    pass


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection with FK enforcement and WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


@contextmanager
def _transaction(db_path: str) -> Iterator[sqlite3.Connection]:
    """One connection, one transaction: commit on success, rollback on error."""
    conn = _connect(db_path)
    try:
        with conn:
            yield conn
    finally:
        conn.close()


def _task_params(task: Task) -> tuple:
    return (task.title, task.status, task.context, json.dumps(list(task.tags)), task.color)


class BoardStore:
    """SQLite-backed store for the board."""

    def __init__(self, db_path: Optional[str] = None, seed: bool = True):
        """Initialize store, create tables and optionally seed a fresh DB."""
        if db_path is None:
            db_path = str(DEFAULT_DB_PATH)
        self.db_path = str(Path(db_path).expanduser())
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()
        if seed:
            self.seed()

    def _init_schema(self):
        """Create tables if they don't exist."""
        with _transaction(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS statuses (
                    id TEXT PRIMARY KEY,
                    title TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS contexts (
                    id TEXT PRIMARY KEY,
                    title TEXT,
                    color TEXT
                )
            """)
            # tags stored as a JSON list; "order" is one global sequence
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT,
                    status TEXT,
                    context TEXT,
                    tags TEXT,
                    color TEXT,
                    "order" INTEGER DEFAULT 0,
                    FOREIGN KEY (status) REFERENCES statuses(id),
                    FOREIGN KEY (context) REFERENCES contexts(id)
                )
            """)
            conn.execute('CREATE INDEX IF NOT EXISTS idx_tasks_order ON tasks("order")')

    def seed(self) -> bool:
        """Insert the initial board when the DB has never been populated.

        Returns True if anything was inserted.
        """
        with _transaction(self.db_path) as conn:
            count = conn.execute("SELECT COUNT(*) FROM statuses").fetchone()[0]
            if count:
                return False
            conn.executemany(
                "INSERT INTO statuses (id, title) VALUES (?, ?)",
                [(s.id, s.title) for s in INITIAL_STATUSES],
            )
            conn.executemany(
                "INSERT INTO contexts (id, title, color) VALUES (?, ?, ?)",
                [(c.id, c.title, c.color) for c in INITIAL_CONTEXTS],
            )
            conn.executemany(
                'INSERT INTO tasks (title, status, context, tags, color, "order", id) VALUES (?, ?, ?, ?, ?, ?, ?)',
                [_task_params(t) + (index, t.id) for index, t in enumerate(INITIAL_TASKS)],
            )
        logger.info(f"Seeded initial board into {self.db_path}")
        return True

    # ──────────────────────────────────────────
    # Reads
    # ──────────────────────────────────────────

    def fetch_all(self) -> BoardSnapshot:
        """Fetch statuses, contexts and tasks (by order) in one go."""
        conn = _connect(self.db_path)
        try:
            statuses = conn.execute("SELECT * FROM statuses ORDER BY rowid").fetchall()
            contexts = conn.execute("SELECT * FROM contexts ORDER BY rowid").fetchall()
            tasks = conn.execute('SELECT * FROM tasks ORDER BY "order" ASC, rowid ASC').fetchall()
        finally:
            conn.close()
        return BoardSnapshot(
            statuses=tuple(Status.from_dict(dict(r)) for r in statuses),
            contexts=tuple(Context.from_dict(dict(r)) for r in contexts),
            tasks=tuple(Task.from_dict(dict(r)) for r in tasks),
        )

    def get_task(self, task_id: str) -> Optional[Task]:
        """Retrieve a task by ID."""
        conn = _connect(self.db_path)
        try:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        finally:
            conn.close()
        return Task.from_dict(dict(row)) if row else None

    # ──────────────────────────────────────────
    # Task mutations
    # ──────────────────────────────────────────

    def create_task(self, task: Task) -> Task:
        """Insert a task at the end of the board (order = max + 1)."""
        with _transaction(self.db_path) as conn:
            max_order = conn.execute('SELECT MAX("order") FROM tasks').fetchone()[0]
            new_order = (max_order or 0) + 1
            conn.execute(
                'INSERT INTO tasks (title, status, context, tags, color, "order", id) VALUES (?, ?, ?, ?, ?, ?, ?)',
                _task_params(task) + (new_order, task.id),
            )
        logger.debug(f"Created task {task.id} at order {new_order}")
        return replace(task, order=new_order)

    def update_task(self, task: Task) -> Task:
        """Overwrite every field except id and order."""
        with _transaction(self.db_path) as conn:
            cur = conn.execute(
                "UPDATE tasks SET title = ?, status = ?, context = ?, tags = ?, color = ? WHERE id = ?",
                _task_params(task) + (task.id,),
            )
            if cur.rowcount == 0:
                raise StoreError(f"Task {task.id} not found")
            order = conn.execute('SELECT "order" FROM tasks WHERE id = ?', (task.id,)).fetchone()[0]
        logger.debug(f"Updated task {task.id}")
        return replace(task, order=order)

    def delete_task(self, task_id: str) -> None:
        """Hard delete; deleting a missing task is not an error."""
        with _transaction(self.db_path) as conn:
            conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        logger.debug(f"Deleted task {task_id}")

    def reorder_batch(self, tasks: Iterable[Task]) -> None:
        """Write order = position for every task, atomically."""
        with _transaction(self.db_path) as conn:
            conn.executemany(
                'UPDATE tasks SET "order" = ? WHERE id = ?',
                [(index, t.id) for index, t in enumerate(tasks)],
            )

    def save_move(self, tasks: Iterable[Task]) -> None:
        """Persist a finished drag: field upsert plus dense reorder, one transaction.

        Tasks not yet in the DB (e.g. optimistic placeholders) match no row
        and are skipped.
        """
        ordered: List[Task] = list(tasks)
        with _transaction(self.db_path) as conn:
            conn.executemany(
                'UPDATE tasks SET title = ?, status = ?, context = ?, tags = ?, color = ?, "order" = ? WHERE id = ?',
                [_task_params(t) + (index, t.id) for index, t in enumerate(ordered)],
            )
        logger.debug(f"Persisted move over {len(ordered)} tasks")

    # ──────────────────────────────────────────
    # Column mutations
    # ──────────────────────────────────────────

    def create_context(self, context: Context) -> Context:
        """Add a user-defined list."""
        with _transaction(self.db_path) as conn:
            conn.execute(
                "INSERT INTO contexts (id, title, color) VALUES (?, ?, ?)",
                (context.id, context.title, context.color),
            )
        logger.debug(f"Created context {context.id}")
        return context

    def update_column_title(self, column_id: str, title: str, kind: Union[ViewType, str]) -> None:
        """Rename a status lane or a context list."""
        try:
            view = kind if isinstance(kind, ViewType) else ViewType.from_str(kind)
        except ValueError as e:
            raise StoreError(str(e)) from e
        table = "statuses" if view is ViewType.STATUS else "contexts"
        with _transaction(self.db_path) as conn:
            conn.execute(f"UPDATE {table} SET title = ? WHERE id = ?", (title, column_id))
        logger.debug(f"Renamed {view.value} column {column_id} to {title!r}")
