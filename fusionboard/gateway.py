"""
Mutation gateway: the boundary between the board session and the store.

Every mutation is queued on a single worker thread and returns a Future at
once, so the interaction thread never waits on SQLite. The store sees
mutations in the order they were issued. When a mutation completes, the
gateway re-reads the board and emits an "invalidated" event carrying the
fresh snapshot; subscribers feed it back into the optimistic controller.

A failed store call is logged and left on its Future. It is not retried, no
invalidation is emitted and nothing is rolled back.
"""
import logging
import random
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Union

from .schema import BoardSnapshot, Context, Task, ViewType
from .seed import (
    DEFAULT_CONTEXT,
    DEFAULT_CONTEXT_TITLE,
    DEFAULT_STATUS,
    DEFAULT_TASK_COLOR,
    DEFAULT_TASK_TITLE,
)
from .store import BoardStore

logger = logging.getLogger(__name__)

INVALIDATED = "invalidated"


def millis() -> int:
    """Current time in ms, used to mint client-side ids."""
    return int(time.time() * 1000)


def new_task(column_id: str, view: ViewType, task_id: str = "") -> Task:
    """Blank task for a column; the other grouping gets its default."""
    is_status = view is ViewType.STATUS
    return Task(
        id=task_id or f"t{millis()}",
        title=DEFAULT_TASK_TITLE,
        status=column_id if is_status else DEFAULT_STATUS,
        context=DEFAULT_CONTEXT if is_status else column_id,
        tags=(),
        color=DEFAULT_TASK_COLOR,
    )


def new_context(context_id: str = "") -> Context:
    """Fresh list with a random colour."""
    return Context(
        id=context_id or f"c{millis()}",
        title=DEFAULT_CONTEXT_TITLE,
        color=f"#{random.randint(0, 0xFFFFFF):06x}",
    )


class MutationGateway:
    """Fire-and-forget store calls plus an invalidation signal."""

    def __init__(self, store: BoardStore):
        """Initialize gateway with a store and its mutation worker."""
        self.store = store
        self.subscribers: Dict[str, list] = {}  # event_type -> list of callbacks
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fusionboard-gw")

    def __enter__(self) -> "MutationGateway":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self, wait: bool = True) -> None:
        """Stop accepting work; by default wait for in-flight calls."""
        self._executor.shutdown(wait=wait)

    # ──────────────────────────────────────────
    # Events
    # ──────────────────────────────────────────

    def subscribe(self, event_type: str, callback: Callable) -> None:
        """Register a callback for an event type."""
        if event_type not in self.subscribers:
            self.subscribers[event_type] = []
        self.subscribers[event_type].append(callback)

    def _emit(self, event_type: str, **kwargs) -> None:
        """Emit an event to all subscribers."""
        for callback in self.subscribers.get(event_type, []):
            try:
                callback(**kwargs)
            except Exception as e:
                logger.error(f"Error in {event_type} callback: {e}")

    def invalidate(self) -> BoardSnapshot:
        """Re-read the board and push it to subscribers."""
        snapshot = self.store.fetch_all()
        self._emit(INVALIDATED, snapshot=snapshot)
        return snapshot

    # ──────────────────────────────────────────
    # Dispatch
    # ──────────────────────────────────────────

    def _submit(self, label: str, fn: Callable, *args) -> Future:
        return self._executor.submit(self._run, label, fn, *args)

    def _run(self, label: str, fn: Callable, *args) -> Any:
        try:
            result = fn(*args)
        except Exception as e:
            logger.error(f"{label} failed: {e}")
            raise
        try:
            self.invalidate()
        except Exception as e:
            # The mutation is committed; only the refresh is lost
            logger.error(f"Refresh after {label} failed: {e}")
        return result

    # ──────────────────────────────────────────
    # Operations
    # ──────────────────────────────────────────

    def fetch_board(self) -> Future:
        """Read the board without emitting anything."""
        return self._executor.submit(self.store.fetch_all)

    def add_task(self, column_id: str, view: ViewType) -> Future:
        """Mint a blank task for a column and persist it. Future → stored Task."""
        return self.create_task(new_task(column_id, view))

    def create_task(self, task: Task) -> Future:
        return self._submit(f"create_task {task.id}", self.store.create_task, task)

    def update_task(self, task: Task) -> Future:
        return self._submit(f"update_task {task.id}", self.store.update_task, task)

    def delete_task(self, task_id: str) -> Future:
        return self._submit(f"delete_task {task_id}", self.store.delete_task, task_id)

    def add_context(self) -> Future:
        """Create a new list. Future → stored Context."""
        return self.create_context(new_context())

    def create_context(self, context: Context) -> Future:
        return self._submit(f"create_context {context.id}", self.store.create_context, context)

    def update_column_title(self, column_id: str, title: str, kind: Union[ViewType, str]) -> Future:
        return self._submit(
            f"update_column_title {column_id}", self.store.update_column_title, column_id, title, kind
        )

    def move_tasks(self, tasks: Iterable[Task]) -> Future:
        """Persist a finished drag: every task's fields plus dense order."""
        ordered: List[Task] = list(tasks)
        return self._submit(f"move_tasks ({len(ordered)})", self.store.save_move, ordered)
