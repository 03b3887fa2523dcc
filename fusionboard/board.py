"""
Board session: what a front end talks to.

Holds the active view, the column lists and the optimistic task list, and
turns user gestures into local edits plus gateway calls. Every edit is shown
immediately; the gateway's "invalidated" snapshot later replaces it.

Drag gestures follow a small state machine:

    Idle ──drag_start──▶ Dragging(active, last_over) ──drag_end──▶ Idle

drag_over applies cross-column moves speculatively; a drag_end on a card or
column always persists the working order, even when only the column changed.
"""
import logging
from concurrent.futures import Future
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from .gateway import INVALIDATED, MutationGateway, millis, new_task
from .optimistic import OptimisticController, TaskList
from .projection import Column, build_columns, group_tasks
from .reorder import (
    TaskTarget,
    ContainerTarget,
    finalize_move,
    index_of,
    move_within_or_across_container,
    resolve_drop_target,
)
from .schema import BoardSnapshot, Context, Status, Task, ViewType
from .seed import DEFAULT_CONTEXT_TITLE

logger = logging.getLogger(__name__)


@dataclass
class DragState:
    """An in-progress drag."""
    active_id: str
    last_over_id: Optional[str] = None   # Hover that last moved the card


class Board:
    """Single-user board session over a MutationGateway."""

    def __init__(
        self,
        gateway: MutationGateway,
        snapshot: BoardSnapshot,
        view: ViewType = ViewType.STATUS,
    ):
        self.gateway = gateway
        self.view = view
        self.statuses: Tuple[Status, ...] = snapshot.statuses
        self.contexts: Tuple[Context, ...] = snapshot.contexts
        self.controller = OptimisticController(snapshot.tasks)
        self.drag: Optional[DragState] = None
        gateway.subscribe(INVALIDATED, self.refresh)

    @classmethod
    def open(cls, gateway: MutationGateway, view: ViewType = ViewType.STATUS) -> "Board":
        """Load the current snapshot and start a session on it."""
        return cls(gateway, gateway.fetch_board().result(), view)

    # ──────────────────────────────────────────
    # Reads
    # ──────────────────────────────────────────

    @property
    def tasks(self) -> TaskList:
        return self.controller.displayed_tasks

    @property
    def is_status_view(self) -> bool:
        return self.view is ViewType.STATUS

    @property
    def columns(self) -> Tuple[Column, ...]:
        return self.statuses if self.is_status_view else self.contexts

    def column_ids(self) -> List[str]:
        return [col.id for col in self.columns]

    def grouped(self) -> Dict[str, Tuple[Task, ...]]:
        return group_tasks(self.tasks, self.view, self.columns)

    def render_columns(self) -> List[Dict[str, Any]]:
        return build_columns(self.tasks, self.view, self.columns)

    def find_task(self, task_id: str) -> Optional[Task]:
        index = index_of(self.tasks, task_id)
        return self.tasks[index] if index >= 0 else None

    def switch_view(self, view: ViewType) -> None:
        if self.drag is not None:
            logger.debug("View switched mid-drag; dropping drag state")
            self.drag = None
        self.view = view

    # ──────────────────────────────────────────
    # Reconciliation
    # ──────────────────────────────────────────

    def refresh(self, snapshot: BoardSnapshot) -> None:
        """Adopt an authoritative snapshot from the gateway."""
        self.statuses = snapshot.statuses
        self.contexts = snapshot.contexts
        self.controller.confirm(snapshot.tasks)

    # ──────────────────────────────────────────
    # Drag and drop
    # ──────────────────────────────────────────

    def on_drag_start(self, active_id: str) -> Optional[Task]:
        """Begin dragging a card. Returns the card, or None if unknown."""
        task = self.find_task(active_id)
        if task is None:
            return None
        self.drag = DragState(active_id=active_id)
        return task

    def on_drag_over(self, active_id: str, over_id: Optional[str]) -> bool:
        """Hover step. Only a change of column is applied. Returns True if applied."""
        if over_id is None or active_id == over_id:
            return False

        view, column_ids = self.view, self.column_ids()
        applied = []

        def step(tasks: TaskList):
            active_index = index_of(tasks, active_id)
            if active_index < 0:
                return tasks
            target = resolve_drop_target(tasks, over_id, view, column_ids)
            if not isinstance(target, (TaskTarget, ContainerTarget)):
                return tasks
            if target.container_id == tasks[active_index].container(view):
                return tasks
            moved = move_within_or_across_container(tasks, active_id, over_id, view, column_ids)
            if moved is not tasks:
                applied.append(True)
            return moved

        self.controller.apply(step)
        if applied:
            if self.drag is None or self.drag.active_id != active_id:
                self.drag = DragState(active_id=active_id)
            self.drag.last_over_id = over_id
        return bool(applied)

    def on_drag_end(self, active_id: str, over_id: Optional[str]) -> Optional[Future]:
        """Drop. Commits the working order; a drop with no target is a no-op.

        The move and the dense reindex run as one transform, so a snapshot
        confirmed mid-drag is moved again rather than persisted as-is.
        """
        drag, self.drag = self.drag, None
        if over_id is None:
            logger.debug(f"Drop of {active_id} outside any column ignored")
            return None

        view, column_ids = self.view, self.column_ids()
        hovered = drag is not None and drag.active_id == active_id and drag.last_over_id == over_id
        dropped = []

        def drop(tasks: TaskList):
            active_index = index_of(tasks, active_id)
            if active_index < 0:
                return tasks
            target = resolve_drop_target(tasks, over_id, view, column_ids)
            if not isinstance(target, (TaskTarget, ContainerTarget)):
                return tasks
            dropped.append(True)
            # The hover already put the card in place unless a refresh undid it
            if not (hovered and tasks[active_index].container(view) == target.container_id):
                tasks = move_within_or_across_container(tasks, active_id, over_id, view, column_ids)
            return finalize_move(tasks)

        final = self.controller.apply(drop)
        if not dropped:
            logger.debug(f"Drop of {active_id} on {over_id} has no target; ignored")
            return None
        return self.gateway.move_tasks(final)

    # ──────────────────────────────────────────
    # Task edits
    # ──────────────────────────────────────────

    def add_task(self, column_id: str) -> Future:
        """Show a placeholder card at the end, then create the real one."""
        placeholder = new_task(column_id, self.view, task_id=f"t-temp-{millis()}")

        def append(tasks: TaskList):
            next_order = max((t.order for t in tasks), default=0) + 1
            return tasks + (replace(placeholder, order=next_order),)

        self.controller.apply(append)
        return self.gateway.add_task(column_id, self.view)

    def change_status(self, task_id: str, status: str) -> Optional[Future]:
        task = self.find_task(task_id)
        if task is None:
            return None
        updated = replace(task, status=status)
        self.controller.apply(lambda tasks: tuple(updated if t.id == task_id else t for t in tasks))
        return self.gateway.update_task(updated)

    def save_task(self, task: Task) -> Future:
        """Overwrite a card with edited fields (title, tags, colour, columns)."""
        self.controller.apply(lambda tasks: tuple(task if t.id == task.id else t for t in tasks))
        return self.gateway.update_task(task)

    def delete_task(self, task_id: str) -> Future:
        self.controller.apply(lambda tasks: tuple(t for t in tasks if t.id != task_id))
        return self.gateway.delete_task(task_id)

    # ──────────────────────────────────────────
    # Column edits
    # ──────────────────────────────────────────

    def add_context(self) -> Optional[Future]:
        """Add a list. Lists only exist in context view."""
        if self.is_status_view:
            return None
        placeholder = Context(id=f"c-temp-{millis()}", title=DEFAULT_CONTEXT_TITLE, color="#cccccc")
        self.contexts = self.contexts + (placeholder,)
        return self.gateway.add_context()

    def rename_column(self, column_id: str, title: str) -> Future:
        """Rename a column of the active view. Tasks are untouched."""
        if self.is_status_view:
            self.statuses = tuple(replace(s, title=title) if s.id == column_id else s for s in self.statuses)
        else:
            self.contexts = tuple(replace(c, title=title) if c.id == column_id else c for c in self.contexts)
        return self.gateway.update_column_title(column_id, title, self.view)
