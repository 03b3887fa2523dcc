"""
Optimistic state: confirmed vs displayed task lists.

confirmed — last snapshot delivered by the gateway (authoritative)
displayed — confirmed plus any local, not-yet-durable edits

Local edits go through apply() and are visible immediately. A new confirmed
snapshot replaces the displayed list wholesale, pending speculation included
(last writer wins). Nothing here is durable.
"""
import threading
from typing import Callable, Iterable, Sequence, Tuple

from .schema import Task

TaskList = Tuple[Task, ...]
Transform = Callable[[TaskList], Iterable[Task]]


class OptimisticController:
    """Two immutable snapshots and one reconciliation rule."""

    def __init__(self, confirmed: Iterable[Task] = ()):
        self._lock = threading.Lock()
        self._confirmed: TaskList = tuple(confirmed)
        self._displayed: TaskList = self._confirmed

    @property
    def confirmed_tasks(self) -> TaskList:
        return self._confirmed

    @property
    def displayed_tasks(self) -> TaskList:
        return self._displayed

    @property
    def is_speculative(self) -> bool:
        """True while local edits are shown that the store has not confirmed."""
        return self._displayed is not self._confirmed and self._displayed != self._confirmed

    def apply(self, transform: Transform) -> TaskList:
        """Replace displayed with transform(displayed) and return it.

        Runs against the latest displayed list, so back-to-back edits compose
        even while their persistence calls are still racing.
        """
        with self._lock:
            result = transform(self._displayed)
            if result is not self._displayed:
                self._displayed = tuple(result)
            return self._displayed

    def confirm(self, tasks: Sequence[Task]) -> None:
        """Adopt a new authoritative snapshot, dropping any speculation."""
        snapshot = tuple(tasks)
        with self._lock:
            self._confirmed = snapshot
            self._displayed = snapshot
