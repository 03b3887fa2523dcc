"""
Drag-and-drop reorder engine.

Tasks live in one globally ordered sequence; a column is only a filter over
it. Moving a card across columns is therefore a single-field change plus one
array move, never a removal from one list and an insertion into another.

All functions here are pure: they take a sequence of tasks and return a new
one (or the very same object when nothing changes).
"""
import logging
from dataclasses import dataclass, replace
from typing import Collection, List, Optional, Sequence, Union

from .schema import Task, ViewType

logger = logging.getLogger(__name__)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Drop targets
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass(frozen=True)
class TaskTarget:
    """Pointer is over another card."""
    task_id: str
    index: int              # Position in the global sequence
    container_id: str


@dataclass(frozen=True)
class ContainerTarget:
    """Pointer is over a column itself (e.g. an empty one)."""
    container_id: str


@dataclass(frozen=True)
class Unresolved:
    """Nothing droppable under the pointer."""
    over_id: Optional[str] = None


DropTarget = Union[TaskTarget, ContainerTarget, Unresolved]


def index_of(tasks: Sequence[Task], task_id: str) -> int:
    """Position of a task in the sequence, or -1."""
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    return -1


def resolve_drop_target(
    tasks: Sequence[Task],
    over_id: Optional[str],
    view: ViewType,
    column_ids: Collection[str],
) -> DropTarget:
    """Classify what the pointer is over. Task ids win over column ids."""
    if over_id is None:
        return Unresolved()
    index = index_of(tasks, over_id)
    if index >= 0:
        return TaskTarget(task_id=over_id, index=index, container_id=tasks[index].container(view))
    if over_id in column_ids:
        return ContainerTarget(container_id=over_id)
    return Unresolved(over_id)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Moves
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def array_move(items: Sequence[Task], from_index: int, to_index: int) -> Sequence[Task]:
    """Remove the item at from_index and reinsert it at to_index.

    The relative order of every other item is preserved. Equal indices
    return the input unchanged.
    """
    if from_index == to_index:
        return items
    moved: List[Task] = list(items)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


def move_within_or_across_container(
    tasks: Sequence[Task],
    active_id: str,
    over_id: Optional[str],
    view: ViewType,
    column_ids: Collection[str],
) -> Sequence[Task]:
    """Apply one drag gesture step to the task sequence.

    The active task takes the over task's position in the global sequence
    (or the end of it when dropped on a column) and, if the target column
    differs, its grouping field is rewritten to that column. Returns the
    input object itself when the gesture changes nothing.
    """
    if over_id is None or active_id == over_id:
        return tasks

    source_index = index_of(tasks, active_id)
    if source_index < 0:
        logger.debug(f"Drag ignored: active task {active_id} not on board")
        return tasks

    target = resolve_drop_target(tasks, over_id, view, column_ids)
    if isinstance(target, Unresolved):
        logger.debug(f"Drag ignored: {over_id} is not a drop target")
        return tasks

    active = tasks[source_index]
    source_container = active.container(view)
    target_container = target.container_id

    if isinstance(target, TaskTarget):
        destination = target.index
    else:
        destination = len(tasks) - 1

    if destination == source_index and target_container == source_container:
        return tasks

    moved: List[Task] = list(tasks)
    if target_container != source_container:
        moved[source_index] = active.with_container(view, target_container)
    return array_move(moved, source_index, destination)


def finalize_move(tasks: Sequence[Task]) -> List[Task]:
    """Dense reindex: order becomes 0..N-1 by position.

    The in-memory sequence (container changes included) is taken as ground
    truth; previous order values are ignored.
    """
    return [
        task if task.order == index else replace(task, order=index)
        for index, task in enumerate(tasks)
    ]
