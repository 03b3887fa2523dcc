"""
Column projection: split the global task sequence into per-column subsets.

Recomputed on every read; holds no state.
"""
from typing import Any, Dict, List, Sequence, Tuple, Union

from .schema import BoardSnapshot, Context, Status, Task, ViewType

Column = Union[Status, Context]


def columns_for_view(snapshot: BoardSnapshot, view: ViewType) -> Tuple[Column, ...]:
    """Statuses in status view, contexts in context view."""
    return snapshot.statuses if view is ViewType.STATUS else snapshot.contexts


def group_tasks(
    tasks: Sequence[Task],
    view: ViewType,
    columns: Sequence[Column],
) -> Dict[str, Tuple[Task, ...]]:
    """Column id → tasks in that column, in global order.

    Every column gets an entry (possibly empty). Tasks pointing at a column
    not in `columns` are left out.
    """
    grouped: Dict[str, List[Task]] = {col.id: [] for col in columns}
    for task in tasks:
        bucket = grouped.get(task.container(view))
        if bucket is not None:
            bucket.append(task)
    return {col_id: tuple(items) for col_id, items in grouped.items()}


def build_columns(
    tasks: Sequence[Task],
    view: ViewType,
    columns: Sequence[Column],
) -> List[Dict[str, Any]]:
    """Render-ready column dicts: {id, title, color, tasks}."""
    grouped = group_tasks(tasks, view, columns)
    return [
        {
            "id": col.id,
            "title": col.title,
            "color": getattr(col, "color", None),
            "tasks": [t.to_dict() for t in grouped[col.id]],
        }
        for col in columns
    ]
