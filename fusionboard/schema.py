"""
Board data model.

Two orthogonal groupings over one task list:
  Status view  → fixed lanes (todo / doing / done)
  Context view → user-defined lists

A task carries both a status and a context; the active view decides which
one is used as its column. Model objects are frozen — every change produces
a new object, so snapshots can be handed between threads as-is.
"""
from enum import Enum
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Dict, Any
import json


class ViewType(Enum):
    """Which field tasks are grouped by."""
    STATUS = "status"
    CONTEXT = "context"

    @classmethod
    def from_str(cls, value: str) -> "ViewType":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError):
            raise ValueError(f"Invalid view: {value!r} (expected 'status' or 'context')")


@dataclass(frozen=True)
class Status:
    """Fixed workflow lane. Only the title is editable."""
    id: str
    title: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Status":
        return cls(id=data["id"], title=data.get("title") or "")


@dataclass(frozen=True)
class Context:
    """User-defined list; creatable at runtime, never deleted."""
    id: str
    title: str
    color: str = "#cccccc"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "color": self.color}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Context":
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            color=data.get("color") or "#cccccc",
        )


@dataclass(frozen=True)
class Task:
    """A single card on the board."""

    # Identifiers
    id: str                        # Client-minted (e.g., t1718000000000)

    # Content
    title: str
    status: str = "todo"           # → Status.id
    context: str = "c1"            # → Context.id
    tags: Tuple[str, ...] = field(default_factory=tuple)
    color: Optional[str] = None    # Card background hex

    # Position in the single global sequence (not per column)
    order: int = 0

    def container(self, view: ViewType) -> str:
        """Column id of this task under the given view."""
        return self.status if view is ViewType.STATUS else self.context

    def with_container(self, view: ViewType, container_id: str) -> "Task":
        """Copy of this task moved to another column of the given view."""
        if view is ViewType.STATUS:
            return replace(self, status=container_id)
        return replace(self, context=container_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "context": self.context,
            "tags": list(self.tags),
            "color": self.color,
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Deserialize from dict (API payloads and DB rows)."""
        tags = data.get("tags") or []
        if isinstance(tags, str):
            # Stored as a JSON string in SQLite
            try:
                tags = json.loads(tags)
            except json.JSONDecodeError:
                tags = []
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            status=data.get("status") or "todo",
            context=data.get("context") or "c1",
            tags=tuple(str(t) for t in tags),
            color=data.get("color"),
            order=int(data.get("order") or 0),
        )


@dataclass(frozen=True)
class BoardSnapshot:
    """Authoritative board state as read from the store."""
    statuses: Tuple[Status, ...] = ()
    contexts: Tuple[Context, ...] = ()
    tasks: Tuple[Task, ...] = ()     # Sorted by order ascending

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statuses": [s.to_dict() for s in self.statuses],
            "contexts": [c.to_dict() for c in self.contexts],
            "tasks": [t.to_dict() for t in self.tasks],
        }
