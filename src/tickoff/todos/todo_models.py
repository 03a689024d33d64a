# src/tickoff/todos/todo_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Any

from ..core.errors import CorruptStateError, ValidationError


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Priority | str | None) -> Priority:
        if raw is None or raw == "":
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown priority: {raw!r}") from None

    @property
    def rank(self) -> int:
        """Sort rank: high first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


class TodoFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: TodoFilter | str) -> TodoFilter:
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown filter: {raw!r}") from None


class SortKey(StrEnum):
    CREATED_AT = "createdAt"
    DUE_DATE = "dueDate"
    PRIORITY = "priority"

    @classmethod
    def parse(cls, raw: SortKey | str) -> SortKey:
        key = str(raw).strip()
        for member in cls:
            # accept "createdAt", "createdat", "created_at"
            if key.replace("_", "").lower() == member.value.lower():
                return member
        raise ValidationError(f"Unknown sort key: {raw!r}")


@dataclass(frozen=True, slots=True)
class Task:
    """
    One todo item.

    Instances are immutable; the repository swaps in updated copies
    (dataclasses.replace) so snapshots handed to callers never change.
    """

    id: str
    text: str
    created_at: str
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    tags: tuple[str, ...] = field(default_factory=tuple)
    due_date: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class TodoStats:
    total: int
    completed: int
    active: int


def utc_now_iso() -> str:
    """Current time as ISO-8601 UTC with milliseconds, e.g. 2024-01-01T10:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_due_date(raw: date | str | None) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, date):
        return raw.isoformat()
    s = str(raw).strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid due date (expected YYYY-MM-DD): {raw!r}") from None


def normalize_notes(raw: str | None) -> str | None:
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


def normalize_tags(raw: Any) -> tuple[str, ...]:
    out: list[str] = []
    for t in raw or ():
        s = str(t).strip()
        if s and s not in out:
            out.append(s)
    return tuple(out)


# ---- storage records (camelCase keys, same layout as the stored JSON array) ----


def task_to_record(task: Task) -> dict[str, Any]:
    rec: dict[str, Any] = {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "priority": task.priority.value,
        "tags": list(task.tags),
        "createdAt": task.created_at,
    }
    if task.due_date is not None:
        rec["dueDate"] = task.due_date
    if task.notes is not None:
        rec["notes"] = task.notes
    return rec


def task_from_record(rec: Any) -> Task:
    """Decode one stored record. Raises CorruptStateError on any structural mismatch."""
    if not isinstance(rec, dict):
        raise CorruptStateError(f"Task record is not an object: {rec!r}")

    tid = rec.get("id")
    text = rec.get("text")
    created_at = rec.get("createdAt")
    if not isinstance(tid, str) or not tid:
        raise CorruptStateError(f"Task record has no valid id: {rec!r}")
    if not isinstance(text, str):
        raise CorruptStateError(f"Task {tid} has no text")
    if not isinstance(created_at, str) or not created_at:
        raise CorruptStateError(f"Task {tid} has no createdAt")

    completed = rec.get("completed", False)
    if not isinstance(completed, bool):
        raise CorruptStateError(f"Task {tid} has non-boolean completed")

    try:
        priority = Priority(rec.get("priority", Priority.MEDIUM.value))
    except ValueError:
        raise CorruptStateError(f"Task {tid} has unknown priority {rec.get('priority')!r}") from None

    tags = rec.get("tags", [])
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise CorruptStateError(f"Task {tid} has invalid tags")

    due_date = rec.get("dueDate")
    if due_date is not None and not isinstance(due_date, str):
        raise CorruptStateError(f"Task {tid} has invalid dueDate")

    notes = rec.get("notes")
    if notes is not None and not isinstance(notes, str):
        raise CorruptStateError(f"Task {tid} has invalid notes")

    return Task(
        id=tid,
        text=text,
        created_at=created_at,
        completed=completed,
        priority=priority,
        tags=tuple(dict.fromkeys(tags)),
        due_date=due_date or None,
        notes=notes or None,
    )
