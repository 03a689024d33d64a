# src/tickoff/todos/todo_repository.py

from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import date
from enum import StrEnum

from ..core.errors import ValidationError
from ..core.ports import ChangeListener
from .todo_models import (
    Priority,
    Task,
    normalize_due_date,
    normalize_notes,
    normalize_tags,
    utc_now_iso,
)
from .todo_store import TodoStore

logger = logging.getLogger(__name__)


class ChangeKind(StrEnum):
    ADDED = "added"
    TOGGLED = "toggled"
    REMOVED = "removed"
    EDITED = "edited"
    TAG_ADDED = "tag_added"
    TAG_REMOVED = "tag_removed"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    kind: ChangeKind
    task_id: str


def new_task_id() -> str:
    """Millisecond timestamp plus a random suffix, e.g. 1704103200000-3fa9c1."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}"


class TodoRepository:
    """
    Owner of the in-memory todo collection.

    The list keeps insertion (creation) order. Every successful mutation:
    1) swaps the updated Task into the list,
    2) writes the full collection through the store,
    3) notifies subscribers with a ChangeEvent.

    If the write fails, the PersistenceError propagates to the caller after
    subscribers were notified; the in-memory change is not rolled back.
    Operations on unknown ids are silent no-ops (no write, no notification).
    """

    def __init__(
        self,
        store: TodoStore,
        initial: Iterable[Task] = (),
        *,
        id_factory: Callable[[], str] = new_task_id,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._store = store
        self._tasks: list[Task] = list(initial)
        self._listeners: list[ChangeListener] = []
        self._id_factory = id_factory
        self._clock = clock
        self._issued_ids: set[str] = {t.id for t in self._tasks}
        if len(self._issued_ids) != len(self._tasks):
            raise ValueError("Initial tasks contain duplicate ids")

    # ---- reads ----

    def __len__(self) -> int:
        return len(self._tasks)

    def list(self) -> list[Task]:
        return list(self._tasks)

    def ids(self) -> list[str]:
        return [t.id for t in self._tasks]

    def get(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    # ---- observers ----

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- mutations ----

    def add(
        self,
        text: str,
        priority: Priority | str | None = Priority.MEDIUM,
        tags: Iterable[str] = (),
        due_date: date | str | None = None,
        notes: str | None = None,
    ) -> Task:
        clean = (text or "").strip()
        if not clean:
            raise ValidationError("Please enter a todo item")

        task = Task(
            id=self._next_id(),
            text=clean,
            created_at=self._clock(),
            completed=False,
            priority=Priority.parse(priority),
            tags=normalize_tags(tags),
            due_date=normalize_due_date(due_date),
            notes=normalize_notes(notes),
        )
        self._tasks.append(task)
        logger.debug("Todo added id=%s priority=%s tags=%s", task.id, task.priority, task.tags)
        self._commit(ChangeKind.ADDED, task.id)
        return task

    def toggle(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            return None
        task = self._tasks[idx]
        updated = replace(task, completed=not task.completed)
        self._tasks[idx] = updated
        logger.debug("Todo toggled id=%s completed=%s", task_id, updated.completed)
        self._commit(ChangeKind.TOGGLED, task_id)
        return updated

    def remove(self, task_id: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False
        del self._tasks[idx]
        logger.debug("Todo removed id=%s", task_id)
        self._commit(ChangeKind.REMOVED, task_id)
        return True

    def edit_text(self, task_id: str, new_text: str) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            return None
        clean = (new_text or "").strip()
        if not clean:
            raise ValidationError("Todo text cannot be empty")
        updated = replace(self._tasks[idx], text=clean)
        self._tasks[idx] = updated
        logger.debug("Todo edited id=%s", task_id)
        self._commit(ChangeKind.EDITED, task_id)
        return updated

    def add_tag(self, task_id: str, tag: str) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            return None
        clean = (tag or "").strip()
        if not clean:
            raise ValidationError("Tag cannot be empty")
        task = self._tasks[idx]
        if clean in task.tags:
            raise ValidationError(f"Tag {clean!r} is already present")
        updated = replace(task, tags=(*task.tags, clean))
        self._tasks[idx] = updated
        logger.debug("Tag added id=%s tag=%s", task_id, clean)
        self._commit(ChangeKind.TAG_ADDED, task_id)
        return updated

    def remove_tag(self, task_id: str, tag: str) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            return None
        task = self._tasks[idx]
        clean = (tag or "").strip()
        if clean not in task.tags:
            return task
        updated = replace(task, tags=tuple(t for t in task.tags if t != clean))
        self._tasks[idx] = updated
        logger.debug("Tag removed id=%s tag=%s", task_id, clean)
        self._commit(ChangeKind.TAG_REMOVED, task_id)
        return updated

    # ---- internals ----

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _next_id(self) -> str:
        while True:
            candidate = self._id_factory()
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate
            logger.debug("Task id collision on %s, regenerating", candidate)

    def _commit(self, kind: ChangeKind, task_id: str) -> None:
        try:
            self._store.save(self._tasks)
        finally:
            self._notify(ChangeEvent(kind=kind, task_id=task_id))

    def _notify(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener failed for %s", event)
