# src/tickoff/todos/todo_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from ..core.errors import CorruptStateError, PersistenceError
from ..core.ports import KeyValueStorage
from .todo_models import Task, task_from_record, task_to_record

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todos"


class TodoStore:
    """
    Persistence adapter: the whole collection as a JSON array in one storage slot.

    - load(): absent slot -> []; anything that is not an array of valid records
      -> CorruptStateError; the storage itself failing to read -> PersistenceError
    - save(): writes the full array; any storage failure -> PersistenceError

    persist_empty=False reproduces the legacy behaviour of never writing an
    empty list (the previous non-empty value then survives a reload).
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        persist_empty: bool = True,
    ) -> None:
        self._storage = storage
        self._key = key
        self._persist_empty = persist_empty

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[Task]:
        try:
            raw = self._storage.get_item(self._key)
        except UnicodeDecodeError as exc:
            raise CorruptStateError(f"Slot {self._key!r} is not valid UTF-8") from exc
        except Exception as exc:
            logger.warning("Failed to read slot=%s: %s", self._key, exc)
            raise PersistenceError(f"Cannot read storage slot {self._key!r}: {exc}") from exc

        if raw is None:
            logger.info("No todos stored in slot=%s", self._key)
            return []

        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise CorruptStateError(f"Slot {self._key!r} does not contain valid JSON") from exc

        if not isinstance(data, list):
            raise CorruptStateError(
                f"Slot {self._key!r} holds {type(data).__name__}, expected an array"
            )

        tasks = [task_from_record(rec) for rec in data]

        seen: set[str] = set()
        for t in tasks:
            if t.id in seen:
                raise CorruptStateError(f"Duplicate task id {t.id!r} in slot {self._key!r}")
            seen.add(t.id)

        logger.info("Loaded %d todos from slot=%s", len(tasks), self._key)
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        items = list(tasks)
        if not items and not self._persist_empty:
            logger.debug("Skipping save of empty collection (persist_empty=False)")
            return

        try:
            payload = json.dumps([task_to_record(t) for t in items], ensure_ascii=False)
            self._storage.set_item(self._key, payload)
        except Exception as exc:
            logger.warning("Failed to save %d todos to slot=%s: %s", len(items), self._key, exc)
            raise PersistenceError(f"Failed to save todos: {exc}") from exc

        logger.debug("Saved %d todos to slot=%s", len(items), self._key)
