# src/tickoff/todos/todo_api.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..core.errors import CorruptStateError
from .todo_models import Task
from .todo_store import TodoStore

logger = logging.getLogger(__name__)

NOTICE_LOADED = "Todos Found"
NOTICE_LOAD_FAILED = "Failed to load todos"


@dataclass(slots=True)
class LoadResult:
    tasks: list[Task] = field(default_factory=list)
    notice: str | None = None
    error: CorruptStateError | None = None


def load_initial_todos(store: TodoStore) -> LoadResult:
    """
    Startup load with fallback.

    A corrupt slot never stops the app: we start with an empty collection and
    hand back a notice for the front end. The corrupt payload stays in storage
    until the next successful write replaces it.
    """
    try:
        tasks = store.load()
    except CorruptStateError as e:
        logger.error("Error loading todos from slot=%s: %s", store.key, e)
        return LoadResult(tasks=[], notice=NOTICE_LOAD_FAILED, error=e)

    if not tasks:
        return LoadResult(tasks=[])
    return LoadResult(tasks=tasks, notice=NOTICE_LOADED)
