# src/tickoff/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage -> store -> repository into AppState,
- performs the startup load (corrupt data falls back to an empty list).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStorage
from ..core.state import AppState, ViewState
from ..storage.kv_storage import FileKeyValueStorage
from ..todos.todo_api import load_initial_todos
from ..todos.todo_models import SortKey
from ..todos.todo_repository import TodoRepository
from ..todos.todo_store import TodoStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_dir.mkdir(parents=True, exist_ok=True)


def _initial_view(settings) -> ViewState:
    raw = getattr(settings, "default_sort", "") or SortKey.CREATED_AT.value
    try:
        sort_key = SortKey.parse(raw)
    except ValueError:
        logger.warning("Unknown default sort %r, using createdAt", raw)
        sort_key = SortKey.CREATED_AT
    return ViewState(sort_key=sort_key)


def create_initial_state(*, settings=None, storage: KeyValueStorage | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and storage) injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = FileKeyValueStorage(
            settings.storage_dir,
            quota_bytes=getattr(settings, "storage_quota_bytes", 0) or None,
        )

    store = TodoStore(
        storage,
        key=getattr(settings, "storage_key", "todos"),
        persist_empty=getattr(settings, "persist_empty", True),
    )

    loaded = load_initial_todos(store)
    repository = TodoRepository(store, loaded.tasks)

    state = AppState(settings=settings, repository=repository, view=_initial_view(settings))
    if loaded.notice:
        state.pending_notices.append(loaded.notice)

    logger.info("State ready: %d todos (slot=%s)", len(repository), store.key)
    return state
