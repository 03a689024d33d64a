# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tickoff.core.state import AppState
from tickoff.storage.kv_storage import MemoryKeyValueStorage
from tickoff.todos.todo_repository import TodoRepository
from tickoff.todos.todo_store import TodoStore

from .fakes import FakeClock, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tickoff-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_dir=tmp_path / "storage",
        storage_key="todos",
        storage_quota_bytes=0,
        persist_empty=True,
        color=False,
        default_sort="createdAt",
    )


@pytest.fixture()
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage()


@pytest.fixture()
def store(storage: MemoryKeyValueStorage) -> TodoStore:
    return TodoStore(storage)


@pytest.fixture()
def repo(store: TodoStore) -> TodoRepository:
    """Repository with deterministic ids (t-1, t-2, ...) and createdAt (one second apart)."""
    return TodoRepository(store, id_factory=SequentialIds(), clock=FakeClock())


@pytest.fixture()
def state(settings: SimpleNamespace, repo: TodoRepository) -> AppState:
    return AppState(settings=settings, repository=repo)
