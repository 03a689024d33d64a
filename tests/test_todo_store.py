# tests/test_todo_store.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tickoff.core.errors import CorruptStateError, PersistenceError
from tickoff.storage.kv_storage import FileKeyValueStorage, MemoryKeyValueStorage
from tickoff.todos.todo_api import NOTICE_LOAD_FAILED, NOTICE_LOADED, load_initial_todos
from tickoff.todos.todo_models import Priority
from tickoff.todos.todo_repository import TodoRepository
from tickoff.todos.todo_store import TodoStore

from .fakes import FailingStorage, FakeClock, SequentialIds


def _repo(store: TodoStore) -> TodoRepository:
    return TodoRepository(store, store.load(), id_factory=SequentialIds(), clock=FakeClock())


def test_load_absent_slot_is_empty(store: TodoStore) -> None:
    assert store.load() == []


def test_save_then_load_keeps_order_and_fields(store: TodoStore) -> None:
    repo = _repo(store)
    repo.add("Buy milk")
    repo.add("Pay rent", Priority.HIGH, ["bills"], "2024-01-01", "before the 5th")

    loaded = store.load()
    assert loaded == repo.list()
    assert loaded[1].notes == "before the 5th"


def test_saved_layout_uses_camel_case_and_omits_absent_fields(
    store: TodoStore, storage: MemoryKeyValueStorage
) -> None:
    repo = _repo(store)
    repo.add("a")
    repo.add("b", due_date="2024-02-03", notes="n")

    a, b = json.loads(storage.get_item("todos"))
    assert "dueDate" not in a and "notes" not in a
    assert b["dueDate"] == "2024-02-03"
    assert b["notes"] == "n"
    assert set(b) == {"id", "text", "completed", "dueDate", "priority", "tags", "notes", "createdAt"}


@pytest.mark.parametrize(
    "payload",
    [
        "not an array",
        '"not an array"',
        "{}",
        "42",
        "[1, 2]",
        '[{"id": "a", "text": "x"}]',
        '[{"id": "a", "text": "x", "createdAt": "2024-01-01T00:00:00.000Z", "priority": "urgent"}]',
        '[{"id": "a", "text": "x", "createdAt": "2024-01-01T00:00:00.000Z", "tags": "work"}]',
        '[{"id": "a", "text": "x", "createdAt": "2024-01-01T00:00:00.000Z", "completed": "yes"}]',
        '[{"id": "a", "text": "x", "createdAt": "t"}, {"id": "a", "text": "y", "createdAt": "t"}]',
    ],
)
def test_load_rejects_corrupt_payloads(payload: str) -> None:
    store = TodoStore(MemoryKeyValueStorage({"todos": payload}))
    with pytest.raises(CorruptStateError):
        store.load()


def test_load_accepts_records_written_by_older_versions() -> None:
    # Minimal records: defaults fill in completed/priority/tags.
    payload = '[{"id": "1704103200000", "text": "old", "createdAt": "2024-01-01T10:00:00.000Z"}]'
    (task,) = TodoStore(MemoryKeyValueStorage({"todos": payload})).load()
    assert task.completed is False
    assert task.priority is Priority.MEDIUM
    assert task.tags == ()


def test_corrupt_slot_falls_back_to_empty_with_notice() -> None:
    store = TodoStore(MemoryKeyValueStorage({"todos": "not an array"}))

    result = load_initial_todos(store)

    assert result.tasks == []
    assert result.notice == NOTICE_LOAD_FAILED
    assert isinstance(result.error, CorruptStateError)


def test_startup_notice_when_todos_found(store: TodoStore) -> None:
    _repo(store).add("x")
    result = load_initial_todos(store)
    assert [t.text for t in result.tasks] == ["x"]
    assert result.notice == NOTICE_LOADED

    assert load_initial_todos(TodoStore(MemoryKeyValueStorage())).notice is None


def test_deleting_last_task_persists_empty_list(store: TodoStore) -> None:
    repo = _repo(store)
    task = repo.add("only one")
    repo.remove(task.id)

    assert store.load() == []
    assert _repo(store).list() == []


def test_legacy_mode_restores_deleted_last_task(storage: MemoryKeyValueStorage) -> None:
    store = TodoStore(storage, persist_empty=False)
    repo = _repo(store)
    task = repo.add("only one")
    repo.remove(task.id)

    reloaded = TodoStore(storage, persist_empty=False).load()
    assert [t.text for t in reloaded] == ["only one"]


def test_save_failure_becomes_persistence_error() -> None:
    storage = FailingStorage()
    store = TodoStore(storage)
    with pytest.raises(PersistenceError) as excinfo:
        store.save([])
    assert isinstance(excinfo.value.__cause__, OSError)


def test_quota_exceeded_becomes_persistence_error() -> None:
    store = TodoStore(MemoryKeyValueStorage(quota_bytes=64))
    repo = TodoRepository(store, id_factory=SequentialIds(), clock=FakeClock())

    with pytest.raises(PersistenceError):
        repo.add("a todo whose record is far larger than sixty-four bytes")
    assert len(repo) == 1


def test_custom_slot_key(storage: MemoryKeyValueStorage) -> None:
    store = TodoStore(storage, key="work-todos")
    _repo(store).add("x")
    assert storage.get_item("todos") is None
    assert storage.get_item("work-todos") is not None


def test_file_storage_survives_restart(tmp_path: Path) -> None:
    root = tmp_path / "storage"
    repo = _repo(TodoStore(FileKeyValueStorage(root)))
    repo.add("persist me", tags=["disk"])

    assert (root / "todos.json").exists()
    assert not (root / "todos.tmp").exists()

    reopened = TodoStore(FileKeyValueStorage(root)).load()
    assert [(t.text, t.tags) for t in reopened] == [("persist me", ("disk",))]


def test_unreadable_storage_is_a_persistence_error_not_corruption() -> None:
    storage = FailingStorage({"todos": "[]"})
    storage.fail_reads = True

    with pytest.raises(PersistenceError):
        TodoStore(storage).load()
    with pytest.raises(PersistenceError):
        load_initial_todos(TodoStore(storage))


def test_startup_with_stored_empty_list_has_no_notice(storage: MemoryKeyValueStorage) -> None:
    storage.set_item("todos", "[]")
    result = load_initial_todos(TodoStore(storage))
    assert result.tasks == []
    assert result.notice is None
    assert result.error is None
