# tests/test_bootstrap.py

from __future__ import annotations

import builtins

from tickoff.cli.bootstrap import create_initial_state
from tickoff.connectors.console_connector import run_console_loop
from tickoff.storage.kv_storage import MemoryKeyValueStorage
from tickoff.todos.todo_api import NOTICE_LOAD_FAILED, NOTICE_LOADED
from tickoff.todos.todo_models import SortKey


def test_corrupt_storage_starts_empty_and_recovers_on_next_write(settings) -> None:
    storage = MemoryKeyValueStorage({"todos": "not an array"})

    state = create_initial_state(settings=settings, storage=storage)

    assert len(state.repository) == 0
    assert state.pending_notices == [NOTICE_LOAD_FAILED]

    state.repository.add("fresh start")
    reloaded = create_initial_state(settings=settings, storage=storage)
    assert [t.text for t in reloaded.repository.list()] == ["fresh start"]
    assert reloaded.pending_notices == [NOTICE_LOADED]


def test_file_storage_round_trip_through_bootstrap(settings) -> None:
    state = create_initial_state(settings=settings)
    assert state.pending_notices == []
    task = state.repository.add("on disk")
    state.repository.remove(task.id)

    # the empty list is persisted, so nothing comes back
    again = create_initial_state(settings=settings)
    assert again.repository.list() == []
    assert (settings.storage_dir / "todos.json").read_text("utf-8") == "[]"


def test_default_sort_from_settings(settings) -> None:
    settings.default_sort = "priority"
    state = create_initial_state(settings=settings, storage=MemoryKeyValueStorage())
    assert state.view.sort_key is SortKey.PRIORITY

    settings.default_sort = "bogus"
    state = create_initial_state(settings=settings, storage=MemoryKeyValueStorage())
    assert state.view.sort_key is SortKey.CREATED_AT


def test_console_loop_adds_and_prints_stats(settings, monkeypatch, capsys) -> None:
    state = create_initial_state(settings=settings, storage=MemoryKeyValueStorage())
    lines = iter(["Buy milk", "/stats", "/exit"])
    monkeypatch.setattr(builtins, "input", lambda _prompt="": next(lines))

    run_console_loop(state)

    out = capsys.readouterr().out
    assert "Todo added successfully" in out
    assert "Total: 1  Completed: 0  Active: 1" in out
    assert [t.text for t in state.repository.list()] == ["Buy milk"]
