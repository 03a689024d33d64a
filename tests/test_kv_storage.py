# tests/test_kv_storage.py

from __future__ import annotations

from pathlib import Path

import pytest

from tickoff.storage import kv_storage
from tickoff.storage.kv_storage import (
    FileKeyValueStorage,
    MemoryKeyValueStorage,
    StorageQuotaExceeded,
    is_safe_key,
)


def test_file_storage_get_set_remove(tmp_path: Path) -> None:
    kv = FileKeyValueStorage(tmp_path / "kv")

    assert kv.get_item("todos") is None
    kv.set_item("todos", "[]")
    kv.set_item("other", "привет")
    assert kv.get_item("todos") == "[]"
    assert kv.get_item("other") == "привет"
    assert kv.keys() == ["other", "todos"]

    kv.remove_item("todos")
    kv.remove_item("todos")
    assert kv.get_item("todos") is None


def test_file_storage_rejects_path_like_keys(tmp_path: Path) -> None:
    kv = FileKeyValueStorage(tmp_path)
    with pytest.raises(ValueError):
        kv.set_item("../escape", "x")


def test_quota_applies_to_both_backends(tmp_path: Path) -> None:
    for kv in (MemoryKeyValueStorage(quota_bytes=4), FileKeyValueStorage(tmp_path, quota_bytes=4)):
        kv.set_item("k", "abcd")
        with pytest.raises(StorageQuotaExceeded):
            kv.set_item("k", "abcde")
        assert kv.get_item("k") == "abcd"


def test_failed_write_keeps_old_value_and_leaves_no_temp_file(tmp_path: Path, monkeypatch) -> None:
    kv = FileKeyValueStorage(tmp_path)
    kv.set_item("todos", "[]")

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(kv_storage.os, "replace", fail_replace)
    with pytest.raises(OSError):
        kv.set_item("todos", '[{"id": "a"}]')

    assert kv.get_item("todos") == "[]"
    assert list(tmp_path.glob("*.tmp")) == []


@pytest.mark.parametrize("key", ["todos", "todos-v2", "my_list.1"])
def test_is_safe_key_accepts_plain_names(key: str) -> None:
    assert is_safe_key(key)


@pytest.mark.parametrize("key", ["", "../escape", "a/b", "with space"])
def test_is_safe_key_rejects_paths_and_blanks(key: str) -> None:
    assert not is_safe_key(key)
