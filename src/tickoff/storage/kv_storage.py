# src/tickoff/storage/kv_storage.py

"""
Key-value storage backends (a local stand-in for browser localStorage).

Values are plain strings keyed by slot name. Two backends:
- FileKeyValueStorage: one file per slot under a root directory
- MemoryKeyValueStorage: dict-backed, used by tests and throwaway sessions

Both can enforce a per-value quota (bytes, UTF-8) and raise StorageQuotaExceeded,
mirroring the QuotaExceededError a browser raises on setItem.
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageQuotaExceeded(OSError):
    """Value does not fit into the configured quota."""


def is_safe_key(key: str) -> bool:
    """Slot names double as file names: letters, digits, "_", "." and "-" only."""
    return bool(_SAFE_KEY.match(key))


def _check_quota(key: str, value: str, quota_bytes: int | None) -> None:
    if not quota_bytes:
        return
    size = len(value.encode("utf-8"))
    if size > quota_bytes:
        raise StorageQuotaExceeded(
            f"Value for slot {key!r} is {size} bytes, quota is {quota_bytes} bytes"
        )


class MemoryKeyValueStorage:
    def __init__(
        self,
        initial: dict[str, str] | None = None,
        *,
        quota_bytes: int | None = None,
    ) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        _check_quota(key, value, self._quota_bytes)
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileKeyValueStorage:
    """
    File-backed slots: <root>/<key>.json.

    Writes go to a temp file first and are moved into place with os.replace,
    so a crash mid-write leaves the previous value intact.
    """

    def __init__(self, root: str | Path, *, quota_bytes: int | None = None) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)
        self._quota_bytes = quota_bytes or None
        logger.debug("FileKeyValueStorage ready root=%s quota=%s", self._root, self._quota_bytes)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        if not is_safe_key(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._root / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text("utf-8")

    def set_item(self, key: str, value: str) -> None:
        _check_quota(key, value, self._quota_bytes)
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_text(value, "utf-8")
            os.replace(tmp, path)
        except OSError:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise
        with contextlib.suppress(Exception):
            os.chmod(path, 0o600)

    def remove_item(self, key: str) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path(key).unlink()

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self._root.glob("*.json"))
