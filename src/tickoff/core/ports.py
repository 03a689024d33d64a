# src/tickoff/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends and front ends swappable and makes testing easier.
"""

from typing import Any, Callable, Iterable, Protocol


class KeyValueStorage(Protocol):
    """String slots keyed by name (localStorage-like)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


# Listener receives a ChangeEvent (kept as Any to avoid import coupling).
ChangeListener = Callable[[Any], None]


class TodoRepo(Protocol):
    # Reads
    def list(self) -> list[Any]: ...
    def get(self, task_id: str) -> Any | None: ...
    def ids(self) -> list[str]: ...

    # Mutations (write-through + notify)
    def add(
            self,
            text: str,
            priority: Any = None,
            tags: Iterable[str] = (),
            due_date: Any = None,
            notes: str | None = None,
    ) -> Any: ...
    def toggle(self, task_id: str) -> Any | None: ...
    def remove(self, task_id: str) -> bool: ...
    def edit_text(self, task_id: str, new_text: str) -> Any | None: ...
    def add_tag(self, task_id: str, tag: str) -> Any | None: ...
    def remove_tag(self, task_id: str, tag: str) -> Any | None: ...

    # Observers
    def subscribe(self, listener: ChangeListener) -> Callable[[], None]: ...
