# src/tickoff/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..todos.todo_models import SortKey, TodoFilter
from ..todos.todo_repository import TodoRepository


@dataclass
class ViewState:
    """What the front end currently shows (not persisted)."""

    filter: TodoFilter = TodoFilter.ALL
    search_text: str = ""
    sort_key: SortKey = SortKey.CREATED_AT


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    repository: TodoRepository
    view: ViewState = field(default_factory=ViewState)

    # Notices produced outside of a command (e.g. at startup), shown once by the front end.
    pending_notices: list[str] = field(default_factory=list)
