# src/tickoff/todos/todo_query.py

"""Derived read-only views of the collection: filtered/searched/sorted lists and counts."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .todo_models import SortKey, Task, TodoFilter, TodoStats

_FILTER_PREDICATES: dict[TodoFilter, Callable[[Task], bool]] = {
    TodoFilter.ALL: lambda t: True,
    TodoFilter.ACTIVE: lambda t: not t.completed,
    TodoFilter.COMPLETED: lambda t: t.completed,
}


def query(
    tasks: Iterable[Task],
    filter: TodoFilter | str = TodoFilter.ALL,
    search_text: str = "",
    sort_key: SortKey | str = SortKey.CREATED_AT,
) -> list[Task]:
    """
    Return a new list of tasks matching `filter` and `search_text`, ordered by `sort_key`.

    - search is a case-insensitive substring match on text ("" matches everything)
    - createdAt: newest first (ties: later insertion first)
    - dueDate: ascending; tasks without a due date come first
    - priority: high, medium, low

    The input is never modified.
    """
    keep = _FILTER_PREDICATES[TodoFilter.parse(filter)]
    key = SortKey.parse(sort_key)
    needle = (search_text or "").lower()

    picked = [(pos, t) for pos, t in enumerate(tasks) if keep(t) and needle in t.text.lower()]

    if key is SortKey.CREATED_AT:
        picked.sort(key=lambda p: (p[1].created_at, p[0]), reverse=True)
    elif key is SortKey.DUE_DATE:
        picked.sort(key=lambda p: p[1].due_date or "")
    elif key is SortKey.PRIORITY:
        picked.sort(key=lambda p: p[1].priority.rank)
    else:
        raise AssertionError(f"Unhandled sort key: {key!r}")

    return [t for _, t in picked]


def stats(tasks: Iterable[Task]) -> TodoStats:
    items = list(tasks)
    completed = sum(1 for t in items if t.completed)
    return TodoStats(total=len(items), completed=completed, active=len(items) - completed)
