# src/tickoff/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, cast

from ..connectors.render import color_enabled, format_stats, format_task, format_tasks
from ..core.errors import PersistenceError, ValidationError
from ..core.state import AppState
from ..todos.todo_models import Priority, SortKey, TodoFilter
from ..todos.todo_query import query, stats

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

NOTICE_ADDED = "Todo added successfully"
NOTICE_DELETED = "Todo deleted"
NOTICE_EMPTY_TEXT = "Please enter a todo item"
NOTICE_SAVE_FAILED = "Failed to save todos"
NOTICE_UPDATE_FAILED = "Failed to update todo"

NOTES_SEPARATOR = "//"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        lines.append("Anything that is not a command is added as a new todo.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _use_color(state: AppState) -> bool:
    return color_enabled(bool(getattr(state.settings, "color", False)))


def resolve_task_id(state: AppState, ref: str) -> tuple[str | None, str | None]:
    """
    Resolve a user-typed reference to a task id.

    Accepts the full id, or a unique prefix/suffix of it (the console shows
    the random suffix). Returns (task_id, None) or (None, error message).
    """
    ref = ref.strip()
    if not ref:
        return None, "Missing todo id."
    ids = state.repository.ids()
    if ref in ids:
        return ref, None
    matches = [i for i in ids if i.startswith(ref) or i.endswith(ref)]
    if len(matches) == 1:
        return matches[0], None
    if not matches:
        return None, f"No todo with id {ref!r}."
    return None, f"Id {ref!r} is ambiguous ({len(matches)} matches)."


def parse_add_args(args: list[str]) -> dict[str, Any]:
    """
    Parse `/add` arguments:

        Buy milk !high #shop #home @2024-05-01 // lactose free

    `!` priority, `#` tag, `@` due date; everything after `//` is notes.
    Invalid priority/date raises ValidationError.
    """
    notes: str | None = None
    if NOTES_SEPARATOR in args:
        idx = args.index(NOTES_SEPARATOR)
        notes = " ".join(args[idx + 1 :])
        args = args[:idx]

    words: list[str] = []
    tags: list[str] = []
    priority = Priority.MEDIUM
    due_date: str | None = None

    for tok in args:
        if len(tok) > 1 and tok.startswith("!"):
            priority = Priority.parse(tok[1:])
        elif len(tok) > 1 and tok.startswith("#"):
            tags.append(tok[1:])
        elif len(tok) > 1 and tok.startswith("@"):
            due_date = tok[1:]
        else:
            words.append(tok)

    return {
        "text": " ".join(words),
        "priority": priority,
        "tags": tags,
        "due_date": due_date,
        "notes": notes,
    }


def _save_failed(message: str, exc: PersistenceError) -> str:
    return f"{message}\n{NOTICE_SAVE_FAILED}: {exc}"


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <text> [!low|!medium|!high] [#tag ...] [@YYYY-MM-DD] [// notes]
    """
    try:
        fields = parse_add_args(args)
    except ValidationError as e:
        return str(e)
    if not fields["text"].strip():
        return NOTICE_EMPTY_TEXT

    try:
        task = state.repository.add(**fields)
    except ValidationError as e:
        return str(e)
    except PersistenceError as e:
        # the task is in memory even though the write failed
        added = state.repository.list()[-1]
        return _save_failed(f"{NOTICE_ADDED}\n{format_task(added, use_color=_use_color(state))}", e)

    logger.debug("Added via console id=%s", task.id)
    return f"{NOTICE_ADDED}\n{format_task(task, use_color=_use_color(state))}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                         -> current view
    /list active|completed|all    -> switch filter, then show
    """
    if args:
        try:
            state.view.filter = TodoFilter.parse(args[0])
        except ValidationError as e:
            return str(e)

    view = state.view
    tasks = query(state.repository.list(), view.filter, view.search_text, view.sort_key)
    header = f"Todos ({view.filter.value}, sorted by {view.sort_key.value}"
    if view.search_text:
        header += f", search {view.search_text!r}"
    header += "):"
    return "\n".join([header, format_tasks(tasks, use_color=_use_color(state))])


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Filter is {state.view.filter.value}. Use /filter all|active|completed."
    try:
        state.view.filter = TodoFilter.parse(args[0])
    except ValidationError as e:
        return str(e)
    return f"Filter set to {state.view.filter.value}."


def cmd_sort(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Sorted by {state.view.sort_key.value}. Use /sort createdAt|dueDate|priority."
    try:
        state.view.sort_key = SortKey.parse(args[0])
    except ValidationError as e:
        return str(e)
    return f"Sorting by {state.view.sort_key.value}."


def cmd_search(state: AppState, args: list[str]) -> str:
    state.view.search_text = " ".join(args)
    if not state.view.search_text:
        return "Search cleared."
    return f"Searching for {state.view.search_text!r}."


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task_id, err = resolve_task_id(state, args[0])
    if task_id is None:
        return err or NOTICE_UPDATE_FAILED
    try:
        task = state.repository.toggle(task_id)
    except PersistenceError as e:
        return _save_failed("Todo updated", e)
    if task is None:
        return NOTICE_UPDATE_FAILED
    return format_task(task, use_color=_use_color(state))


def cmd_remove(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    task_id, err = resolve_task_id(state, args[0])
    if task_id is None:
        return err or NOTICE_UPDATE_FAILED
    try:
        state.repository.remove(task_id)
    except PersistenceError as e:
        return _save_failed(NOTICE_DELETED, e)
    return NOTICE_DELETED


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <id> <new text>"
    task_id, err = resolve_task_id(state, args[0])
    if task_id is None:
        return err or NOTICE_UPDATE_FAILED
    try:
        task = state.repository.edit_text(task_id, " ".join(args[1:]))
    except ValidationError as e:
        return str(e)
    except PersistenceError as e:
        return _save_failed("Todo updated", e)
    if task is None:
        return NOTICE_UPDATE_FAILED
    return format_task(task, use_color=_use_color(state))


def cmd_tag(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /tag <id> <tag>"
    task_id, err = resolve_task_id(state, args[0])
    if task_id is None:
        return err or NOTICE_UPDATE_FAILED
    try:
        task = state.repository.add_tag(task_id, " ".join(args[1:]).lstrip("#"))
    except ValidationError as e:
        return str(e)
    except PersistenceError as e:
        return _save_failed("Tag added", e)
    if task is None:
        return NOTICE_UPDATE_FAILED
    return format_task(task, use_color=_use_color(state))


def cmd_untag(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /untag <id> <tag>"
    task_id, err = resolve_task_id(state, args[0])
    if task_id is None:
        return err or NOTICE_UPDATE_FAILED
    try:
        task = state.repository.remove_tag(task_id, " ".join(args[1:]).lstrip("#"))
    except PersistenceError as e:
        return _save_failed("Tag removed", e)
    if task is None:
        return NOTICE_UPDATE_FAILED
    return format_task(task, use_color=_use_color(state))


def cmd_stats(state: AppState, args: list[str]) -> str:
    return format_stats(stats(state.repository.list()))


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    storage_dir = getattr(settings, "storage_dir", None)
    persist_empty = "ON" if getattr(settings, "persist_empty", True) else "OFF"
    return (
        "Status:\n"
        f"  Todos: {len(state.repository)}\n"
        f"  Storage: {storage_dir or '(memory)'} slot={getattr(settings, 'storage_key', 'todos')}\n"
        f"  Persist empty list: {persist_empty}\n"
        f"  View: filter={state.view.filter.value} sort={state.view.sort_key.value}"
        f" search={state.view.search_text!r}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a todo: /add <text> [!low|!medium|!high] [#tag] [@YYYY-MM-DD] [// notes].",
    aliases=["a"],
)
registry.register(
    "list", cmd_list, help_text="List todos: /list [all|active|completed].", aliases=["ls"]
)
registry.register("filter", cmd_filter, help_text="Set filter: /filter all|active|completed.")
registry.register("sort", cmd_sort, help_text="Set sort: /sort createdAt|dueDate|priority.")
registry.register("search", cmd_search, help_text="Search todo text: /search [text] (empty clears).")
registry.register("done", cmd_toggle, help_text="Toggle completed: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_remove, help_text="Delete a todo: /rm <id>.", aliases=["del"])
registry.register("edit", cmd_edit, help_text="Edit text: /edit <id> <new text>.")
registry.register("tag", cmd_tag, help_text="Add a tag: /tag <id> <tag>.")
registry.register("untag", cmd_untag, help_text="Remove a tag: /untag <id> <tag>.")
registry.register("stats", cmd_stats, help_text="Show total/completed/active counts.")
registry.register("status", cmd_status, help_text="Show storage and view settings.")
