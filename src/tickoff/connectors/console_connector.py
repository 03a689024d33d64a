# src/tickoff/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..todos.todo_query import stats
from ..todos.todo_repository import ChangeEvent
from .render import format_stats

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str) -> str | None:
    """
    One REPL step: slash commands go to the registry, plain text becomes a new todo.
    Returns the reply to print (None for blank input).
    """
    line = line.strip()
    if not line:
        return None

    def emit(text: str) -> None:
        _print_ts(text)

    try:
        if line.startswith("/"):
            return command_registry.handle(state, line, emit=emit)
        return command_registry.handle(state, f"/add {line}", emit=emit)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


def run_console_loop(state: AppState) -> None:
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "tickoff"))
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type a todo to add it. Use /help for commands. Use /exit to quit.\n")

    for notice in state.pending_notices:
        _print_ts(notice)
    state.pending_notices.clear()
    _print_ts(format_stats(stats(state.repository.list())))

    changed: list[ChangeEvent] = []
    unsubscribe = state.repository.subscribe(changed.append)

    try:
        while True:
            try:
                user_input = input(">>> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            reply = handle_line(state, user_input)
            if reply is not None:
                _print_ts(reply)

            # Pull a fresh summary only when the collection actually changed.
            if changed:
                changed.clear()
                _print_ts(format_stats(stats(state.repository.list())))
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
