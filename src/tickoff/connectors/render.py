# src/tickoff/connectors/render.py

"""Plain-text rendering of todos for the console, with optional ANSI colours.

Colour is used only when stdout is a TTY (or FORCE_COLOR=1) and not disabled
via NO_COLOR / TICKOFF_COLOR=false.
"""

from __future__ import annotations

import os
import sys

from ..todos.todo_models import Priority, Task, TodoStats

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
STRIKE = "\033[9m"

RED = "\033[31m"
YELLOW = "\033[33m"
GREEN = "\033[32m"
CYAN = "\033[36m"

PRIORITY_COLOR: dict[Priority, str] = {
    Priority.HIGH: RED,
    Priority.MEDIUM: YELLOW,
    Priority.LOW: GREEN,
}

ID_WIDTH = 8


def color_enabled(setting: bool = True) -> bool:
    if not setting or os.environ.get("NO_COLOR") is not None:
        return False
    force = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
    try:
        return force or sys.stdout.isatty()
    except Exception:
        return force


def color(text: str, *styles: str, enabled: bool = True) -> str:
    """Apply ANSI styles to a given text."""
    if not enabled or not styles:
        return text
    return "".join(styles) + text + RESET


def short_id(task_id: str) -> str:
    """Random suffix of generated ids ("1704103200000-3fa9c1" -> "3fa9c1")."""
    _, sep, tail = task_id.rpartition("-")
    if sep and tail:
        return tail
    return task_id[-ID_WIDTH:]


def format_task(task: Task, *, use_color: bool = False) -> str:
    mark = "[x]" if task.completed else "[ ]"
    text = color(task.text, DIM, STRIKE, enabled=use_color) if task.completed else task.text
    prio = color(task.priority.value.upper(), PRIORITY_COLOR[task.priority], enabled=use_color)

    parts = [f"{mark} {color(short_id(task.id), BOLD, enabled=use_color)}  {text}  ({prio})"]
    if task.due_date:
        parts.append(f"due {task.due_date}")
    if task.tags:
        parts.append(" ".join(color(f"#{t}", CYAN, enabled=use_color) for t in task.tags))
    line = "  ".join(parts)
    if task.notes:
        line += "\n      " + color(task.notes, DIM, enabled=use_color)
    return line


def format_tasks(tasks: list[Task], *, use_color: bool = False, empty_text: str = "No todos found") -> str:
    if not tasks:
        return color(empty_text, DIM, enabled=use_color)
    return "\n".join(format_task(t, use_color=use_color) for t in tasks)


def format_stats(s: TodoStats) -> str:
    return f"Total: {s.total}  Completed: {s.completed}  Active: {s.active}"
