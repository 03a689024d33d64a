# src/tickoff/core/errors.py

"""
Error taxonomy for the todo core.

None of these is fatal: callers report them to the user and keep the
in-memory collection as the source of truth for the rest of the session.
"""

from __future__ import annotations


class TodoError(Exception):
    """Base class for all todo-core errors."""


class ValidationError(TodoError, ValueError):
    """Invalid user input (empty text, empty/duplicate tag, bad date...). Nothing was changed."""


class CorruptStateError(TodoError):
    """Stored payload cannot be decoded into a list of tasks."""


class PersistenceError(TodoError):
    """Storage could not be written (the in-memory mutation stays in effect) or read."""
