"""tickoff: a local todo list manager (add, tag, prioritize, filter, sort, persist)."""

__version__ = "0.1.0"
