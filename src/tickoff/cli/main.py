# src/tickoff/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (startup load included), then runs the
console REPL until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.errors import PersistenceError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    log_dir = getattr(settings, "data_dir", ".local/tickoff")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s (log level %s)...", getattr(settings, "app_name", "tickoff"), level_name)

    # IMPORTANT: reuse same settings object
    try:
        state = create_initial_state(settings=settings)
    except PersistenceError as e:
        logger.error("Cannot open todo storage: %s", e)
        raise SystemExit(f"Cannot open todo storage: {e}") from e

    try:
        run_console_loop(state)
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
