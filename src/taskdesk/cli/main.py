# src/taskdesk/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (open store, load tasks), then runs the
console REPL in the main thread.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import TaskStoreError, alert_for
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(
        log_dir=settings.log_dir,
        console_level=console_level,
        db_path=settings.tasks_db_path,
    )

    logger.info("Starting %s...", settings.app_name)

    try:
        state = create_initial_state(settings=settings)
    except TaskStoreError as e:
        # Covers StorageInitError and a failed initial load (e.g. a corrupt row).
        logger.critical("Application initialization failed: %s", e)
        print(alert_for(e, summary="Failed to initialize application").render(), file=sys.stderr)
        return 1

    try:
        run_console_loop(state)
    finally:
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
