# src/taskdesk/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..errors import TaskDeskError, TaskStoreError, UserAlert, alert_for
from ..tasks.task_api import set_search

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str) -> str | None:
    """
    Run one console line and return the text to show.

    Plain text (not starting with '/') is a search shortcut. Errors come back
    as rendered alerts instead of exceptions.
    """
    line = line.strip()
    if not line:
        return None

    try:
        if not line.startswith("/"):
            set_search(state, line)
            line = "/list"
        return command_registry.handle(state, line, emit=_print_ts)
    except TaskStoreError as e:
        logger.error("Storage operation failed: %s", e)
        return alert_for(e).render()
    except TaskDeskError as e:
        logger.info("Command rejected: %s", e)
        return alert_for(e).render()
    except Exception:
        logger.exception("Command handler crashed.")
        return UserAlert("Error", "Internal error while handling a command.").render()


def run_console_loop(state: AppState) -> None:
    logger.info("Console started (tasks=%d).", state.tasks.count())
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskdesk"))
    _print_ts(f"[{app_name}] Use /help for commands, plain text to search, /exit to quit.\n")

    while True:
        try:
            user_input = input(f"{app_name}> ").strip()
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
            print(reply)

    logger.info("Console finished.")
