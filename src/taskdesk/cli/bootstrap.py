# src/taskdesk/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- opens the task store (fatal on failure) and loads every task into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..errors import StorageInitError
from ..tasks import task_api
from ..tasks.task_filters import filter_options
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    # The database directory itself is created by TaskStore.initialize().
    try:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.exception("Cannot create data directory %s", settings.data_dir)
        raise StorageInitError(f"Cannot create data directory {settings.data_dir}", e) from e


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Raises StorageInitError if the data directory or database cannot be
    opened or created, and TaskStoreError if the stored tasks cannot be
    loaded; the application cannot do anything useful without them.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_db_path)
    store.initialize()

    state = AppState(settings=settings, task_store=store)
    total = task_api.load_tasks(state)

    default_filter = getattr(settings, "default_filter", None)
    if default_filter:
        if default_filter not in filter_options(state.tasks):
            logger.warning("Default filter %r is not a known filter; it will show all tasks", default_filter)
        task_api.set_filter(state, default_filter)

    logger.info("Session ready: %d tasks from %s", total, store.db_path)
    return state
