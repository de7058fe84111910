# src/taskdesk/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.task_collection import TaskCollection
from ..tasks.task_filters import FILTER_ALL
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything one session owns.

    There is no module-level collection: front-ends receive this object and
    pass it into every workflow in tasks.task_api.
    """

    # Store Settings on the state for easy access in other modules later.
    settings: object

    task_store: TaskStore
    tasks: TaskCollection = field(default_factory=TaskCollection)

    # Current view selection; re-applied on every listing.
    filter_label: str = FILTER_ALL
    search_text: str = ""
