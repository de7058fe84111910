# src/taskdesk/tasks/task_api.py

"""
Session workflows used by front-ends.

The rule everywhere: persist first, then touch the in-memory collection.
A failed store call raises TaskStoreError and leaves state.tasks as it was.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date

from ..core.state import AppState
from ..errors import TaskNotFoundError, TaskValidationError
from . import task_filters
from .task_models import Task, TaskDraft

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TaskSummary:
    total: int
    completed: int
    visible: int

    @property
    def progress(self) -> float:
        return self.completed / self.total if self.total else 0.0

    @property
    def status_text(self) -> str:
        if self.visible < self.total:
            return f"Showing {self.visible} of {self.total} tasks"
        return "All tasks visible"


def load_tasks(state: AppState) -> int:
    state.tasks = state.task_store.load_all()
    return state.tasks.count()


def find_task(state: AppState, ref: str, today: date | None = None) -> Task:
    """
    Resolve a user reference to a task.

    Accepted: a 1-based row number in the current visible list, a full id, or
    an unambiguous id prefix.
    """
    ref = (ref or "").strip()
    if not ref:
        raise TaskNotFoundError(ref)

    if ref.isdigit():
        rows = visible_tasks(state, today=today)
        idx = int(ref)
        if 1 <= idx <= len(rows):
            return rows[idx - 1]

    exact = state.tasks.get(ref)
    if exact is not None:
        return exact

    matches = [t for t in state.tasks if t.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    raise TaskNotFoundError(ref)


def save_task(state: AppState, draft: TaskDraft, task_id: str | None = None) -> Task:
    """
    Create (task_id=None) or update a task from a draft.

    Raises TaskValidationError before anything is touched, TaskNotFoundError
    for an unknown task_id, TaskStoreError if persisting fails.
    """
    errors = draft.validate()
    if errors:
        raise TaskValidationError(errors)

    if task_id is None:
        candidate = Task()
    else:
        existing = state.tasks.get(task_id)
        if existing is None:
            raise TaskNotFoundError(task_id)
        candidate = dataclasses.replace(existing)

    draft.apply_to(candidate)
    state.task_store.save(candidate)

    replaced = state.tasks.upsert(candidate)
    logger.info("Task %s %s: %s", candidate.id, "updated" if replaced else "created", candidate.title)
    return candidate


def set_completed(state: AppState, task_id: str, completed: bool) -> Task:
    existing = state.tasks.get(task_id)
    if existing is None:
        raise TaskNotFoundError(task_id)

    candidate = dataclasses.replace(existing, completed=completed)
    state.task_store.save(candidate)
    state.tasks.upsert(candidate)
    return candidate


def delete_task(state: AppState, task_id: str) -> bool:
    """Delete from storage, then from memory. False when neither held the task."""
    removed_stored = state.task_store.delete_by_id(task_id)
    removed_memory = state.tasks.remove_by_id(task_id)
    if removed_memory and not removed_stored:
        logger.warning("Task %s was in memory but not in storage", task_id)
    return removed_stored or removed_memory


def set_filter(state: AppState, label: str | None) -> str:
    state.filter_label = label or task_filters.FILTER_ALL
    return state.filter_label


def set_search(state: AppState, text: str | None) -> str:
    state.search_text = (text or "").strip()
    return state.search_text


def visible_tasks(state: AppState, today: date | None = None) -> list[Task]:
    return task_filters.visible_tasks(state.tasks, state.filter_label, state.search_text, today)


def summarize(state: AppState, today: date | None = None) -> TaskSummary:
    return TaskSummary(
        total=state.tasks.count(),
        completed=state.tasks.completed_count(),
        visible=len(visible_tasks(state, today)),
    )
