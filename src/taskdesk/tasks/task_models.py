# src/taskdesk/tasks/task_models.py

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"

STATUS_COMPLETED = "Completed"
STATUS_OVERDUE = "Overdue"
STATUS_TODAY = "Today"
STATUS_ACTIVE = "Active"


class Priority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw.strip().upper())
        except ValueError:
            logger.warning("Unknown priority token %r in storage; using MEDIUM", raw)
            return cls.MEDIUM

    @classmethod
    def parse(cls, text: str) -> Priority:
        """Parse user input: 'high', 'H', 'Medium', ..."""
        token = (text or "").strip().upper()
        for p in cls:
            if token in (p.value, p.value[0]):
                return p
        raise ValueError(f"Unknown priority: {text!r} (expected low, medium or high)")


def new_task_id() -> str:
    return str(uuid.uuid4())


def _resolve_today(today: date | None) -> date:
    return date.today() if today is None else today


def _tomorrow() -> date:
    return date.today() + timedelta(days=1)


@dataclass(eq=False, slots=True)
class Task:
    """
    A single task.

    Identity is the `id` alone: two Task objects with the same id are the same
    task, whatever their other fields say. The id is write-once; pass it as
    `id=` when rebuilding a task from storage.

    Overdue / due-today status is derived on every call so it stays correct
    across midnight.
    """

    title: str = ""
    description: str | None = ""
    priority: Priority = Priority.MEDIUM
    due_date: date = field(default_factory=_tomorrow)
    completed: bool = False
    category: str | None = DEFAULT_CATEGORY

    id: str = field(default_factory=new_task_id, kw_only=True)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "id" and hasattr(self, "id"):
            raise AttributeError("Task.id is immutable once assigned")
        object.__setattr__(self, name, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def is_overdue(self, today: date | None = None) -> bool:
        return not self.completed and self.due_date < _resolve_today(today)

    def is_due_today(self, today: date | None = None) -> bool:
        return self.due_date == _resolve_today(today)

    def status_label(self, today: date | None = None) -> str:
        today = _resolve_today(today)
        if self.completed:
            return STATUS_COMPLETED
        if self.is_overdue(today):
            return STATUS_OVERDUE
        if self.is_due_today(today):
            return STATUS_TODAY
        return STATUS_ACTIVE


@dataclass(slots=True)
class TaskDraft:
    """
    Field values gathered by a front-end before they touch a real Task.

    Validation happens on the draft so a rejected edit never mutates the
    task that is already in the collection.
    """

    title: str | None = ""
    description: str | None = ""
    priority: Priority = Priority.MEDIUM
    due_date: date | None = field(default_factory=_tomorrow)
    category: str | None = DEFAULT_CATEGORY
    completed: bool = False

    @classmethod
    def from_task(cls, task: Task) -> TaskDraft:
        return cls(
            title=task.title,
            description=task.description,
            priority=task.priority,
            due_date=task.due_date,
            category=task.category,
            completed=task.completed,
        )

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.title or not self.title.strip():
            errors.append("Title is required")
        if not self.category or not self.category.strip():
            errors.append("Category must be selected")
        if self.due_date is None:
            errors.append("Due Date must be selected")
        return errors

    def apply_to(self, task: Task) -> Task:
        if self.due_date is None:
            raise ValueError("due_date is required")
        task.title = (self.title or "").strip()
        task.description = self.description or ""
        task.priority = self.priority
        task.due_date = self.due_date
        task.category = (self.category or "").strip()
        task.completed = bool(self.completed)
        return task
