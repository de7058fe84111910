# src/taskdesk/tasks/task_collection.py

from __future__ import annotations

from collections.abc import Iterator
from datetime import date

from .task_models import DEFAULT_CATEGORY, Priority, Task


class TaskCollection:
    """
    In-memory, insertion-ordered set of tasks owned by one session.

    Queries return new lists and never mutate the collection. `add` does not
    reject a duplicate id; workflows use `upsert` to keep ids unique.
    """

    def __init__(self, name: str = "All Tasks", tasks: list[Task] | None = None) -> None:
        self.name = name
        self._tasks: list[Task] = []
        for t in tasks or []:
            self.add(t)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Task):
            return item in self._tasks
        if isinstance(item, str):
            return any(t.id == item for t in self._tasks)
        return False

    def __repr__(self) -> str:
        return f"TaskCollection(name={self.name!r}, count={len(self._tasks)})"

    # ---- mutation ----

    def add(self, task: Task | None) -> bool:
        if task is None:
            return False
        self._tasks.append(task)
        return True

    def remove(self, task: Task | None) -> bool:
        if task is None:
            return False
        try:
            self._tasks.remove(task)
        except ValueError:
            return False
        return True

    def remove_by_id(self, task_id: str) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        return len(self._tasks) != before

    def upsert(self, task: Task) -> bool:
        """Replace the task with the same id in place, else append. True if replaced."""
        for i, existing in enumerate(self._tasks):
            if existing == task:
                self._tasks[i] = task
                return True
        self._tasks.append(task)
        return False

    # ---- queries ----

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def by_completion(self, completed: bool) -> list[Task]:
        return [t for t in self._tasks if t.completed == completed]

    def by_priority(self, priority: Priority) -> list[Task]:
        return [t for t in self._tasks if t.priority == priority]

    def by_category(self, category: str) -> list[Task]:
        wanted = (category or "").casefold()
        return [t for t in self._tasks if (t.category or "").casefold() == wanted]

    def overdue(self, today: date | None = None) -> list[Task]:
        return [t for t in self._tasks if t.is_overdue(today)]

    def categories(self) -> list[str]:
        seen = {DEFAULT_CATEGORY}
        seen.update(t.category for t in self._tasks if t.category)
        return sorted(seen, key=lambda c: (c.casefold(), c))

    def completed_count(self) -> int:
        return sum(1 for t in self._tasks if t.completed)

    def count(self) -> int:
        return len(self._tasks)
