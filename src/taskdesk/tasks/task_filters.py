# src/taskdesk/tasks/task_filters.py

"""
Filter + search engine.

A filter label (what the user picked from the filter list) and a free-text
search term are turned into one predicate over Task. Nothing is cached: the
visible subset is derived again on every call.

Category matching is case-insensitive everywhere, for both the explicit
"Category: X" form and a bare category label.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date

from .task_collection import TaskCollection
from .task_models import Priority, Task

TaskPredicate = Callable[[Task], bool]

FILTER_ALL = "All Tasks"
FILTER_ACTIVE = "Active Tasks"
FILTER_COMPLETED = "Completed Tasks"
FILTER_HIGH = "High Priority"
FILTER_MEDIUM = "Medium Priority"
FILTER_LOW = "Low Priority"
FILTER_DUE_TODAY = "Due Today"
FILTER_OVERDUE = "Overdue"

CATEGORY_PREFIX = "Category: "

BUILTIN_FILTERS: tuple[str, ...] = (
    FILTER_ALL,
    FILTER_ACTIVE,
    FILTER_COMPLETED,
    FILTER_HIGH,
    FILTER_MEDIUM,
    FILTER_LOW,
    FILTER_DUE_TODAY,
    FILTER_OVERDUE,
)

_PRIORITY_FILTERS = {
    FILTER_HIGH: Priority.HIGH,
    FILTER_MEDIUM: Priority.MEDIUM,
    FILTER_LOW: Priority.LOW,
}


def _match_all(task: Task) -> bool:
    return True


def _category_is(name: str) -> TaskPredicate:
    wanted = name.casefold()
    return lambda task: (task.category or "").casefold() == wanted


def filter_options(collection: TaskCollection) -> list[str]:
    """Built-in labels first, then every category currently in use."""
    out = list(BUILTIN_FILTERS)
    out.extend(c for c in collection.categories() if c not in BUILTIN_FILTERS)
    return out


def filter_predicate(
    label: str | None,
    categories: Iterable[str] = (),
    today: date | None = None,
) -> TaskPredicate:
    """
    Predicate for a filter label.

    Unknown labels (stale, malformed, None) mean "no restriction".
    """
    if label is None or label == FILTER_ALL:
        return _match_all

    if label == FILTER_ACTIVE:
        return lambda task: not task.completed
    if label == FILTER_COMPLETED:
        return lambda task: task.completed
    if label in _PRIORITY_FILTERS:
        wanted = _PRIORITY_FILTERS[label]
        return lambda task: task.priority == wanted
    if label == FILTER_DUE_TODAY:
        return lambda task: task.is_due_today(today)
    if label == FILTER_OVERDUE:
        return lambda task: task.is_overdue(today)

    if label.startswith(CATEGORY_PREFIX):
        return _category_is(label[len(CATEGORY_PREFIX):])

    known = {c.casefold() for c in categories if c}
    if label.casefold() in known:
        return _category_is(label)

    return _match_all


def search_predicate(term: str | None) -> TaskPredicate:
    needle = (term or "").strip().casefold()
    if not needle:
        return _match_all

    def matches(task: Task) -> bool:
        return (
            needle in (task.title or "").casefold()
            or needle in (task.description or "").casefold()
            or needle in (task.category or "").casefold()
        )

    return matches


def visible_predicate(
    label: str | None,
    term: str | None,
    categories: Iterable[str] = (),
    today: date | None = None,
) -> TaskPredicate:
    by_filter = filter_predicate(label, categories, today)
    by_search = search_predicate(term)
    return lambda task: by_filter(task) and by_search(task)


def visible_tasks(
    collection: TaskCollection,
    label: str | None,
    term: str | None = "",
    today: date | None = None,
) -> list[Task]:
    predicate = visible_predicate(label, term, collection.categories(), today)
    return [t for t in collection.all_tasks() if predicate(t)]
