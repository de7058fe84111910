# tests/test_task_collection.py

from __future__ import annotations

from datetime import date, timedelta

from taskdesk.tasks.task_collection import TaskCollection
from taskdesk.tasks.task_models import Priority, Task

TODAY = date(2026, 10, 19)


def _sample() -> tuple[TaskCollection, list[Task]]:
    tasks = [
        Task("a", priority=Priority.HIGH, category="Work", due_date=TODAY - timedelta(days=1)),
        Task("b", priority=Priority.LOW, category="home", completed=True, due_date=TODAY - timedelta(days=2)),
        Task("c", priority=Priority.HIGH, category="Home", due_date=TODAY + timedelta(days=1)),
    ]
    return TaskCollection(tasks=tasks), tasks


def test_add_none_is_rejected() -> None:
    coll = TaskCollection()
    assert coll.add(None) is False
    assert coll.count() == 0


def test_add_appends_in_order() -> None:
    coll = TaskCollection()
    a, b = Task("a"), Task("b")
    assert coll.add(a)
    assert coll.count() == 1
    assert coll.add(b)
    assert coll.all_tasks() == [a, b]
    assert len(coll) == 2


def test_add_allows_duplicate_ids() -> None:
    coll = TaskCollection()
    t = Task("a")
    coll.add(t)
    coll.add(Task("copy", id=t.id))
    assert coll.count() == 2


def test_all_tasks_is_a_copy() -> None:
    coll, tasks = _sample()
    snapshot = coll.all_tasks()
    snapshot.clear()
    snapshot.append(Task("intruder"))
    assert coll.all_tasks() == tasks


def test_remove_and_remove_by_id() -> None:
    coll, (a, b, c) = _sample()
    assert coll.remove(Task("other title", id=a.id))
    assert coll.count() == 2
    assert not coll.remove(a)
    assert not coll.remove(None)

    assert not coll.remove_by_id("missing")
    assert coll.count() == 2
    assert coll.remove_by_id(b.id)
    assert coll.all_tasks() == [c]


def test_upsert_replaces_in_place() -> None:
    coll, (a, b, c) = _sample()
    replacement = Task("b2", id=b.id)
    assert coll.upsert(replacement) is True
    assert [t.title for t in coll.all_tasks()] == ["a", "b2", "c"]

    fresh = Task("d")
    assert coll.upsert(fresh) is False
    assert coll.all_tasks()[-1] is fresh


def test_queries_preserve_order_and_do_not_mutate() -> None:
    coll, (a, b, c) = _sample()
    assert coll.by_completion(False) == [a, c]
    assert coll.by_completion(True) == [b]
    assert coll.by_priority(Priority.HIGH) == [a, c]
    assert coll.by_priority(Priority.MEDIUM) == []
    assert coll.by_category("HOME") == [b, c]
    assert coll.overdue(TODAY) == [a]
    assert coll.count() == 3


def test_get_contains_and_categories() -> None:
    coll, (a, _, _) = _sample()
    assert coll.get(a.id) is a
    assert coll.get("nope") is None
    assert a in coll
    assert a.id in coll
    assert "nope" not in coll
    assert coll.categories() == ["General", "Home", "home", "Work"]
    assert coll.completed_count() == 1
