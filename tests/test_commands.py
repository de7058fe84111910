# tests/test_commands.py

from __future__ import annotations

from datetime import date, timedelta

import pytest

from taskdesk.cli.commands import CommandRegistry, apply_fields, parse_due, parse_fields
from taskdesk.cli.commands import registry as command_registry
from taskdesk.connectors.console_connector import handle_line
from taskdesk.errors import TaskStoreError, TaskValidationError
from taskdesk.tasks.task_models import Priority, TaskDraft

TODAY = date(2026, 10, 19)


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert reg.handle(state, '/a x "y z"') == "h2:x,y z"
    assert reg.handle(state, "/BEE", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    reg.register("a", lambda state, args: "a", "a")
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")
    assert "Cannot parse" in (reg.handle(state, '/a "unclosed') or "")


def test_parse_due() -> None:
    assert parse_due("today", TODAY) == TODAY
    assert parse_due("Tomorrow", TODAY) == TODAY + timedelta(days=1)
    assert parse_due("+7", TODAY) == TODAY + timedelta(days=7)
    assert parse_due("2026-12-31", TODAY) == date(2026, 12, 31)
    with pytest.raises(ValueError):
        parse_due("someday", TODAY)


def test_parse_and_apply_fields() -> None:
    fields, words = parse_fields(["Buy", "milk", "p=high", "cat=Home", "due=+2", "desc=2 litres", "x=1"])
    assert words == ["Buy", "milk", "x=1"]
    assert fields == {"priority": "high", "category": "Home", "due": "+2", "description": "2 litres"}

    draft = apply_fields(TaskDraft(title="Buy milk"), fields, TODAY)
    assert draft.priority is Priority.HIGH
    assert draft.due_date == TODAY + timedelta(days=2)
    assert draft.category == "Home"
    assert draft.description == "2 litres"


def test_apply_fields_collects_errors() -> None:
    with pytest.raises(TaskValidationError) as exc_info:
        apply_fields(TaskDraft(title="x"), {"priority": "urgent", "due": "soon", "done": "maybe"})
    assert len(exc_info.value.errors) == 3


def test_add_list_edit_done_delete_flow(state) -> None:
    out = command_registry.handle(state, '/add "Write report" priority=high category=Work due=today')
    assert out is not None and out.startswith("Task added: Write report")
    command_registry.handle(state, "/add Water plants p=low c=Home due=+3")

    listing = command_registry.handle(state, "/list") or ""
    assert "Write report" in listing
    assert "Water plants" in listing
    assert "All tasks visible" in listing

    assert "Task updated: Final report" == (
        command_registry.handle(state, '/edit 1 title="Final report"') or ""
    ).split(" (")[0]
    assert command_registry.handle(state, "/done 1") == "Task completed: Final report"
    assert state.task_store.load_all().by_completion(True)[0].title == "Final report"

    assert command_registry.handle(state, "/filter Completed Tasks") == "Filter set: Completed Tasks"
    listing = command_registry.handle(state, "/list") or ""
    assert "Final report" in listing
    assert "Water plants" not in listing
    assert "Showing 1 of 2 tasks" in listing

    assert command_registry.handle(state, "/delete 1") == "Task deleted: Final report"
    assert state.tasks.count() == 1
    assert state.task_store.count_tasks() == 1


def test_filter_command_reports_unknown_label(state) -> None:
    reply = command_registry.handle(state, "/filter Someday") or ""
    assert "Unknown filter" in reply
    assert state.filter_label == "Someday"
    assert command_registry.handle(state, "/filter Category: Work") == "Filter set: Category: Work"
    assert command_registry.handle(state, "/filter") == "Current filter: Category: Work"


def test_filters_command_lists_categories(state) -> None:
    command_registry.handle(state, "/add Thing category=Garden")
    reply = command_registry.handle(state, "/filters") or ""
    assert "Overdue" in reply
    assert "Categories:" in reply
    assert "Garden" in reply


def test_handle_line_plain_text_searches(state) -> None:
    command_registry.handle(state, "/add Alpha category=Work")
    command_registry.handle(state, "/add Beta category=Home")

    reply = handle_line(state, "alp") or ""
    assert state.search_text == "alp"
    assert "Alpha" in reply
    assert "Beta" not in reply

    assert handle_line(state, "/search") == "Search cleared."
    assert handle_line(state, "   ") is None


def test_handle_line_renders_alerts(state, monkeypatch) -> None:
    reply = handle_line(state, "/add priority=high") or ""
    assert reply.startswith("[Invalid Input]")
    assert "- Title is required" in reply

    assert (handle_line(state, "/show nope") or "").startswith("[No Selection]")

    def boom(task):
        raise TaskStoreError("Failed to save task", OSError("read-only file system"))

    monkeypatch.setattr(state.task_store, "save", boom)
    reply = handle_line(state, "/add Something") or ""
    assert reply.startswith("[Storage Error] Failed to save task")
    assert "read-only file system" in reply
    assert state.tasks.count() == 0


def test_status_command(state) -> None:
    command_registry.handle(state, "/add One")
    command_registry.handle(state, "/add Two done=yes")
    reply = command_registry.handle(state, "/status") or ""
    assert "2 total, 1 completed (50%)" in reply
    assert str(state.task_store.db_path) in reply


def test_search_takes_raw_text(state) -> None:
    reply = command_registry.handle(state, "/search   don't panic ")
    assert reply is not None
    assert "don't panic" in reply
    assert state.search_text == "don't panic"

    assert command_registry.handle(state, "/search") == "Search cleared."
    assert state.search_text == ""
