# src/taskdesk/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import date, timedelta
from typing import cast

from ..core.state import AppState
from ..errors import TaskValidationError
from ..tasks import task_api
from ..tasks.task_filters import BUILTIN_FILTERS, filter_options
from ..tasks.task_models import Priority, Task, TaskDraft

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

DATE_FORMAT = "%b %d, %Y"

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw: bool = False,
    ) -> None:
        """
        raw=True: the handler gets the rest of the line verbatim as a single
        argument (no quote parsing), for free-text commands like /search.
        """
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        names = [key, *(a.lower() for a in aliases)]
        for alias in names[1:]:
            self._handlers[alias] = handler
        if raw:
            self._raw.update(names)

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like '/command args'.
        Returns a reply string or None if not a command.

        Arguments are split shell-style, so quoted values may contain spaces,
        except for raw commands. Domain errors from handlers propagate.
        """
        if not line.startswith("/"):
            return None

        head = line[1:].split(None, 1)
        if not head:
            return "Empty command. Use /help to list available commands."

        name = head[0].lower()
        rest = head[1].strip() if len(head) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if name in self._raw:
            args = [rest] if rest else []
        else:
            try:
                args = shlex.split(rest)
            except ValueError as e:
                return f"Cannot parse command: {e}"

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument parsing ----

_FIELD_ALIASES = {
    "title": "title",
    "t": "title",
    "description": "description",
    "desc": "description",
    "d": "description",
    "priority": "priority",
    "prio": "priority",
    "p": "priority",
    "due": "due",
    "category": "category",
    "cat": "category",
    "c": "category",
    "done": "done",
    "completed": "done",
}

_TRUE_WORDS = {"1", "true", "yes", "y", "on"}
_FALSE_WORDS = {"0", "false", "no", "n", "off"}


def parse_due(text: str, today: date | None = None) -> date:
    """ISO date, 'today', 'tomorrow' or '+N' (days from today)."""
    today = today or date.today()
    raw = text.strip().lower()
    if raw == "today":
        return today
    if raw == "tomorrow":
        return today + timedelta(days=1)
    if raw.startswith("+") and raw[1:].isdigit():
        return today + timedelta(days=int(raw[1:]))
    return date.fromisoformat(raw)


def parse_fields(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Split 'key=value' tokens from plain words."""
    fields: dict[str, str] = {}
    words: list[str] = []
    for arg in args:
        key, sep, value = arg.partition("=")
        canonical = _FIELD_ALIASES.get(key.strip().lower()) if sep else None
        if canonical is None:
            words.append(arg)
        else:
            fields[canonical] = value
    return fields, words


def apply_fields(draft: TaskDraft, fields: dict[str, str], today: date | None = None) -> TaskDraft:
    errors: list[str] = []

    if "title" in fields:
        draft.title = fields["title"]
    if "description" in fields:
        draft.description = fields["description"]
    if "category" in fields:
        draft.category = fields["category"]
    if "priority" in fields:
        try:
            draft.priority = Priority.parse(fields["priority"])
        except ValueError as e:
            errors.append(str(e))
    if "due" in fields:
        try:
            draft.due_date = parse_due(fields["due"], today)
        except ValueError:
            errors.append(f"Due Date must be YYYY-MM-DD, today, tomorrow or +N (got {fields['due']!r})")
    if "done" in fields:
        flag = fields["done"].strip().lower()
        if flag in _TRUE_WORDS:
            draft.completed = True
        elif flag in _FALSE_WORDS:
            draft.completed = False
        else:
            errors.append(f"done must be yes or no (got {fields['done']!r})")

    if errors:
        raise TaskValidationError(errors)
    return draft


# ---- rendering ----

def _short_id(task: Task) -> str:
    return task.id[:8]


def format_task_row(index: int, task: Task, today: date | None = None) -> str:
    mark = "[x]" if task.completed else "[ ]"
    due = task.due_date.strftime(DATE_FORMAT)
    return (
        f"{index:>3}. {mark} {task.title:<30.30} {task.priority.value:<6} "
        f"{(task.category or ''):<12.12} {due:<13} {task.status_label(today):<9} {_short_id(task)}"
    )


def format_task_details(task: Task, today: date | None = None) -> str:
    return "\n".join(
        [
            f"Task {task.id}",
            f"  Title:       {task.title}",
            f"  Description: {task.description or ''}",
            f"  Priority:    {task.priority.value}",
            f"  Category:    {task.category or ''}",
            f"  Due:         {task.due_date.strftime(DATE_FORMAT)} ({task.due_date.isoformat()})",
            f"  Status:      {task.status_label(today)}",
        ]
    )


def _summary_line(state: AppState) -> str:
    s = task_api.summarize(state)
    return f"{s.visible} tasks | {s.status_text} | {s.progress * 100:.0f}% completed"


# ---- commands ----

def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list  -> tasks matching the current filter and search
    """
    rows = task_api.visible_tasks(state)
    header = f"Filter: {state.filter_label}"
    if state.search_text:
        header += f" | Search: {state.search_text!r}"
    if not rows:
        return f"{header}\n  (no tasks)\n{_summary_line(state)}"
    lines = [header]
    lines.extend(format_task_row(i, t) for i, t in enumerate(rows, start=1))
    lines.append(_summary_line(state))
    return "\n".join(lines)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <row|id>"
    return format_task_details(task_api.find_task(state, args[0]))


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add Buy milk priority=high due=tomorrow category=Home desc="2 litres"
    """
    fields, words = parse_fields(args)
    if "title" not in fields and words:
        fields["title"] = " ".join(words)
    draft = apply_fields(TaskDraft(), fields)
    task = task_api.save_task(state, draft)
    return f"Task added: {task.title} ({_short_id(task)})"


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <row|id> title="New title" priority=low ...
    """
    if not args:
        return "Usage: /edit <row|id> key=value ..."
    task = task_api.find_task(state, args[0])
    fields, words = parse_fields(args[1:])
    if words:
        return f"Unexpected arguments: {' '.join(words)}. Use key=value pairs."
    if not fields:
        return "Nothing to change. Use key=value pairs (title, desc, priority, due, category, done)."
    draft = apply_fields(TaskDraft.from_task(task), fields)
    saved = task_api.save_task(state, draft, task_id=task.id)
    return f"Task updated: {saved.title} ({_short_id(saved)})"


def _set_done(state: AppState, args: list[str], completed: bool) -> str:
    if not args:
        return f"Usage: /{'done' if completed else 'undone'} <row|id>"
    task = task_api.find_task(state, args[0])
    saved = task_api.set_completed(state, task.id, completed)
    return f"Task {'completed' if completed else 'reopened'}: {saved.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    return _set_done(state, args, True)


def cmd_undone(state: AppState, args: list[str]) -> str:
    return _set_done(state, args, False)


def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /delete <row|id>"
    task = task_api.find_task(state, args[0])
    if emit is not None:
        emit(f"Deleting task '{task.title}'...")
    if task_api.delete_task(state, task.id):
        return f"Task deleted: {task.title}"
    return f"Task was already gone: {task.title}"


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                -> show current filter
    /filter Overdue        -> apply a filter (see /filters)
    /filter Category: Work -> category filter
    """
    if not args:
        return f"Current filter: {state.filter_label}"
    label = task_api.set_filter(state, " ".join(args))
    options = filter_options(state.tasks)
    if label not in options and not label.startswith("Category: ") and label.casefold() not in {
        o.casefold() for o in options
    }:
        return f"Unknown filter {label!r}; showing all tasks. Use /filters to list options."
    return f"Filter set: {label}"


def cmd_filters(state: AppState, args: list[str]) -> str:
    options = filter_options(state.tasks)
    lines = ["Filters:"]
    lines.extend(f"  {o}" for o in options if o in BUILTIN_FILTERS)
    categories = [o for o in options if o not in BUILTIN_FILTERS]
    if categories:
        lines.append("Categories:")
        lines.extend(f"  {c}" for c in categories)
    return "\n".join(lines)


def cmd_search(state: AppState, args: list[str]) -> str:
    term = task_api.set_search(state, " ".join(args))
    if not term:
        return "Search cleared."
    return f"Search: {term!r} ({len(task_api.visible_tasks(state))} matches)"


def cmd_status(state: AppState, args: list[str]) -> str:
    s = task_api.summarize(state)
    return (
        "Status:\n"
        f"  Tasks: {s.total} total, {s.completed} completed ({s.progress * 100:.0f}%)\n"
        f"  Visible: {s.visible} ({s.status_text})\n"
        f"  Filter: {state.filter_label}\n"
        f"  Search: {state.search_text or '-'}\n"
        f"  Database: {state.task_store.db_path}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List tasks matching the current filter/search.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <row|id>.")
registry.register(
    "add", cmd_add, help_text="Add a task: /add <title> [priority=..] [due=..] [category=..] [desc=..]."
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <row|id> key=value ...")
registry.register("done", cmd_done, help_text="Mark a task completed: /done <row|id>.")
registry.register("undone", cmd_undone, help_text="Mark a task active again: /undone <row|id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <row|id>.", aliases=["rm"])
registry.register("filter", cmd_filter, help_text="Show or set the filter: /filter <label>.")
registry.register("filters", cmd_filters, help_text="List available filters and categories.")
registry.register(
    "search", cmd_search, help_text="Search title/description/category: /search <text>.", raw=True
)
registry.register("status", cmd_status, help_text="Show totals and completion rate.")
