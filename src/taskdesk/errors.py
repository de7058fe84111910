# src/taskdesk/errors.py

"""
Domain errors and user-facing alerts.

Storage code raises TaskStoreError subclasses only, so callers never need to
know about sqlite3. The console turns any of these into a UserAlert
(title / summary / detail) before showing it.
"""

from __future__ import annotations

from dataclasses import dataclass


class TaskDeskError(Exception):
    """Base class for all taskdesk errors."""


class TaskValidationError(TaskDeskError):
    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid task")


class TaskNotFoundError(TaskDeskError):
    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"No task matches {ref!r}")


class TaskStoreError(TaskDeskError):
    """
    A storage operation failed.

    The low-level exception is chained (raise ... from exc) and also kept on
    `.cause` for diagnostics.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class StorageInitError(TaskStoreError):
    """The database could not be opened or created. Fatal at startup."""


class StoreNotInitializedError(TaskStoreError):
    def __init__(self) -> None:
        super().__init__("TaskStore.initialize() must succeed before use")


@dataclass(frozen=True, slots=True)
class UserAlert:
    title: str
    summary: str
    detail: str = ""

    def render(self) -> str:
        lines = [f"[{self.title}] {self.summary}"]
        if self.detail:
            lines.extend(f"  {line}" for line in self.detail.splitlines() if line.strip())
        return "\n".join(lines)


def _cause_text(exc: TaskStoreError) -> str:
    if exc.cause is not None:
        return str(exc.cause).strip() or type(exc.cause).__name__
    return str(exc)


def alert_for(exc: BaseException, *, summary: str | None = None) -> UserAlert:
    """Map an exception to a human-readable alert."""
    if isinstance(exc, TaskValidationError):
        return UserAlert(
            "Invalid Input",
            "Please correct the following issues:",
            "\n".join(f"- {e}" for e in exc.errors),
        )
    if isinstance(exc, TaskNotFoundError):
        return UserAlert("No Selection", "No task selected", str(exc))
    if isinstance(exc, StorageInitError):
        return UserAlert(
            "Initialization Error",
            summary or "Failed to initialize application",
            _cause_text(exc),
        )
    if isinstance(exc, TaskStoreError):
        return UserAlert("Storage Error", summary or str(exc), _cause_text(exc))
    return UserAlert("Error", summary or "Unexpected internal error", str(exc))
