# src/taskdesk/logging_setup.py

"""
Logging for the console app.

Three destinations:
- stderr: taskdesk records at the chosen level, other libraries at ERROR+
  (kept quiet so log lines don't interleave with the task table)
- <log_dir>/taskdesk.log: everything at DEBUG, each line tagged with the
  database file the session is using
- <log_dir>/storage-errors.log: ERROR+ from the task store only, so a
  corrupt or unreadable database is easy to diagnose after the fact
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

LOG_FILE_NAME = "taskdesk.log"
STORAGE_LOG_FILE_NAME = "storage-errors.log"
STORE_LOGGER = "taskdesk.tasks.task_store"


class OwnRecordsFilter(logging.Filter):
    """Pass taskdesk records; other loggers (incl. py.warnings) only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "taskdesk" or record.name.startswith("taskdesk."):
            return True
        return record.levelno >= logging.ERROR


class DbPathFilter(logging.Filter):
    """Stamp every record with the session's database path (`%(db_path)s`)."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        super().__init__()
        self.db_path = str(db_path) if db_path else "-"

    def filter(self, record: logging.LogRecord) -> bool:
        record.db_path = self.db_path
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskdesk",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    db_path: str | Path | None = None,
) -> Path:
    """Replace the root handlers with the taskdesk ones. Returns the main log file path."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": "%(levelname)s %(name)s: %(message)s"},
                "file": {
                    "format": "%(asctime)s.%(msecs)03d %(levelname)s %(name)s [db=%(db_path)s]: %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "filters": {
                "own_records": {"()": OwnRecordsFilter},
                "db_path": {"()": DbPathFilter, "db_path": db_path},
                "store_only": {"name": STORE_LOGGER},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "level": console_level,
                    "formatter": "console",
                    "filters": ["own_records"],
                },
                "file": {
                    "class": "logging.FileHandler",
                    "filename": str(log_file),
                    "encoding": "utf-8",
                    "level": file_level,
                    "formatter": "file",
                    "filters": ["db_path"],
                },
                "storage_errors": {
                    "class": "logging.FileHandler",
                    "filename": str(log_dir / STORAGE_LOG_FILE_NAME),
                    "encoding": "utf-8",
                    "level": logging.ERROR,
                    "formatter": "file",
                    "filters": ["store_only", "db_path"],
                    "delay": True,
                },
            },
            "root": {"level": logging.DEBUG, "handlers": ["console", "file", "storage_errors"]},
        }
    )

    logging.captureWarnings(True)
    return log_file
