# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKDESK_APP_NAME": "App display name (default: taskdesk).",
    "TASKDESK_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TASKDESK_DATA_DIR": "Local data directory (default: .local/taskdesk).",
    "TASKDESK_DB_PATH": "Task database path (default: <data_dir>/taskmanager.sqlite3).",
    "TASKDESK_LOG_DIR": "Directory for taskdesk.log (default: <data_dir>).",
    # Console
    "TASKDESK_DEFAULT_FILTER": "Filter applied at startup (default: All Tasks).",
}
