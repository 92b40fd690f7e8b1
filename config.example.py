# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKBOARD_APP_NAME": "App display name (default: taskboard).",
    "TASKBOARD_LOG_LEVEL": "Console logging level (default: INFO).",
    # Storage
    "TASKBOARD_STORAGE": "Storage backend: sqlite (default) or memory (nothing survives exit).",
    # Console
    "TASKBOARD_CONSOLE_NOTIFY": "Print notices in the console (true/false, default true).",
    # Paths (gitignored)
    "TASKBOARD_DATA_DIR": "Local data directory, also holds taskboard.log (default: .local/taskboard).",
    "TASKBOARD_TASKS_DB_PATH": "SQLite path (default: <data_dir>/tasks.sqlite3).",
}
