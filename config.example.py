# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Put local values in .env (gitignored); see src/tasklist/config.py for parsing rules.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKLIST_APP_NAME": "App display name (default: tasklist).",
    "TASKLIST_LOG_LEVEL": "Console logging level; the log file always gets DEBUG (default: WARNING).",
    # Console
    "TASKLIST_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    "TASKLIST_DEFAULT_USER": "User selected at startup (default: none, pick with /user NAME).",
    # Storage (gitignored)
    "TASKLIST_DATA_DIR": "Local data directory, also holds tasklist.log (default: .local/tasklist).",
    "TASKLIST_STORAGE_BACKEND": "memory | json | sqlite (default: json).",
    "TASKLIST_STORAGE_PATH": (
        "Storage file (default: <data_dir>/tasks.json or <data_dir>/tasks.sqlite3)."
    ),
    "TASKLIST_STORAGE_KEY": "Key the task list is stored under (default: tasks).",
}
