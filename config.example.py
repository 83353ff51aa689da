# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKMASTER_APP_NAME": "App display name (default: TaskMaster).",
    "TASKMASTER_LOG_LEVEL": "Console logging level (default: INFO).",
    # Auth
    "TASKMASTER_LOGIN_PATH": "Where an unauthenticated tasks page redirects (default: /login).",
    "TASKMASTER_AUTH_USERNAME": "Only this user may sign in (empty => any username).",
    "TASKMASTER_AUTH_PASSWORD": "Password required at sign-in (unset => none).",
    # Backend
    "TASKMASTER_DEFAULT_PROJECT": "Project seeded into an empty database (default: Inbox).",
    # Paths (gitignored)
    "TASKMASTER_DATA_DIR": "Local data directory (default: .local/taskmaster).",
    "TASKMASTER_TASKS_DB_PATH": "SQLite path (default: <data_dir>/tasks.sqlite3).",
    "TASKMASTER_SESSION_PATH": "Session JSON path (default: <data_dir>/session.json).",
}
