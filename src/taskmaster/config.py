# src/taskmaster/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Controllers never read settings globals; values are passed in by the bootstrap.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "TASKMASTER"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Auth ----
    login_path: str
    auth_username: Optional[str]
    auth_password: Optional[str]

    # ---- Backend ----
    default_project: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path
    session_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _first_env(_k("APP_NAME"), default="TaskMaster") or "TaskMaster"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        login_path = _env(_k("LOGIN_PATH"), "/login")
        # Empty username means "any user may sign in".
        auth_username = (_first_env(_k("AUTH_USERNAME"), default="") or "").strip() or None
        auth_password = _first_env(_k("AUTH_PASSWORD"), default=None)

        default_project = (_env(_k("DEFAULT_PROJECT"), "Inbox") or "").strip()

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskmaster"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        session_path = _env_path(_k("SESSION_PATH"), data_dir / "session.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            login_path=login_path,
            auth_username=auth_username,
            auth_password=auth_password,
            default_project=default_project,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            session_path=session_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
