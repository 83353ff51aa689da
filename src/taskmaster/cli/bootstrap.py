# src/taskmaster/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (SQLite service, local session, query
  cache, notifier) into AppState and the tasks page.
"""

from __future__ import annotations

import logging

from ..backends.local_session import LocalSessionProvider
from ..backends.sqlite_store import SQLiteTaskService, TaskStore
from ..config import get_settings
from ..core.ports import Notifier
from ..core.query_cache import QueryCache
from ..core.state import AppState
from ..ui.tasks_page import TasksPage

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, notifier: Notifier, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_db_path)
    store.ensure_default_project(settings.default_project)

    service = SQLiteTaskService(store)
    session = LocalSessionProvider(
        settings.session_path,
        username=settings.auth_username,
        password=settings.auth_password,
    )
    cache = QueryCache()
    page = TasksPage(service, session, cache, notifier, login_path=settings.login_path)

    return AppState(
        settings=settings,
        service=service,
        session=session,
        cache=cache,
        notifier=notifier,
        page=page,
    )
