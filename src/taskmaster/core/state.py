# src/taskmaster/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..ui.tasks_page import TasksPage
from .ports import Notifier, SessionProvider, TaskService
from .query_cache import QueryCache


@dataclass(slots=True)
class AppState:
    """
    Everything a connector needs, wired once by the bootstrap.

    Controllers receive their collaborators explicitly; nothing here is read
    through module globals.
    """

    settings: Any
    service: TaskService
    session: SessionProvider
    cache: QueryCache
    notifier: Notifier
    page: TasksPage
