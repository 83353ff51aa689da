# tests/conftest.py

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmaster.core.models import Project, Task, TaskPriority, TaskStatus
from taskmaster.core.query_cache import QueryCache
from taskmaster.core.state import AppState
from taskmaster.ui.tasks_page import TasksPage

from .fakes import FakeSession, FakeTaskService, RecordingNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="TaskMaster",
        log_level="INFO",
        login_path="/login",
        auth_username=None,
        auth_password=None,
        default_project="Inbox",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        session_path=tmp_path / "session.json",
    )


@pytest.fixture()
def projects() -> list[Project]:
    return [Project(id=1, name="Alpha"), Project(id=2, name="Beta")]


@pytest.fixture()
def existing_task() -> Task:
    return Task(
        id=7,
        title="Write report",
        description="Quarterly numbers",
        status=TaskStatus.IN_PROGRESS,
        priority=TaskPriority.HIGH,
        due_date=datetime(2024, 5, 17, 23, 30),
        project_id=2,
    )


@pytest.fixture()
def service(projects: list[Project], existing_task: Task) -> FakeTaskService:
    other = Task(
        id=3,
        title="Buy milk",
        status=TaskStatus.PENDING,
        priority=TaskPriority.LOW,
        due_date=date(2024, 6, 1),
        project_id=1,
    )
    return FakeTaskService(projects=projects, tasks=[other, existing_task])


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def page(service, session, cache, notifier) -> TasksPage:
    return TasksPage(service, session, cache, notifier, login_path="/login")


@pytest.fixture()
def state(settings, service, session, cache, notifier, page) -> AppState:
    """AppState wired with deterministic fakes."""
    return AppState(
        settings=settings,
        service=service,
        session=session,
        cache=cache,
        notifier=notifier,
        page=page,
    )
