# tests/test_sqlite_store.py

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from taskmaster.backends.sqlite_store import SQLiteTaskService, TaskStore
from taskmaster.core.errors import ProjectNotFoundError, TaskNotFoundError, ValidationError
from taskmaster.core.models import TaskDraft, TaskPriority, TaskStatus


def _draft(**overrides) -> TaskDraft:
    base = dict(
        title="Write tests",
        description="for the store",
        status=TaskStatus.PENDING,
        priority=TaskPriority.MEDIUM,
        due_date=None,
        project_id=1,
    )
    base.update(overrides)
    return TaskDraft(**base)


@pytest.fixture()
def store(tmp_path: Path) -> TaskStore:
    s = TaskStore(tmp_path / "tasks.sqlite3")
    s.ensure_default_project("Inbox")
    return s


def test_default_project_is_seeded_once(store: TaskStore) -> None:
    store.ensure_default_project("Inbox")
    projects = store.list_projects()
    assert [(p.id, p.name) for p in projects] == [(1, "Inbox")]


def test_create_update_delete(store: TaskStore) -> None:
    task = store.create_task(_draft(due_date="2024-03-05"))
    assert task.id > 0
    assert task.title == "Write tests"
    assert task.due_date == date(2024, 3, 5)

    updated = store.update_task(
        _draft(id=task.id, title="Write more tests", status=TaskStatus.COMPLETED, due_date=None)
    )
    assert updated.title == "Write more tests"
    assert updated.status is TaskStatus.COMPLETED
    assert updated.due_date is None

    store.delete_task(task.id)
    assert store.list_tasks() == []
    with pytest.raises(TaskNotFoundError):
        store.delete_task(task.id)


def test_listing_orders_by_due_date_then_id(store: TaskStore) -> None:
    undated = store.create_task(_draft(title="undated"))
    late = store.create_task(_draft(title="late", due_date="2024-09-01"))
    early = store.create_task(_draft(title="early", due_date="2024-01-01"))

    assert [t.id for t in store.list_tasks()] == [early.id, late.id, undated.id]


def test_due_date_time_component_is_dropped(store: TaskStore) -> None:
    task = store.create_task(_draft(due_date="2024-03-05T18:45:00"))
    assert task.due_date == date(2024, 3, 5)


def test_validation(store: TaskStore) -> None:
    with pytest.raises(ValidationError):
        store.create_task(_draft(title="  "))
    with pytest.raises(ValidationError):
        store.create_task(_draft(due_date="soon"))
    with pytest.raises(ProjectNotFoundError):
        store.create_task(_draft(project_id=99))
    with pytest.raises(ValidationError):
        store.update_task(_draft())
    with pytest.raises(TaskNotFoundError):
        store.update_task(_draft(id=42))
    assert store.count_tasks() == 0


def test_reopening_database_keeps_data(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    first = TaskStore(db)
    project = first.add_project("Home")
    first.create_task(_draft(project_id=project.id))

    second = TaskStore(db)
    assert second.count_tasks() == 1
    assert second.list_projects()[0].name == "Home"


@pytest.mark.asyncio
async def test_service_adapter_round_trip(store: TaskStore) -> None:
    service = SQLiteTaskService(store)

    created = await service.create_task(_draft())
    assert [t.id for t in await service.list_tasks()] == [created.id]
    assert [p.name for p in await service.list_projects()] == ["Inbox"]

    await service.delete_task(created.id)
    assert await service.list_tasks() == []
