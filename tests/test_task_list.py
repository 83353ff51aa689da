# tests/test_task_list.py

from __future__ import annotations

from dataclasses import replace

import pytest

from taskmaster.core.errors import DialogStateError
from taskmaster.ui.task_dialog import TaskDialog
from taskmaster.ui.task_list import TaskListView

from .fakes import UpdateCounter


@pytest.fixture()
def make_view(service, notifier, cache):
    def _make(on_update=None) -> TaskListView:
        def factory(task, cb):
            return TaskDialog(service, notifier, cache, task=task, on_update=cb)

        return TaskListView(factory, on_update=on_update)

    return _make


def test_dialog_per_task_is_reused_across_refreshes(make_view, existing_task) -> None:
    view = make_view()
    view.set_tasks([existing_task])
    dialog = view.dialog_for(7)
    assert dialog is not None

    renamed = replace(existing_task, title="Renamed")
    view.set_tasks([renamed])

    assert view.dialog_for(7) is dialog
    assert dialog.task is renamed


def test_removed_tasks_drop_their_dialogs(make_view, existing_task) -> None:
    view = make_view()
    view.set_tasks([existing_task])
    view.set_tasks([])
    assert view.dialog_for(7) is None
    assert view.tasks == []


@pytest.mark.asyncio
async def test_on_update_is_passed_through_unchanged(make_view, existing_task) -> None:
    on_update = UpdateCounter()
    view = make_view(on_update)
    view.set_tasks([existing_task])
    dialog = view.dialog_for(7)
    assert dialog is not None
    await dialog.open()

    await dialog.submit()

    assert on_update.calls == 1


def test_dialog_rejects_task_with_other_id(service, notifier, cache, existing_task) -> None:
    dialog = TaskDialog(service, notifier, cache, task=existing_task)
    with pytest.raises(DialogStateError):
        dialog.task = replace(existing_task, id=8)


def test_render_lines(make_view, service, existing_task) -> None:
    view = make_view()
    assert view.render_lines() == ["No tasks yet. Use /new to create one."]

    view.set_tasks([existing_task])
    lines = view.render_lines({2: "Beta"})

    assert lines[0] == "[~] #7 Write report (HIGH, Beta, due 2024-05-17)"
    assert lines[1].strip() == "Quarterly numbers"
