# src/taskmaster/ui/task_list.py

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

from ..core.models import Task, TaskPriority, TaskStatus, format_calendar_date
from .task_dialog import OnUpdate, TaskDialog

logger = logging.getLogger(__name__)

DialogFactory = Callable[[Task, OnUpdate | None], TaskDialog]

_STATUS_MARK = {
    TaskStatus.PENDING: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.COMPLETED: "[x]",
}

_PRIORITY_MARK = {
    TaskPriority.LOW: "low",
    TaskPriority.MEDIUM: "med",
    TaskPriority.HIGH: "HIGH",
}


class TaskListView:
    """
    Presentational list of tasks.

    Keeps one edit-mode dialog per task id, like a keyed list of dialog
    components: the dialog instance survives refreshes (its task snapshot is
    swapped), and disappears with its task. The list's `on_update` is handed
    to every dialog unchanged.
    """

    def __init__(self, dialog_factory: DialogFactory, *, on_update: OnUpdate | None = None) -> None:
        self._factory = dialog_factory
        self._on_update = on_update
        self._tasks: list[Task] = []
        self._dialogs: dict[int, TaskDialog] = {}

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def set_tasks(self, tasks: Sequence[Task]) -> None:
        self._tasks = list(tasks)
        keep: dict[int, TaskDialog] = {}
        for task in self._tasks:
            dialog = self._dialogs.get(task.id)
            if dialog is None:
                dialog = self._factory(task, self._on_update)
            else:
                dialog.task = task
            keep[task.id] = dialog

        dropped = set(self._dialogs) - set(keep)
        if dropped:
            logger.debug("Dropping dialogs for removed tasks: %s", sorted(dropped))
        self._dialogs = keep

    def dialog_for(self, task_id: int) -> TaskDialog | None:
        return self._dialogs.get(task_id)

    def render_lines(self, project_names: Mapping[int, str] | None = None) -> list[str]:
        if not self._tasks:
            return ["No tasks yet. Use /new to create one."]

        names = project_names or {}
        lines: list[str] = []
        for t in self._tasks:
            due = format_calendar_date(t.due_date)
            project = names.get(t.project_id, f"project #{t.project_id}")
            line = f"{_STATUS_MARK[t.status]} #{t.id} {t.title} ({_PRIORITY_MARK[t.priority]}, {project}"
            if due:
                line += f", due {due}"
            line += ")"
            lines.append(line)
            if t.description:
                lines.append(f"      {t.description}")
        return lines
