# src/taskmaster/ui/task_dialog.py

"""
Task form dialog controller.

UI-agnostic state machine behind the create/edit dialog:
- CREATE mode (no task) starts from fixed defaults,
- EDIT mode (task supplied) pre-fills from the task on every open(),
- submit() creates or updates, delete() is available in EDIT mode only.

Key invariants:
- a successful mutation invalidates the tasks query, closes the dialog and
  then awaits `on_update` exactly once (the page refetches inside it),
- a failed mutation keeps the dialog open, emits a destructive notification
  and never calls `on_update`,
- every open()/close() bumps a request generation; responses that come back
  under an older generation do not touch dialog state.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from ..core.errors import DialogBusyError, DialogStateError, ValidationError
from ..core.models import (
    Project,
    Task,
    TaskDraft,
    TaskPriority,
    TaskStatus,
    format_calendar_date,
    parse_calendar_date,
)
from ..core.ports import Notifier, TaskService
from ..core.query_cache import TASKS_KEY, QueryCache
from ..core.result import Err, Result, attempt
from .mutation import Mutation

logger = logging.getLogger(__name__)

OnUpdate = Callable[[], Awaitable[None] | None]


class DialogMode(StrEnum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(slots=True, frozen=True)
class TaskFormFields:
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: str = ""
    project_id: int | None = None

    @classmethod
    def from_task(cls, task: Task) -> TaskFormFields:
        return cls(
            title=task.title or "",
            description=task.description or "",
            status=task.status,
            priority=task.priority,
            due_date=format_calendar_date(task.due_date),
            project_id=task.project_id,
        )


_EDITABLE = frozenset(TaskFormFields.__dataclass_fields__)


class TaskDialog:
    def __init__(
        self,
        service: TaskService,
        notifier: Notifier,
        cache: QueryCache,
        *,
        task: Task | None = None,
        on_update: OnUpdate | None = None,
        default_project_id: int | None = None,
    ) -> None:
        self._service = service
        self._notifier = notifier
        self._cache = cache
        self._task = task
        self._on_update = on_update
        self._default_project_id = default_project_id

        self.is_open = False
        self.projects: list[Project] = []
        self.fields = self._initial_fields()
        self._generation = 0

        self.create_mutation: Mutation[TaskDraft, Task] = Mutation("create", service.create_task)
        self.update_mutation: Mutation[TaskDraft, Task] = Mutation("update", service.update_task)
        self.delete_mutation: Mutation[int, None] = Mutation("delete", service.delete_task)

    # ---- read-only view state ----

    @property
    def mode(self) -> DialogMode:
        return DialogMode.EDIT if self._task is not None else DialogMode.CREATE

    @property
    def task(self) -> Task | None:
        return self._task

    @task.setter
    def task(self, task: Task) -> None:
        """Swap in a fresher snapshot of the same task (fields re-derive on next open)."""
        if self._task is None or task.id != self._task.id:
            raise DialogStateError("a dialog is bound to a single task id")
        self._task = task

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def heading(self) -> str:
        return "Edit Task" if self.mode is DialogMode.EDIT else "Create Task"

    @property
    def subheading(self) -> str:
        if self.mode is DialogMode.EDIT:
            return "Make changes to your task here."
        return "Add a new task to your project."

    @property
    def submit_label(self) -> str:
        return "Update Task" if self.mode is DialogMode.EDIT else "Create Task"

    @property
    def is_submitting(self) -> bool:
        return self.create_mutation.is_pending or self.update_mutation.is_pending

    @property
    def is_deleting(self) -> bool:
        return self.delete_mutation.is_pending

    @property
    def can_submit(self) -> bool:
        return (
            bool(self.fields.title.strip())
            and self.fields.project_id is not None
            and not self.is_submitting
        )

    @property
    def can_delete(self) -> bool:
        return self.mode is DialogMode.EDIT and not self.is_deleting

    # ---- visibility ----

    async def open(self) -> None:
        if self.is_open:
            return
        self._generation += 1
        self.is_open = True
        if self._task is not None:
            self.fields = TaskFormFields.from_task(self._task)
        await self._load_projects(self._generation)

    def close(self) -> None:
        """Close without submitting: CREATE resets, EDIT discards in-progress edits."""
        if not self.is_open:
            return
        self._generation += 1
        self.is_open = False
        self.reset_form()

    def reset_form(self) -> None:
        if self._task is not None:
            return
        self.fields = self._initial_fields()

    def _initial_fields(self) -> TaskFormFields:
        if self._task is not None:
            return TaskFormFields.from_task(self._task)
        project_id = self._default_project_id
        if project_id is None and self.projects:
            project_id = self.projects[0].id
        return TaskFormFields(project_id=project_id)

    async def _load_projects(self, generation: int) -> None:
        result = await attempt(self._service.list_projects())
        if generation != self._generation:
            logger.debug("Discarding project listing from superseded generation=%s", generation)
            return

        if isinstance(result, Err):
            logger.error("Error loading projects: %s", result.error, exc_info=result.error)
            self.projects = []
            return

        self.projects = list(result.value)
        if self.mode is DialogMode.CREATE and self.fields.project_id is None and self.projects:
            self.fields = replace(self.fields, project_id=self.projects[0].id)

    # ---- editing ----

    def update_fields(self, **changes: Any) -> TaskFormFields:
        """
        Apply field edits.

        Status/priority accept enum members or their string values; due_date
        accepts "" (cleared), a date string or a date/datetime.
        Raises ValueError on unknown fields or unparsable values.
        """
        unknown = set(changes) - _EDITABLE
        if unknown:
            raise ValueError(f"Unknown dialog field(s): {', '.join(sorted(unknown))}")

        if "status" in changes:
            changes["status"] = TaskStatus(changes["status"])
        if "priority" in changes:
            changes["priority"] = TaskPriority(changes["priority"])
        if "due_date" in changes:
            raw = changes["due_date"]
            if isinstance(raw, str):
                raw = raw.strip()
                changes["due_date"] = parse_calendar_date(raw).isoformat() if raw else ""
            else:
                changes["due_date"] = format_calendar_date(raw)
        if "project_id" in changes and changes["project_id"] is not None:
            changes["project_id"] = int(changes["project_id"])
        for name in ("title", "description"):
            if name in changes:
                changes[name] = "" if changes[name] is None else str(changes[name])

        self.fields = replace(self.fields, **changes)
        return self.fields

    def build_draft(self) -> TaskDraft:
        f = self.fields
        if f.project_id is None:
            raise ValidationError("project is required")
        return TaskDraft(
            title=f.title,
            description=f.description,
            status=f.status,
            priority=f.priority,
            due_date=f.due_date or None,
            project_id=f.project_id,
            id=self._task.id if self._task is not None else None,
        )

    # ---- mutations ----

    async def submit(self) -> Result[Task]:
        if not self.is_open:
            return Err(DialogStateError("dialog is not open"))
        if not self.fields.title.strip():
            return Err(ValidationError("title is required"))
        if self.fields.project_id is None:
            return Err(ValidationError("project is required"))

        editing = self.mode is DialogMode.EDIT
        mutation = self.update_mutation if editing else self.create_mutation
        verb = "update" if editing else "create"
        if mutation.is_pending:
            return Err(DialogBusyError(f"{verb} already in progress"))

        generation = self._generation
        result = await mutation.run(self.build_draft())
        return await self._settle(result, generation, verb, reset=not editing)

    async def delete(self) -> Result[None]:
        if self._task is None:
            return Err(DialogStateError("delete is only available for an existing task"))
        if not self.is_open:
            return Err(DialogStateError("dialog is not open"))
        if self.delete_mutation.is_pending:
            return Err(DialogBusyError("delete already in progress"))

        generation = self._generation
        result = await self.delete_mutation.run(self._task.id)
        return await self._settle(result, generation, "delete", reset=False)

    async def _settle(self, result: Result[Any], generation: int, verb: str, *, reset: bool) -> Result[Any]:
        stale = generation != self._generation

        if isinstance(result, Err):
            logger.warning("Task %s failed: %s", verb, result.error)
            if not stale:
                self._notifier.notify("Error", f"Failed to {verb} task", "destructive")
            return result

        self._cache.invalidate(TASKS_KEY)
        if stale:
            logger.info("Task %s finished after the dialog was closed; state left untouched.", verb)
        else:
            self._notifier.notify("Success", f"Task {verb}d successfully")
            if reset:
                self.reset_form()
            self._generation += 1
            self.is_open = False

        await self._fire_update()
        return result

    async def _fire_update(self) -> None:
        if self._on_update is None:
            return
        out = self._on_update()
        if inspect.isawaitable(out):
            await out
