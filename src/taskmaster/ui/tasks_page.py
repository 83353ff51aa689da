# src/taskmaster/ui/tasks_page.py

"""
Tasks page controller.

Orchestrates:
- session gating (loading / redirect to login / ready),
- fetching the task collection through the query cache (never stale-tolerant),
- the single update callback that dialogs await after a successful mutation.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from ..core.errors import AuthError
from ..core.models import SessionStatus, Task
from ..core.ports import Notifier, SessionProvider, TaskService
from ..core.query_cache import TASKS_KEY, QueryCache
from ..core.result import Err, Result, attempt
from .task_dialog import OnUpdate, TaskDialog
from .task_list import TaskListView

logger = logging.getLogger(__name__)


class PageView(StrEnum):
    LOADING = "loading"
    REDIRECT = "redirect"
    READY = "ready"


class TasksPage:
    def __init__(
        self,
        service: TaskService,
        session: SessionProvider,
        cache: QueryCache,
        notifier: Notifier,
        *,
        login_path: str = "/login",
        stale_time: float = 0.0,
    ) -> None:
        self._service = service
        self._session = session
        self._cache = cache
        self._notifier = notifier
        self._stale_time = stale_time
        self.login_path = login_path

        self._loading_tasks = False
        self._has_loaded = False
        self._fetch_generation = 0
        self.load_error: Exception | None = None

        self.new_task_dialog = TaskDialog(service, notifier, cache, on_update=self.handle_task_update)
        self.task_list = TaskListView(self._make_dialog, on_update=self.handle_task_update)

    def _make_dialog(self, task: Task, on_update: OnUpdate | None) -> TaskDialog:
        return TaskDialog(self._service, self._notifier, self._cache, task=task, on_update=on_update)

    # ---- view state ----

    @property
    def view(self) -> PageView:
        status = self._session.status
        # Only the first load blanks the page; later refetches keep the list visible.
        if status is SessionStatus.LOADING or (self._loading_tasks and not self._has_loaded):
            return PageView.LOADING
        if status is SessionStatus.UNAUTHENTICATED:
            return PageView.REDIRECT
        return PageView.READY

    @property
    def redirect_to(self) -> str | None:
        return self.login_path if self.view is PageView.REDIRECT else None

    @property
    def tasks(self) -> list[Task]:
        return self.task_list.tasks

    def edit_dialog(self, task_id: int) -> TaskDialog | None:
        return self.task_list.dialog_for(task_id)

    # ---- lifecycle ----

    async def mount(self) -> PageView:
        """Resolve the session, then fetch tasks when authenticated."""
        status = await self._session.resolve()
        if status is SessionStatus.AUTHENTICATED:
            await self.refetch()
        else:
            self._has_loaded = False
            self.task_list.set_tasks([])
        logger.debug("Tasks page mounted: session=%s view=%s", status, self.view)
        return self.view

    async def refetch(self) -> Result[list[Task]]:
        """Force a fresh fetch of the whole collection (no merge)."""
        if self._session.status is not SessionStatus.AUTHENTICATED:
            return Err(AuthError("not signed in"))

        self._fetch_generation += 1
        generation = self._fetch_generation
        self._loading_tasks = True
        try:
            result = await attempt(
                self._cache.fetch(TASKS_KEY, self._service.list_tasks, stale_time=self._stale_time)
            )
        finally:
            if generation == self._fetch_generation:
                self._loading_tasks = False

        if generation != self._fetch_generation:
            logger.debug("Discarding task listing from superseded fetch=%s", generation)
            return result

        self._has_loaded = True
        if isinstance(result, Err):
            logger.error("Failed to load tasks: %s", result.error, exc_info=result.error)
            self.load_error = result.error
            return result

        self.load_error = None
        self.task_list.set_tasks(result.value)
        logger.debug("Loaded %d tasks.", len(result.value))
        return result

    async def handle_task_update(self) -> None:
        await self.refetch()

    def unmount(self) -> None:
        """Close any open dialog and drop the cached collection."""
        self.new_task_dialog.close()
        for task in self.task_list.tasks:
            dialog = self.task_list.dialog_for(task.id)
            if dialog is not None:
                dialog.close()
        self.task_list.set_tasks([])
        self._has_loaded = False
        self._cache.invalidate(TASKS_KEY)
