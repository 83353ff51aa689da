# src/taskmaster/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the UI controllers.

Controllers depend on Protocols instead of concrete implementations.
This keeps the backend/session/notification layers swappable and lets tests
substitute deterministic fakes.
"""

from typing import Literal, Protocol

from .models import Project, Session, SessionStatus, Task, TaskDraft

NotifyVariant = Literal["default", "destructive"]


class TaskService(Protocol):
    """
    Remote task service.

    Implementations raise TaskServiceError subclasses (or any transport error);
    callers wrap the awaited call with core.result.attempt().
    """

    async def list_tasks(self) -> list[Task]: ...
    async def list_projects(self) -> list[Project]: ...
    async def create_task(self, draft: TaskDraft) -> Task: ...
    async def update_task(self, draft: TaskDraft) -> Task: ...
    async def delete_task(self, task_id: int) -> None: ...


class SessionProvider(Protocol):
    """
    Session/auth collaborator.

    `status` starts as LOADING until resolve() has completed once.
    """

    @property
    def status(self) -> SessionStatus: ...

    @property
    def session(self) -> Session | None: ...

    async def resolve(self) -> SessionStatus: ...
    async def sign_in(self, username: str, password: str | None = None) -> Session: ...
    async def sign_out(self) -> None: ...


class Notifier(Protocol):
    """Transient, non-blocking user notifications (toasts)."""

    def notify(self, title: str, description: str, variant: NotifyVariant = "default") -> None: ...
