# src/taskmaster/core/errors.py

from __future__ import annotations


class TaskServiceError(Exception):
    """Base error raised by TaskService implementations."""


class ValidationError(TaskServiceError):
    pass


class TaskNotFoundError(TaskServiceError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task not found: id={task_id}")
        self.task_id = task_id


class ProjectNotFoundError(TaskServiceError):
    def __init__(self, project_id: int) -> None:
        super().__init__(f"Project not found: id={project_id}")
        self.project_id = project_id


class DialogBusyError(RuntimeError):
    """A mutation of the same kind is still in flight."""


class DialogStateError(RuntimeError):
    """The dialog is not in a state that allows the requested action."""


class AuthError(Exception):
    pass
