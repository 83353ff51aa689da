# src/taskmaster/core/models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.MEDIUM


class SessionStatus(StrEnum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(slots=True, frozen=True)
class Project:
    id: int
    name: str


@dataclass(slots=True, frozen=True)
class Task:
    """
    Snapshot of a task as returned by the task service.

    The client never treats it as authoritative: every mutation is followed
    by a fresh listing.
    """

    id: int
    title: str
    status: TaskStatus
    priority: TaskPriority
    project_id: int
    description: str = ""
    due_date: date | datetime | None = None


@dataclass(slots=True, frozen=True)
class TaskDraft:
    """
    Record submitted by the task dialog.

    `due_date` is a plain calendar date string (YYYY-MM-DD) or None.
    `id` is set only for updates.
    """

    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: str | None
    project_id: int
    id: int | None = None


@dataclass(slots=True, frozen=True)
class Session:
    user_id: str
    name: str
    email: str | None = None


def format_calendar_date(value: date | datetime | str | None) -> str:
    """Render a due date as YYYY-MM-DD, dropping any time component."""
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return parse_calendar_date(value).isoformat()


def parse_calendar_date(raw: str) -> date:
    """
    Parse "YYYY-MM-DD" or a full ISO timestamp into a date.

    Raises ValueError on anything else.
    """
    raw = raw.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return datetime.fromisoformat(raw).date()
