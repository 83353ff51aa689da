# src/taskmaster/backends/sqlite_store.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from ..core.errors import ProjectNotFoundError, TaskNotFoundError, ValidationError
from ..core.models import (
    Project,
    Task,
    TaskDraft,
    TaskPriority,
    TaskStatus,
    parse_calendar_date,
)

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task/project store.

    The schema is intentionally simple and migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS projects (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    created_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL DEFAULT 'pending',
                    priority TEXT NOT NULL DEFAULT 'medium',
                    due_date TEXT,
                    project_id INTEGER NOT NULL REFERENCES projects(id),
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("status", "TEXT NOT NULL DEFAULT 'pending'")
            add_col("priority", "TEXT NOT NULL DEFAULT 'medium'")
            add_col("due_date", "TEXT")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks(project_id)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_due ON tasks(due_date)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _normalize_due(raw: str | None) -> str | None:
        if raw is None or not raw.strip():
            return None
        try:
            return parse_calendar_date(raw).isoformat()
        except ValueError as e:
            raise ValidationError(f"Invalid due date: {raw!r}") from e

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        due_raw = row["due_date"]
        due = None
        if due_raw:
            try:
                due = parse_calendar_date(str(due_raw))
            except ValueError:
                logger.warning("Ignoring malformed due_date=%r for task id=%s", due_raw, row["id"])
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            status=TaskStatus.parse(row["status"]),
            priority=TaskPriority.parse(row["priority"]),
            due_date=due,
            project_id=int(row["project_id"]),
        )

    def _validate(self, conn: sqlite3.Connection, draft: TaskDraft) -> tuple[Any, ...]:
        title = (draft.title or "").strip()
        if not title:
            raise ValidationError("title is required")
        row = conn.execute("SELECT id FROM projects WHERE id = ?", (int(draft.project_id),)).fetchone()
        if row is None:
            raise ProjectNotFoundError(draft.project_id)
        return (
            title,
            draft.description or "",
            TaskStatus(draft.status).value,
            TaskPriority(draft.priority).value,
            self._normalize_due(draft.due_date),
            int(draft.project_id),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def add_project(self, name: str) -> Project:
        name = (name or "").strip()
        if not name:
            raise ValidationError("project name is required")
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "INSERT INTO projects(name, created_at) VALUES (?, ?)", (name, time.time())
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for projects insert")
            logger.debug("Project added id=%s name=%s", rowid, name)
            return Project(id=int(rowid), name=name)
        finally:
            conn.close()

    def ensure_default_project(self, name: str) -> None:
        """Seed one project so a fresh database is usable."""
        if not name or self.list_projects():
            return
        project = self.add_project(name)
        logger.info("Seeded default project id=%s name=%s", project.id, project.name)

    def list_projects(self) -> list[Project]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT id, name FROM projects ORDER BY id ASC").fetchall()
            return [Project(id=int(r["id"]), name=str(r["name"])) for r in rows]
        finally:
            conn.close()

    def list_tasks(self) -> list[Task]:
        """All tasks, earliest due date first (undated last), then by id."""
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT *
                FROM tasks
                ORDER BY due_date IS NULL, due_date ASC, id ASC
                """
            ).fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            if row is None:
                raise TaskNotFoundError(task_id)
            return self._row_to_task(row)
        finally:
            conn.close()

    def create_task(self, draft: TaskDraft) -> Task:
        now = time.time()
        conn = self._get_conn()
        try:
            values = self._validate(conn, draft)
            cur = conn.execute(
                """
                INSERT INTO tasks(
                    title, description, status, priority, due_date, project_id,
                    created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (*values, now, now),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
            logger.debug("Task added id=%s project_id=%s", task_id, draft.project_id)
        finally:
            conn.close()
        return self.get_task(task_id)

    def update_task(self, draft: TaskDraft) -> Task:
        if draft.id is None:
            raise ValidationError("id is required for update")
        conn = self._get_conn()
        try:
            values = self._validate(conn, draft)
            cur = conn.execute(
                """
                UPDATE tasks
                SET title = ?,
                    description = ?,
                    status = ?,
                    priority = ?,
                    due_date = ?,
                    project_id = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (*values, time.time(), int(draft.id)),
            )
            conn.commit()
            if cur.rowcount != 1:
                raise TaskNotFoundError(draft.id)
            logger.debug("Task updated id=%s", draft.id)
        finally:
            conn.close()
        return self.get_task(draft.id)

    def delete_task(self, task_id: int) -> None:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            if cur.rowcount != 1:
                raise TaskNotFoundError(task_id)
            logger.debug("Task deleted id=%s", task_id)
        finally:
            conn.close()


class SQLiteTaskService:
    """
    TaskService adapter over TaskStore.

    Blocking SQLite calls run in a worker thread so the event loop stays free.
    """

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    @property
    def store(self) -> TaskStore:
        return self._store

    async def list_tasks(self) -> list[Task]:
        return await asyncio.to_thread(self._store.list_tasks)

    async def list_projects(self) -> list[Project]:
        return await asyncio.to_thread(self._store.list_projects)

    async def create_task(self, draft: TaskDraft) -> Task:
        return await asyncio.to_thread(self._store.create_task, draft)

    async def update_task(self, draft: TaskDraft) -> Task:
        return await asyncio.to_thread(self._store.update_task, draft)

    async def delete_task(self, task_id: int) -> None:
        await asyncio.to_thread(self._store.delete_task, task_id)
