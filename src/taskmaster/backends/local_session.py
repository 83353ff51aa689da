# src/taskmaster/backends/local_session.py

"""
Local SessionProvider.

Stands in for a real identity provider when running the console app:
- the session is persisted as JSON under the data dir (private file),
- sign_in() optionally checks a single configured username/password pair,
- status stays LOADING until resolve() has read the session file once.
"""

from __future__ import annotations

import asyncio
import contextlib
import hmac
import json
import logging
import os
from pathlib import Path

from ..core.errors import AuthError
from ..core.models import Session, SessionStatus

logger = logging.getLogger(__name__)


class LocalSessionProvider:
    def __init__(
        self,
        session_path: str | Path,
        *,
        username: str | None = None,
        password: str | None = None,
    ) -> None:
        self._path = Path(session_path)
        self._username = username
        self._password = password
        self._status = SessionStatus.LOADING
        self._session: Session | None = None

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def session(self) -> Session | None:
        return self._session

    async def resolve(self) -> SessionStatus:
        self._session = await asyncio.to_thread(self._load)
        self._status = (
            SessionStatus.AUTHENTICATED if self._session is not None else SessionStatus.UNAUTHENTICATED
        )
        return self._status

    async def sign_in(self, username: str, password: str | None = None) -> Session:
        username = (username or "").strip()
        if not username:
            raise AuthError("username is required")
        if self._username is not None and username != self._username:
            logger.info("Sign-in rejected for user=%s", username)
            raise AuthError("invalid credentials")
        if self._password is not None and not hmac.compare_digest(
            (password or "").encode("utf-8"), self._password.encode("utf-8")
        ):
            logger.info("Sign-in rejected for user=%s (bad password)", username)
            raise AuthError("invalid credentials")

        session = Session(user_id=username, name=username)
        await asyncio.to_thread(self._save, session)
        self._session = session
        self._status = SessionStatus.AUTHENTICATED
        logger.info("Signed in user=%s", username)
        return session

    async def sign_out(self) -> None:
        await asyncio.to_thread(self._remove)
        self._session = None
        self._status = SessionStatus.UNAUTHENTICATED
        logger.info("Signed out.")

    # ---- file helpers ----

    def _load(self) -> Session | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read session file %s", self._path)
            return None
        if not isinstance(data, dict) or not isinstance(data.get("user_id"), str):
            logger.warning("Ignoring malformed session file %s", self._path)
            return None
        user_id = data["user_id"]
        if self._username is not None and user_id != self._username:
            logger.info("Stored session user=%s no longer allowed; ignoring.", user_id)
            return None
        return Session(
            user_id=user_id,
            name=str(data.get("name") or user_id),
            email=data.get("email") if isinstance(data.get("email"), str) else None,
        )

    def _save(self, session: Session) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"user_id": session.user_id, "name": session.name, "email": session.email}
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)

    def _remove(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
