# src/taskmaster/ui/mutation.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from ..core.errors import DialogBusyError
from ..core.result import Err, Result, attempt

A = TypeVar("A")
T = TypeVar("T")

logger = logging.getLogger(__name__)


class Mutation(Generic[A, T]):
    """
    One remote mutation plus its in-flight flag.

    `is_pending` is what disables the matching control; a second run() while
    pending is rejected instead of sending a duplicate request.
    """

    def __init__(self, name: str, fn: Callable[[A], Awaitable[T]]) -> None:
        self.name = name
        self._fn = fn
        self.is_pending = False

    async def run(self, arg: A) -> Result[T]:
        if self.is_pending:
            logger.debug("Mutation %s rejected: already in flight.", self.name)
            return Err(DialogBusyError(f"{self.name} already in progress"))
        self.is_pending = True
        try:
            return await attempt(self._fn(arg))
        finally:
            self.is_pending = False
