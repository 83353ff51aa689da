# src/taskmaster/core/result.py

"""
Explicit success/failure values for awaited service calls.

Controllers branch on the returned value instead of registering
success/error callbacks, so the order of side effects is visible at the
call site:

    result = await attempt(service.create_task(draft))
    if isinstance(result, Err):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(slots=True, frozen=True)
class Err:
    error: Exception

    @property
    def ok(self) -> bool:
        return False


Result = Ok[T] | Err


async def attempt(awaitable: Awaitable[T]) -> Result[T]:
    """
    Await and wrap the outcome.

    Only `Exception` subclasses are captured; cancellation propagates.
    """
    try:
        value = await awaitable
    except Exception as e:
        logger.debug("Awaited call failed: %r", e)
        return Err(e)
    return Ok(value)
