# src/taskmaster/core/query_cache.py

"""
In-memory query cache.

A tiny subset of what a client-side query library does:
- results are stored per key together with the fetch time,
- a fetch within `stale_time` seconds returns the stored value,
- concurrent fetches for the same key share one in-flight request,
- invalidate() drops the entry so the next fetch goes to the network; a
  request already in flight is not joined by later fetches (it may predate
  the change that caused the invalidation).

There is no merge/patch API on purpose: after a mutation the entry is
invalidated and the whole collection is fetched again.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

TASKS_KEY = ("tasks",)


@dataclass(slots=True)
class _Entry:
    value: Any
    fetched_at: float


class QueryCache:
    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[Hashable, _Entry] = {}
        self._inflight: dict[Hashable, tuple[int, asyncio.Future[Any]]] = {}
        self._generations: dict[Hashable, int] = {}

    def get(self, key: Hashable) -> Any | None:
        entry = self._entries.get(key)
        return None if entry is None else entry.value

    def is_fresh(self, key: Hashable, stale_time: float) -> bool:
        entry = self._entries.get(key)
        if entry is None or stale_time <= 0:
            return False
        return (self._clock() - entry.fetched_at) < stale_time

    async def fetch(
        self,
        key: Hashable,
        fn: Callable[[], Awaitable[T]],
        *,
        stale_time: float = 0.0,
    ) -> T:
        """
        Return a cached value if still fresh, else call `fn`.

        Errors from `fn` propagate to every waiter and leave no entry behind.
        """
        if self.is_fresh(key, stale_time):
            return self._entries[key].value

        generation = self._generations.get(key, 0)
        pending = self._inflight.get(key)
        if pending is not None:
            pending_generation, pending_fut = pending
            if pending_generation == generation:
                return await asyncio.shield(pending_fut)
            logger.debug("Query %r in flight from before an invalidation; fetching again.", key)

        loop = asyncio.get_running_loop()
        fut: asyncio.Future[Any] = loop.create_future()
        self._inflight[key] = (generation, fut)
        try:
            value = await fn()
        except asyncio.CancelledError:
            fut.cancel()
            raise
        except Exception as e:
            fut.set_exception(e)
            # Mark retrieved so an unobserved failure is not reported by asyncio.
            fut.exception()
            raise
        finally:
            current = self._inflight.get(key)
            if current is not None and current[1] is fut:
                del self._inflight[key]

        # An invalidate() during the request makes this result stale already.
        if self._generations.get(key, 0) == generation:
            self._entries[key] = _Entry(value=value, fetched_at=self._clock())
        else:
            logger.debug("Query %r invalidated while fetching; result not cached.", key)
        fut.set_result(value)
        return value

    def invalidate(self, key: Hashable) -> None:
        self._generations[key] = self._generations.get(key, 0) + 1
        if self._entries.pop(key, None) is not None:
            logger.debug("Query %r invalidated.", key)

    def clear(self) -> None:
        for key in list(self._entries):
            self.invalidate(key)
