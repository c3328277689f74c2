"""
Process-local query cache.

Remembers the last successful result per query key, coalesces concurrent
fetches of the same key, retries failed reads, and supports explicit
invalidation. One instance is owned by the app and passed to controllers.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any

from roster import config

logger = logging.getLogger(__name__)

USERS_KEY: tuple[str, ...] = ("users",)

_MAX_RETRY_DELAY = 30.0


@dataclass
class CacheEntry:
    """What the cache knows about one query key."""

    data: Any = None
    status: str = "idle"  # idle | loading | success | error
    error: BaseException | None = None
    updated_at: float | None = None
    is_stale: bool = True
    is_fetching: bool = False
    version: int = 0  # bumped on every stored result and every invalidation


class QueryCache:
    """
    Cache keyed by query key.

    fetch() serves fresh data from memory, otherwise runs the query once
    for all concurrent callers. A result whose fetch started before an
    invalidate() is stored but stays stale.
    """

    def __init__(
        self,
        ttl: float | None = None,
        retries: int | None = None,
        retry_base: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = config.settings.USERS_CACHE_TTL_SECONDS if ttl is None else ttl
        self._retries = config.settings.QUERY_RETRIES if retries is None else retries
        self._retry_base = config.settings.QUERY_RETRY_BASE_SECONDS if retry_base is None else retry_base
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry] = {}
        self._inflight: dict[Hashable, tuple[int, asyncio.Task]] = {}

    def get(self, key: Hashable) -> CacheEntry | None:
        return self._entries.get(key)

    def is_fresh(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        if entry is None or entry.status != "success" or entry.is_stale:
            return False
        return self._clock() - (entry.updated_at or 0.0) < self._ttl

    def set(self, key: Hashable, data: Any) -> None:
        """Store a result directly, as if a fetch had just succeeded."""
        entry = self._entries.setdefault(key, CacheEntry())
        entry.data = data
        entry.status = "success"
        entry.error = None
        entry.updated_at = self._clock()
        entry.is_stale = False
        entry.version += 1

    def invalidate(self, key: Hashable) -> None:
        """Mark a key stale. The next fetch() goes back to the store."""
        entry = self._entries.get(key)
        if entry is None:
            return
        entry.is_stale = True
        entry.version += 1
        logger.debug("query_cache: invalidated %s", key)

    async def fetch(self, key: Hashable, query: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return data for key, running query if the cached copy is missing or stale.

        Concurrent callers share one in-flight query. A query that started
        before the latest invalidate() or set() is not joined; a new one is
        started instead. Cancelling a caller does not cancel the shared query.

        Raises:
            Whatever query raised on its final attempt
        """
        if self.is_fresh(key):
            return self._entries[key].data

        entry = self._entries.setdefault(key, CacheEntry())
        inflight = self._inflight.get(key)
        if inflight is not None and inflight[0] == entry.version:
            task = inflight[1]
        else:
            task = asyncio.create_task(self._run(key, query, entry.version))
            task.add_done_callback(_consume_exception)
            self._inflight[key] = (entry.version, task)
        return await asyncio.shield(task)

    async def _run(self, key: Hashable, query: Callable[[], Awaitable[Any]], started_version: int) -> Any:
        entry = self._entries[key]
        entry.is_fetching = True
        if entry.status != "success":
            entry.status = "loading"

        try:
            attempt = 0
            while True:
                try:
                    data = await query()
                    break
                except Exception as e:
                    if attempt >= self._retries:
                        logger.warning("query_cache: %s failed after %d attempts: %s", key, attempt + 1, e)
                        if entry.version == started_version:
                            entry.status = "error"
                            entry.error = e
                        raise
                    delay = min(self._retry_base * 2**attempt, _MAX_RETRY_DELAY)
                    attempt += 1
                    logger.info("query_cache: retrying %s in %.2fs (attempt %d)", key, delay, attempt)
                    await asyncio.sleep(delay)
        finally:
            inflight = self._inflight.get(key)
            if inflight is not None and inflight[1] is asyncio.current_task():
                del self._inflight[key]
                entry.is_fetching = False

        if entry.version != started_version:
            if entry.status == "success" and not entry.is_stale:
                # A newer result was stored while this query was running.
                return entry.data
            # Invalidated while running: keep the result, but stale.
            entry.data = data
            entry.status = "success"
            entry.error = None
            entry.updated_at = self._clock()
            entry.is_stale = True
            return data

        entry.data = data
        entry.status = "success"
        entry.error = None
        entry.updated_at = self._clock()
        entry.is_stale = False
        entry.version += 1
        return data


def _consume_exception(task: asyncio.Task) -> None:
    # Every caller may have been cancelled; keep asyncio from warning about it.
    if not task.cancelled():
        task.exception()
