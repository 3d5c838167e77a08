"""In-memory string cache with per-instance TTL and lazy expiry."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from botc import maintenance

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CacheEntry:
    value: str
    expires_at: float


class ExpiringCache:
    """
    Key/value store whose entries expire ``ttl_hours`` after they were written.

    Reads check expiry themselves, so an entry past its deadline is a miss
    even when the background sweep has not removed it yet. The sweep only
    reclaims memory.
    """

    def __init__(
        self,
        name: str,
        ttl_hours: float,
        *,
        log_entries: bool = False,
        log_hits: bool = False,
        log_misses: bool = False,
        log_purges: bool = False,
        sweep_interval: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.name = name
        self.ttl_seconds = ttl_hours * 3600
        self.log_entries = log_entries
        self.log_hits = log_hits
        self.log_misses = log_misses
        self.log_purges = log_purges
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Future[str]] = {}
        self._sweeper: asyncio.Task | None = None

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------ #
    # Reads and writes
    # ------------------------------------------------------------------ #
    def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``; an existing entry is replaced and its expiry reset."""
        self._entries[key] = CacheEntry(value, self._clock() + self.ttl_seconds)
        if self.log_entries:
            logger.info("[%s] Cached entry %s", self.name, key)

    def _live(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None or self._clock() >= entry.expires_at:
            return None
        return entry

    def get(self, key: str) -> str | None:
        entry = self._live(key)
        if entry is None:
            if self.log_misses:
                logger.info("[%s] Cache miss for %s", self.name, key)
            return None
        if self.log_hits:
            logger.info("[%s] Cache hit for %s", self.name, key)
        return entry.value

    def contains(self, key: str) -> bool:
        return self._live(key) is not None

    def purge_expired(self) -> int:
        """Drop every entry whose expiry is in the past. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at < now]
        for key in expired:
            del self._entries[key]
            if self.log_purges:
                logger.info("[%s] Purged expired entry %s", self.name, key)
        return len(expired)

    async def get_or_fetch(self, key: str, fetch: Callable[[], Awaitable[str]]) -> str:
        """
        Return the cached value for ``key`` or fill it with ``fetch()``.

        Concurrent misses for the same key share one in-flight fetch. Empty
        results are handed back but never stored. If the task running the
        shared fetch is cancelled, a waiter takes over and fetches itself.
        """
        while True:
            cached = self.get(key)
            if cached is not None:
                return cached

            pending = self._inflight.get(key)
            if pending is None:
                break
            try:
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                task = asyncio.current_task()
                if not pending.cancelled() or (task is not None and task.cancelling()):
                    raise
                logger.debug("[%s] Shared fetch for %s was cancelled, retrying", self.name, key)

        future: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            value = await fetch()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Waiters re-raise; mark retrieved so an unobserved failure stays quiet
            future.exception()
            raise
        else:
            if value:
                self.put(key, value)
            future.set_result(value)
            return value
        finally:
            self._inflight.pop(key, None)

    # ------------------------------------------------------------------ #
    # Background sweep
    # ------------------------------------------------------------------ #
    async def _sweep(self) -> None:
        self.purge_expired()

    def start(self) -> None:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = maintenance.startup(
                self._sweep, self.sweep_interval, name=f"{self.name}-sweep"
            )

    async def stop(self) -> None:
        task, self._sweeper = self._sweeper, None
        await maintenance.shutdown(task)
