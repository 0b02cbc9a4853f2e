"""In-memory cache whose entries expire a fixed time after they are stored."""

from __future__ import annotations

import inspect
import logging
import threading
import time
import weakref
from datetime import timedelta
from typing import TYPE_CHECKING, Awaitable, Callable, Generic, Hashable, TypeVar

from expiring_cache.cache.durations import (
    DEFAULT_EXPIRE,
    DEFAULT_SWEEP_INTERVAL,
    DurationOrMilliseconds,
    to_milliseconds,
    to_timedelta,
)
from expiring_cache.cache.sweeper import Sweeper
from expiring_cache.runtime.monitoring import CacheMetrics

if TYPE_CHECKING:
    from expiring_cache.config.settings import Settings

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
LOGGER = logging.getLogger(__name__)

FetchFunc = Callable[[K], "Awaitable[V] | V"]


class ExpiringCache(Generic[K, V]):
    """Key/value cache that refetches entries once they are older than `expire`.

    Values live in one dict and their insertion times in another; both are
    only touched under `_lock` so the background sweeper never sees one
    without the other. A lookup that finds no valid entry awaits `fetch(key)`
    and stores the result. Concurrent misses on the same key each call
    `fetch`; the last one to finish wins.
    """

    def __init__(
        self,
        fetch: FetchFunc,
        expire: DurationOrMilliseconds = DEFAULT_EXPIRE,
        sweep_interval: DurationOrMilliseconds = DEFAULT_SWEEP_INTERVAL,
        *,
        clock: Callable[[], float] = time.monotonic,
        metrics: CacheMetrics | None = None,
    ) -> None:
        if not callable(fetch):
            raise TypeError("fetch must be callable.")
        self._fetch = fetch
        self._expire_ms = to_milliseconds(expire, name="expire")
        self._sweep_interval_ms = to_milliseconds(sweep_interval, name="sweep_interval")
        if self._sweep_interval_ms == 0:
            raise ValueError("sweep_interval must be positive.")
        self._clock = clock
        self.metrics = metrics or CacheMetrics()
        self._lock = threading.Lock()
        self._values: dict[K, V] = {}
        self._timestamps: dict[K, float] = {}

        sweeper = Sweeper(self._sweep_interval_ms / 1000.0, self.sweep)
        self._finalizer = weakref.finalize(self, sweeper.stop)
        self._sweeper = sweeper
        sweeper.start()

    @classmethod
    def from_settings(cls, fetch: FetchFunc, settings: Settings | None = None) -> ExpiringCache:
        if settings is None:
            from expiring_cache.config.settings import get_settings

            settings = get_settings()
        return cls(fetch, settings.cache_expire_ms, settings.cache_sweep_interval_ms)

    @property
    def fetch(self) -> FetchFunc:
        return self._fetch

    @property
    def expire_ms(self) -> int:
        return self._expire_ms

    @property
    def sweep_interval_ms(self) -> int:
        return self._sweep_interval_ms

    @property
    def expire_time(self) -> timedelta:
        return to_timedelta(self._expire_ms)

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def _is_valid(self, key: K, now_ms: float) -> bool:
        inserted_at = self._timestamps.get(key)
        if inserted_at is None or key not in self._values:
            return False
        return now_ms - inserted_at <= self._expire_ms

    def has(self, key: K) -> bool:
        """Return True if `key` has an entry no older than the expire time."""
        with self._lock:
            return self._is_valid(key, self._now_ms())

    def has_valid(self, key: K) -> bool:
        return self.has(key)

    def set(self, key: K, value: V) -> ExpiringCache[K, V]:
        """Store `value` under `key` and restart its age at zero."""
        with self._lock:
            self._timestamps[key] = self._now_ms()
            self._values[key] = value
        return self

    def delete(self, key: K) -> bool:
        with self._lock:
            removed = key in self._timestamps or key in self._values
            self._timestamps.pop(key, None)
            self._values.pop(key, None)
        return removed

    async def get(self, key: K) -> V:
        """Return the cached value for `key`, fetching it when missing or stale.

        Exceptions raised by `fetch` propagate unchanged and leave the entry
        exactly as it was before the call.
        """
        with self._lock:
            if self._is_valid(key, self._now_ms()):
                value = self._values[key]
                self.metrics.record_hit()
                return value

        self.metrics.record_miss()
        try:
            result = self._fetch(key)
            if inspect.isawaitable(result):
                result = await result
        except Exception as error:
            self.metrics.record_fetch_failure()
            LOGGER.warning("cache fetch failed: key=%r error=%s", key, type(error).__name__)
            raise
        self.set(key, result)
        return result

    async def get_entry(self, key: K) -> V:
        return await self.get(key)

    def sweep(self) -> int:
        """Evict every entry that is no longer valid; return how many were removed."""
        with self._lock:
            now_ms = self._now_ms()
            stale = [key for key in self._timestamps if not self._is_valid(key, now_ms)]
            for key in stale:
                self._timestamps.pop(key, None)
                self._values.pop(key, None)
        self.metrics.record_sweep(len(stale))
        LOGGER.debug("cache sweep complete: evicted=%s", len(stale))
        return len(stale)

    def close(self) -> None:
        """Stop the background sweeper. Safe to call more than once."""
        self._finalizer()

    def __enter__(self) -> ExpiringCache[K, V]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
