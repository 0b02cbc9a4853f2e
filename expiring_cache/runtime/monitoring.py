"""Cache hit/miss and eviction counters."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass


@dataclass
class CacheSnapshot:
    uptime_seconds: float
    hits: int
    misses: int
    fetch_failures: int
    sweeps: int
    evictions: int
    hit_rate: float


class CacheMetrics:
    def __init__(self, started_at: float | None = None) -> None:
        self.started_at = time.time() if started_at is None else started_at
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.fetch_failures = 0
        self.sweeps = 0
        self.evictions = 0

    def record_hit(self) -> None:
        with self._lock:
            self.hits += 1

    def record_miss(self) -> None:
        with self._lock:
            self.misses += 1

    def record_fetch_failure(self) -> None:
        with self._lock:
            self.fetch_failures += 1

    def record_sweep(self, evicted: int) -> None:
        with self._lock:
            self.sweeps += 1
            self.evictions += max(0, evicted)

    def snapshot(self) -> CacheSnapshot:
        with self._lock:
            lookups = self.hits + self.misses
            hit_rate = (self.hits / lookups) if lookups else 0.0
            return CacheSnapshot(
                uptime_seconds=max(0.0, time.time() - self.started_at),
                hits=self.hits,
                misses=self.misses,
                fetch_failures=self.fetch_failures,
                sweeps=self.sweeps,
                evictions=self.evictions,
                hit_rate=hit_rate,
            )
