"""Owned, cancellable repeating background task."""

from __future__ import annotations

import logging
import math
import threading
import time
import weakref
from types import MethodType
from typing import Callable

LOGGER = logging.getLogger(__name__)
# Upper bound for a single Event.wait; long intervals are waited out in chunks.
_MAX_WAIT_SECONDS = 3600.0


class Sweeper:
    """Runs `tick` every `interval_seconds` on a daemon thread until stopped.

    Bound methods are held through a weak reference so a running sweeper never
    keeps its owner alive; once the owner is collected the loop ends.
    """

    def __init__(
        self,
        interval_seconds: float,
        tick: Callable[[], object],
        name: str = "expiring-cache-sweeper",
    ) -> None:
        if not math.isfinite(interval_seconds) or interval_seconds <= 0:
            raise ValueError("Sweep interval must be positive.")
        self.interval_seconds = interval_seconds
        if isinstance(tick, MethodType):
            self._tick_ref: Callable[[], Callable[[], object] | None] = weakref.WeakMethod(tick)
        else:
            self._tick_ref = lambda: tick
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        if self._stop_event.is_set():
            raise RuntimeError("A stopped sweeper cannot be restarted.")
        if self._thread.is_alive():
            return
        self._thread.start()
        LOGGER.debug("sweeper started: name=%s interval_s=%s", self._thread.name, self.interval_seconds)

    def stop(self, timeout: float | None = None) -> None:
        if self._stop_event.is_set():
            return
        self._stop_event.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        LOGGER.debug("sweeper stopped: name=%s", self._thread.name)

    def _run(self) -> None:
        while not self._wait_interval():
            tick = self._tick_ref()
            if tick is None:
                # owner was garbage-collected
                break
            try:
                tick()
            except Exception:
                LOGGER.exception("sweeper tick failed: name=%s", self._thread.name)
            del tick

    def _wait_interval(self) -> bool:
        """Sleep one interval; return True if stop was requested meanwhile."""
        deadline = time.monotonic() + self.interval_seconds
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return self._stop_event.is_set()
            if self._stop_event.wait(min(remaining, _MAX_WAIT_SECONDS)):
                return True
