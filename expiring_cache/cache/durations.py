"""Duration normalization for cache construction parameters."""

from __future__ import annotations

import math
from datetime import timedelta

DEFAULT_EXPIRE = timedelta(hours=12)
DEFAULT_SWEEP_INTERVAL = timedelta(hours=6)
_ONE_MILLISECOND = timedelta(milliseconds=1)

DurationOrMilliseconds = timedelta | int | float


def to_milliseconds(value: DurationOrMilliseconds, *, name: str = "duration") -> int:
    """Return `value` as a whole number of milliseconds.

    A `timedelta` is converted; a bare number is taken to already be milliseconds.
    """
    if isinstance(value, timedelta):
        if value < timedelta(0):
            raise ValueError(f"{name} must not be negative.")
        return value // _ONE_MILLISECOND
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{name} must be a timedelta or a millisecond count, got {type(value).__name__}.")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number of milliseconds.")
    if value < 0:
        raise ValueError(f"{name} must not be negative.")
    return int(value)


def to_timedelta(millis: int) -> timedelta:
    return timedelta(milliseconds=millis)
