"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from expiring_cache.cache.durations import DEFAULT_EXPIRE, DEFAULT_SWEEP_INTERVAL, to_milliseconds

_DEFAULT_EXPIRE_MS = to_milliseconds(DEFAULT_EXPIRE)
_DEFAULT_SWEEP_INTERVAL_MS = to_milliseconds(DEFAULT_SWEEP_INTERVAL)


@dataclass(frozen=True)
class Settings:
    """Default lifetimes for caches built with `ExpiringCache.from_settings`."""

    cache_expire_ms: int = _DEFAULT_EXPIRE_MS
    cache_sweep_interval_ms: int = _DEFAULT_SWEEP_INTERVAL_MS


def _as_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_settings() -> Settings:
    """Load cache settings from environment variables."""
    load_dotenv()

    return Settings(
        cache_expire_ms=_as_int(os.getenv("CACHE_EXPIRE_MS"), _DEFAULT_EXPIRE_MS),
        cache_sweep_interval_ms=_as_int(os.getenv("CACHE_SWEEP_INTERVAL_MS"), _DEFAULT_SWEEP_INTERVAL_MS),
    )
