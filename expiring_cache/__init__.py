"""In-process TTL cache with fetch-on-miss and periodic sweeping."""

from expiring_cache.cache.durations import DEFAULT_EXPIRE, DEFAULT_SWEEP_INTERVAL, to_milliseconds
from expiring_cache.cache.expiring_cache import ExpiringCache
from expiring_cache.cache.sweeper import Sweeper
from expiring_cache.config.settings import Settings, get_settings
from expiring_cache.runtime.monitoring import CacheMetrics, CacheSnapshot

__all__ = [
    "DEFAULT_EXPIRE",
    "DEFAULT_SWEEP_INTERVAL",
    "CacheMetrics",
    "CacheSnapshot",
    "ExpiringCache",
    "Settings",
    "Sweeper",
    "get_settings",
    "to_milliseconds",
]
