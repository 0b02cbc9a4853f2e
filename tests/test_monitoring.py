from expiring_cache.runtime.monitoring import CacheMetrics


def test_snapshot_without_lookups_has_zero_hit_rate() -> None:
    snapshot = CacheMetrics(started_at=1.0).snapshot()
    assert snapshot.hits == 0
    assert snapshot.misses == 0
    assert snapshot.hit_rate == 0.0
    assert snapshot.uptime_seconds > 0


def test_record_sweep_accumulates_evictions() -> None:
    metrics = CacheMetrics()
    metrics.record_sweep(3)
    metrics.record_sweep(0)
    metrics.record_fetch_failure()
    snapshot = metrics.snapshot()
    assert snapshot.sweeps == 2
    assert snapshot.evictions == 3
    assert snapshot.fetch_failures == 1


def test_explicit_zero_start_time_is_kept() -> None:
    assert CacheMetrics(started_at=0.0).started_at == 0.0
