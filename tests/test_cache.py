from services.cache import SnapshotCache


class InvalidatingClock:
    """Clock that drops the cache from under the caller on a chosen tick."""

    def __init__(self):
        self.now = 0.0
        self.cache = None
        self.invalidate_on_next_tick = False

    def __call__(self) -> float:
        if self.invalidate_on_next_tick:
            self.invalidate_on_next_tick = False
            self.cache.invalidate()
        return self.now


def test_get_returns_value_when_invalidated_during_freshness_check():
    clock = InvalidatingClock()
    cache = SnapshotCache(lambda: ["snapshot"], ttl_seconds=60, clock=clock)
    clock.cache = cache
    first = cache.get()

    clock.invalidate_on_next_tick = True
    assert cache.get() is first
    assert cache.stale_value is None


def test_expired_value_is_reloaded():
    loads = []
    clock = InvalidatingClock()

    def loader():
        loads.append(clock.now)
        return object()

    cache = SnapshotCache(loader, ttl_seconds=60, clock=clock)
    first = cache.get()
    clock.now = 59.0
    assert cache.get() is first

    clock.now = 60.0
    assert cache.get() is not first
    assert loads == [0.0, 60.0]
    assert cache.loaded_at == 60.0
