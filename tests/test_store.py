from color_journey.models import ColorJourneyConfig
from color_journey.store import RateLimiter, ResponseCache, TTLStore, config_key


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_entries_expire():
    clock = FakeClock()
    store = TTLStore(10, clock=clock)
    store.set("a", 1)
    assert store.get("a") == 1
    clock.now = 9.9
    assert store.get("a") == 1
    clock.now = 10.0
    assert store.get("a") is None
    assert len(store) == 0


def test_incr_keeps_first_expiry():
    clock = FakeClock()
    store = TTLStore(5, clock=clock)
    assert store.incr("k") == 1
    clock.now = 4
    assert store.incr("k") == 2
    clock.now = 5
    assert store.incr("k") == 1


def test_max_entries_drops_oldest():
    store = TTLStore(100, max_entries=2, clock=FakeClock())
    store.set("a", 1)
    store.set("b", 2)
    store.set("c", 3)
    assert store.get("a") is None
    assert store.get("c") == 3


def test_evict_expired_counts():
    clock = FakeClock()
    store = TTLStore(1, clock=clock)
    store.set("a", 1)
    store.set("b", 2, ttl=10)
    clock.now = 2
    assert store.evict_expired() == 1
    assert len(store) == 1


def test_config_key_is_canonical():
    a = ColorJourneyConfig.from_dict({"anchors": ["#000000"], "numColors": 2})
    b = ColorJourneyConfig.from_dict(
        {"numColors": 2, "anchors": ["#000000"], "variation": {"seed": 12345}}
    )
    assert config_key(a) == config_key(b)
    cache = ResponseCache(TTLStore(60))
    cache.put(a, {"x": 1})
    assert cache.get(b) == {"x": 1}


def test_rate_limiter_window():
    clock = FakeClock()
    limiter = RateLimiter(2, 60, store=TTLStore(60, clock=clock))
    assert limiter.hit("c")
    assert limiter.hit("c")
    assert not limiter.hit("c")
    assert limiter.hit("d")
    clock.now = 61
    assert limiter.hit("c")
