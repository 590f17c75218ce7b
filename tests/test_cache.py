import pytest

from salary_api.services.cache import TTLCache, make_cache_key


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl() -> None:
    clock = FakeClock()
    cache = TTLCache(300, clock=clock)
    cache.set("a", 1)

    clock.now = 299.0
    assert cache.get("a") == 1

    clock.now = 300.0
    assert cache.get("a") is None
    assert len(cache) == 0


def test_overflow_trims_oldest_entries() -> None:
    clock = FakeClock()
    cache = TTLCache(300, max_entries=10, trim_to=5, clock=clock)
    for i in range(11):
        clock.now = float(i)
        cache.set(f"k{i}", i)

    assert len(cache) == 5
    assert cache.get("k0") is None
    assert cache.get("k5") is None
    assert cache.get("k6") == 6
    assert cache.get("k10") == 10


def test_overflow_drops_expired_before_trimming() -> None:
    clock = FakeClock()
    cache = TTLCache(10, max_entries=4, trim_to=2, clock=clock)
    cache.set("old1", 1)
    cache.set("old2", 2)
    clock.now = 20.0
    cache.set("new1", 3)
    cache.set("new2", 4)
    cache.set("new3", 5)

    # Only the two stale entries go; three fresh ones exceed trim_to, so the oldest fresh one goes too.
    assert len(cache) == 2
    assert cache.get("new1") is None
    assert cache.get("new3") == 5


def test_stats_track_hits_and_misses() -> None:
    cache = TTLCache(60)
    cache.set("a", "x")
    cache.get("a")
    cache.get("a")
    cache.get("missing")

    stats = cache.stats()
    assert stats["size"] == 1
    assert stats["hits"] == 2
    assert stats["misses"] == 1
    assert stats["hitRate"] == pytest.approx(2 / 3)


def test_clear_empties_cache() -> None:
    cache = TTLCache(60)
    cache.set("a", 1)
    cache.clear()
    assert len(cache) == 0


def test_invalid_configuration_is_rejected() -> None:
    with pytest.raises(ValueError):
        TTLCache(0)
    with pytest.raises(ValueError):
        TTLCache(60, max_entries=10, trim_to=20)


def test_cache_key_ignores_field_order() -> None:
    assert make_cache_key({"a": 1, "b": 2}) == make_cache_key({"b": 2, "a": 1})
    assert make_cache_key({"a": 1}) != make_cache_key({"a": 2})
