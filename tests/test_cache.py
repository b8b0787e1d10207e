"""test_cache.py — TTL response cache behavior."""

import threading

from ynab_analyst.mcp_server.cache import DEFAULT_TTL_SECONDS, ResponseCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_default_ttl_is_five_minutes():
    assert DEFAULT_TTL_SECONDS == 300.0
    assert ResponseCache().default_ttl == 300.0


def test_get_returns_fresh_value_and_evicts_expired_lazily():
    clock = FakeClock()
    cache = ResponseCache(default_ttl=10, clock=clock)
    cache.set("/budgets", {"data": 1})

    clock.now += 10
    assert cache.get("/budgets") == {"data": 1}

    clock.now += 0.5
    assert cache.get("/budgets") is None
    assert cache.size() == 0


def test_set_with_ttl_overrides_default():
    clock = FakeClock()
    cache = ResponseCache(default_ttl=100, clock=clock)
    cache.set_with_ttl("short", "v", ttl=1)
    cache.set("long", "v")

    clock.now += 5
    assert cache.get("short") is None
    assert cache.get("long") == "v"


def test_cleanup_expired_sweeps_and_counts():
    clock = FakeClock()
    cache = ResponseCache(default_ttl=5, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set_with_ttl("c", 3, ttl=60)

    clock.now += 6
    assert cache.cleanup_expired() == 2
    assert cache.size() == 1

    cache.clear()
    assert cache.size() == 0


def test_lock_unavailable_degrades_to_miss():
    cache = ResponseCache(lock_timeout=0.01)
    cache.set("k", "v")

    cache._lock.acquire()
    try:
        assert cache.get("k") is None
        cache.set("other", "x")
        assert cache.cleanup_expired() == 0
    finally:
        cache._lock.release()

    assert cache.get("k") == "v"
    assert cache.get("other") is None


def test_concurrent_writers_do_not_lose_entries():
    cache = ResponseCache()

    def worker(i: int) -> None:
        for j in range(50):
            cache.set(f"{i}-{j}", j)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cache.size() == 400
