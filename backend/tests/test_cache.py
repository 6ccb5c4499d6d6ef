"""Unit tests for the TTL cache."""

from concurrent.futures import ThreadPoolExecutor

from services.cache import TTLCache


class TestTTLCache:
    def test_get_missing_key(self, clock):
        cache = TTLCache(clock=clock)
        assert cache.get("weather:current") is None

    def test_set_then_get(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("weather:current", "sunny", ttl_seconds=300)
        assert cache.get("weather:current") == "sunny"

    def test_value_still_served_just_before_expiry(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("k", "v", ttl_seconds=300)
        clock.advance(299.9)
        assert cache.get("k") == "v"

    def test_value_absent_at_expiry(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("k", "v", ttl_seconds=300)
        clock.advance(300)
        assert cache.get("k") is None

    def test_set_overwrites_and_resets_expiry(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("k", "old", ttl_seconds=10)
        clock.advance(8)
        cache.set("k", "new", ttl_seconds=10)
        clock.advance(8)
        assert cache.get("k") == "new"

    def test_clear(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("k", "v", ttl_seconds=10)
        cache.clear()
        assert cache.get("k") is None

    def test_concurrent_set_and_get(self, clock):
        cache = TTLCache(clock=clock)

        def write_then_read(i):
            cache.set(f"k{i}", f"v{i}", ttl_seconds=300)
            cache.set("shared", f"v{i}", ttl_seconds=300)
            return cache.get(f"k{i}"), cache.get("shared")

        with ThreadPoolExecutor(max_workers=50) as pool:
            results = list(pool.map(write_then_read, range(200)))

        assert [own for own, _ in results] == [f"v{i}" for i in range(200)]
        assert all(shared is not None for _, shared in results)
        assert cache.get("shared") in {f"v{i}" for i in range(200)}
