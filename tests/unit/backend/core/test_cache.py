"""
Unit Tests for the TTL Cache.

Time is driven by a fake monotonic clock.
"""

from ddev_manager.backend.core.cache import TTLCache


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestTTLCache:
    """Tests for TTLCache."""

    def test_returns_none_for_missing_key(self):
        """Should return None for a key that was never set."""
        cache = TTLCache(ttl_seconds=5)

        assert cache.get("mysite") is None

    def test_returns_same_object_within_window(self):
        """Should return the stored object while the entry is fresh."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=5, clock=clock)
        config = {"php_version": "8.2"}

        cache.set("mysite", config)
        clock.advance(4.9)

        assert cache.get("mysite") is config

    def test_expires_after_ttl(self):
        """Should drop the entry once ttl_seconds have elapsed."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=5, clock=clock)

        cache.set("mysite", {"php_version": "8.2"})
        clock.advance(5)

        assert cache.get("mysite") is None
        assert len(cache) == 0

    def test_set_refreshes_timestamp(self):
        """Should restart the window when a key is set again."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=5, clock=clock)

        cache.set("mysite", {"v": 1})
        clock.advance(4)
        cache.set("mysite", {"v": 2})
        clock.advance(4)

        assert cache.get("mysite") == {"v": 2}

    def test_invalidate_removes_entry(self):
        """Should remove the entry and report whether one existed."""
        cache = TTLCache(ttl_seconds=5)
        cache.set("mysite", {})

        assert cache.invalidate("mysite") is True
        assert cache.invalidate("mysite") is False
        assert "mysite" not in cache

    def test_keys_are_independent(self):
        """Should only invalidate the named project."""
        cache = TTLCache(ttl_seconds=5)
        cache.set("one", {"n": 1})
        cache.set("two", {"n": 2})

        cache.invalidate("one")

        assert cache.get("one") is None
        assert cache.get("two") == {"n": 2}

    def test_clear_removes_everything(self):
        """Should empty the cache."""
        cache = TTLCache(ttl_seconds=5)
        cache.set("one", {})
        cache.set("two", {})

        cache.clear()

        assert len(cache) == 0

    def test_zero_ttl_never_serves(self):
        """Should behave as a pass-through when ttl is 0."""
        cache = TTLCache(ttl_seconds=0, clock=FakeClock())
        cache.set("mysite", {})

        assert cache.get("mysite") is None
