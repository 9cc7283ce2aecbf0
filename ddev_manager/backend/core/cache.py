"""
TTL Cache.

Map-based, time-boxed memoization used for per-project config reads.
Entries expire after a fixed window measured on the monotonic clock;
expired entries are dropped lazily on access. No size bound: keys are
local project names.

Usage:
    from ddev_manager.backend.core.cache import TTLCache

    cache = TTLCache(ttl_seconds=5)
    cache.set("mysite", config)
    cache.get("mysite")        # config, for the next 5 seconds
    cache.invalidate("mysite") # after any write to that project
"""

import time
from collections.abc import Callable
from typing import Any


class TTLCache:
    """Per-key cache whose entries are valid for ``ttl_seconds``."""

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def invalidate(self, key: str) -> bool:
        """Drop an entry. Returns True if something was removed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
