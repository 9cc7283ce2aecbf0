"""
API Rate Limiter.

Config-driven, per-client sliding-window rate limiting for the HTTP API.
Reads limits from config/settings/security.yaml (rate_limiting.api).
Uses in-memory storage; one limiter is owned by each application instance.
"""

import time
from collections import defaultdict
from collections.abc import Callable

from ddev_manager.backend.core.logging import get_logger

logger = get_logger(__name__)


class RateLimitResult:
    """Result of a rate limit check."""

    def __init__(self, allowed: bool, retry_after_seconds: int = 0, remaining: int = 0) -> None:
        self.allowed = allowed
        self.retry_after_seconds = retry_after_seconds
        self.remaining = remaining


class ApiRateLimiter:
    """
    Per-client rate limiter.

    Each client key (normally the remote address) may make ``max_requests``
    requests in any ``window_seconds`` sliding window.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: dict[str, list[float]] = defaultdict(list)

    @classmethod
    def from_config(cls) -> "ApiRateLimiter":
        """Build a limiter from security.yaml."""
        from ddev_manager.backend.core.config import get_app_config
        api_limits = get_app_config().security.rate_limiting.api
        return cls(api_limits.max_requests, api_limits.window_seconds)

    def check(self, client_key: str) -> RateLimitResult:
        """
        Check if a request from this client is within limits.

        Allowed requests are recorded against the window.

        Args:
            client_key: Client identifier (remote address)

        Returns:
            RateLimitResult indicating whether the request is allowed
        """
        now = self._clock()
        result = self._check_window(client_key, now)
        if not result.allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={"client": client_key, "limit": self.max_requests},
            )
            return result

        self._requests[client_key].append(now)
        return result

    def _check_window(self, key: str, now: float) -> RateLimitResult:
        """Check the sliding window for one client."""
        cutoff = now - self.window_seconds
        self._requests[key] = [ts for ts in self._requests[key] if ts > cutoff]

        used = len(self._requests[key])
        if used >= self.max_requests:
            oldest = min(self._requests[key]) if self._requests[key] else now
            retry_after = int(self.window_seconds - (now - oldest)) + 1
            return RateLimitResult(allowed=False, retry_after_seconds=retry_after)

        return RateLimitResult(allowed=True, remaining=self.max_requests - used - 1)
