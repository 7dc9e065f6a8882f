"""Per-client rate limiting for public write endpoints, backed by ``limits``.

A moving window over in-process memory storage: at most ``limit`` hits per
client within any ``window_seconds`` span. Rejected hits are not recorded.
"""

import logging
import time

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

logger = logging.getLogger(__name__)


class EnquiryRateLimiter:
    """Allow at most ``limit`` hits per key within ``window_seconds``."""

    def __init__(self, limit: int, window_seconds: int) -> None:
        self.item = RateLimitItemPerSecond(limit, window_seconds)
        self._storage = MemoryStorage()
        self._strategy = MovingWindowRateLimiter(self._storage)

    def hit(self, key: str) -> float | None:
        """Record a hit. Returns ``None`` if allowed, else seconds until retry."""
        if self._strategy.hit(self.item, key):
            return None
        reset_time, _remaining = self._strategy.get_window_stats(self.item, key)
        retry_after = max(reset_time - time.time(), 0.0)
        logger.info("Rate limit exceeded for %s (retry in %.0fs)", key, retry_after)
        return retry_after

    def remaining(self, key: str) -> int:
        return self._strategy.get_window_stats(self.item, key).remaining

    def reset(self) -> None:
        self._storage.reset()
