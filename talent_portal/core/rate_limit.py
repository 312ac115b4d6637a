"""
Fixed-window request limiter for the public auth endpoints.

The counters live on a RateLimiter instance held in ``app.state``, so each
process (and each test app) gets its own state.
"""

import logging
import math
import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import Depends, Request

from talent_portal.core.config import Settings, get_settings
from talent_portal.core.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)


class RateLimiter:
    """Counts hits per (bucket, client) in fixed windows."""

    def __init__(self, clock: Callable[[], float] = time.monotonic, sweep_interval: float = 60.0):
        self._clock = clock
        self._windows: Dict[Tuple[str, str], Tuple[int, float]] = {}
        self._lock = threading.Lock()
        self._sweep_interval = sweep_interval
        self._next_sweep = 0.0

    def tracked(self) -> int:
        """Number of (bucket, client) windows currently tracked."""
        with self._lock:
            return len(self._windows)

    def _sweep(self, now: float) -> None:
        # drop finished windows so one-off clients do not accumulate
        expired = [key for key, (_, reset_at) in self._windows.items() if now >= reset_at]
        for key in expired:
            del self._windows[key]
        self._next_sweep = now + self._sweep_interval

    def hit(self, bucket: str, client: str, max_requests: int, window_seconds: float) -> None:
        """
        Record one request. Raises RateLimitExceeded once the window's
        allowance is used up.
        """
        now = self._clock()
        key = (bucket, client)
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            count, reset_at = self._windows.get(key, (0, 0.0))
            if now >= reset_at:
                count, reset_at = 0, now + window_seconds
            if count >= max_requests:
                retry_after = max(1, math.ceil(reset_at - now))
                logger.warning("Rate limit hit on %s for %s", bucket, client)
                raise RateLimitExceeded(retry_after)
            self._windows[key] = (count + 1, reset_at)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def rate_limit(bucket: str, limit_setting: str):
    """
    Build a dependency limiting ``bucket`` to ``settings.<limit_setting>``
    requests per ``settings.rate_limit_window_seconds``.
    """

    async def dependency(
        request: Request,
        limiter: RateLimiter = Depends(get_rate_limiter),
        settings: Settings = Depends(get_settings),
    ) -> None:
        client = request.client.host if request.client else "unknown"
        limiter.hit(
            bucket,
            client,
            max_requests=getattr(settings, limit_setting),
            window_seconds=settings.rate_limit_window_seconds,
        )

    return dependency
