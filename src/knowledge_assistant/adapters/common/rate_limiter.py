"""Sliding-window rate limiter for inbound query requests."""

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable

from ...core.domain.exceptions import RateLimitExceededError


class RateLimiter:
    """Per-caller sliding-window rate limiter.

    Each caller key (typically the client IP) may make ``max_requests``
    requests in any ``window_seconds`` interval. Unlike a blocking limiter,
    a rejected request fails immediately with ``RateLimitExceededError``.
    A ``max_requests`` value of ``None`` or ``<=0`` disables limiting.
    """

    def __init__(
        self,
        max_requests: int | None,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests if max_requests and max_requests > 0 else None
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _prune(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()

    def _evict_idle(self, now: float) -> None:
        """Forget callers with no request left in the window.

        Runs at most once per window from ``acquire`` so the caller table
        stays bounded by the callers seen in the last two windows.
        """
        idle = [
            key
            for key, hits in self._hits.items()
            if not hits or now - hits[-1] >= self.window_seconds
        ]
        for key in idle:
            del self._hits[key]

    def acquire(self, key: str) -> None:
        """Record a request for ``key`` or reject it.

        Raises:
            RateLimitExceededError: If ``key`` has used up its window.
        """
        if self.max_requests is None:
            return

        with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self.window_seconds:
                self._evict_idle(now)
                self._last_sweep = now
            hits = self._hits.setdefault(key, deque())
            self._prune(hits, now)
            if len(hits) >= self.max_requests:
                retry_after = max(self.window_seconds - (now - hits[0]), 0.0)
                raise RateLimitExceededError(
                    "Too many requests, please try again later.",
                    context={"caller": key, "retry_after_seconds": round(retry_after, 1)},
                )
            hits.append(now)

    def remaining(self, key: str) -> int | None:
        """Requests ``key`` may still make in the current window."""
        if self.max_requests is None:
            return None
        with self._lock:
            hits = self._hits.get(key)
            if hits is None:
                return self.max_requests
            self._prune(hits, self._clock())
            return max(self.max_requests - len(hits), 0)
