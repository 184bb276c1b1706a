"""In-memory rate limiting for contact form submissions."""

import logging
import time
from threading import Lock
from typing import Callable, Dict

from fastapi import Request

RATE_LIMIT_MAX_REQUESTS = 3  # Max 3 messages per window
RATE_LIMIT_WINDOW_SECONDS = 300  # 5 minutes


class RateLimitEntry:
    """Request count for one key within its current window."""
    __slots__ = ("count", "reset_time")

    def __init__(self, count: int, reset_time: float):
        self.count = count
        self.reset_time = reset_time


class FixedWindowRateLimiter:
    """
    Fixed-window rate limiter keyed by client identifier (usually IP address).

    Entries live in process memory and are evicted lazily when accessed after
    their window has elapsed. State is not shared across processes or instances,
    so this only suits single-instance deployments.
    """

    def __init__(
        self,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._store: Dict[str, RateLimitEntry] = {}
        self._lock = Lock()

    def check(self, key: str) -> bool:
        """
        Record a request for key and report whether it is allowed.

        Args:
            key: Client identifier (IP address)

        Returns:
            True if within rate limit, False if exceeded
        """
        now = self._clock()
        with self._lock:
            entry = self._store.get(key)

            if entry is not None and now > entry.reset_time:
                del self._store[key]
                entry = None

            if entry is None:
                self._store[key] = RateLimitEntry(count=1, reset_time=now + self.window_seconds)
                return True

            if entry.count >= self.max_requests:
                logging.warning(f"Rate limit exceeded for key: {key}")
                return False

            entry.count += 1
            return True

    def retry_after(self, key: str) -> int:
        """Seconds until the current window for key resets (0 if no active window)."""
        now = self._clock()
        with self._lock:
            entry = self._store.get(key)
            if entry is None or now > entry.reset_time:
                return 0
            return max(int(entry.reset_time - now) + 1, 1)

    def reset(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


def get_client_ip(request: Request) -> str:
    """Get client IP address for rate limiting."""
    # Check for forwarded IP (from proxy/load balancer)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP in the chain
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()
    # Fallback to direct connection
    return request.client.host if request.client and request.client.host else "unknown"
