"""
Rate Limiting - Fixed-window request counting per client key.

In-memory only; each process keeps its own counters. Expired windows
are swept from is_allowed every cleanup_interval seconds.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import threading
import time

logger = logging.getLogger(__name__)

CLEANUP_INTERVAL_SECONDS = 300.0


@dataclass
class _Window:
    count: int
    reset_at: float


class SimpleRateLimiter:
    """
    Allow up to max_requests per key within each window.

    A key's window starts with its first request and resets once
    window_seconds have passed.
    """

    def __init__(
        self,
        max_requests: int = 60,
        window_seconds: float = 60.0,
        cleanup_interval: float = CLEANUP_INTERVAL_SECONDS,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.cleanup_interval = cleanup_interval
        self._windows: dict[str, _Window] = {}
        self._next_cleanup: float | None = None
        self._lock = threading.Lock()

    def is_allowed(self, key: str, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        with self._lock:
            if self._next_cleanup is None:
                self._next_cleanup = now + self.cleanup_interval
            elif now >= self._next_cleanup:
                self._purge(now)
                self._next_cleanup = now + self.cleanup_interval

            window = self._windows.get(key)
            if window is None or now > window.reset_at:
                self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
                return True

            if window.count >= self.max_requests:
                return False

            window.count += 1
            return True

    def cleanup(self, now: float | None = None) -> int:
        """Drop expired windows. Returns how many were removed."""
        now = time.time() if now is None else now
        with self._lock:
            return self._purge(now)

    def _purge(self, now: float) -> int:
        expired = [k for k, w in self._windows.items() if now > w.reset_at]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug("Dropped %d expired rate-limit windows", len(expired))
        return len(expired)

    def reset(self):
        with self._lock:
            self._windows.clear()
            self._next_cleanup = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)
