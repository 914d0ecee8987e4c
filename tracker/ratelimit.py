# tracker/ratelimit.py
import logging
import threading
import time
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

LOCAL_HOSTS = ("127.0.0.1", "::1", "localhost")

class RateLimiter:
    """
    Sliding-window attempt counter keyed by client address. Shared across
    request threads; every read-modify-write of the table holds the lock.
    """

    def __init__(self, max_attempts: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._attempts: Dict[str, List[float]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def _sweep(self, now: float) -> None:
        # Caller holds the lock. Drops addresses with no attempt left in the window.
        stale = [k for k, times in self._attempts.items()
                 if not times or now - times[-1] >= self.window_seconds]
        for k in stale:
            del self._attempts[k]
        self._last_sweep = now

    def allow(self, key: str) -> bool:
        """Record an attempt for ``key``; False when the window is already full."""
        if key in LOCAL_HOSTS:
            return True
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            recent = [t for t in self._attempts.get(key, []) if now - t < self.window_seconds]
            if len(recent) >= self.max_attempts:
                self._attempts[key] = recent
                logger.warning("Rate limit exceeded for %s", key)
                return False
            recent.append(now)
            self._attempts[key] = recent
            return True

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()
            self._last_sweep = self._clock()
