"""Fixed-window attempt limiter for authentication endpoints."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional


@dataclass(slots=True)
class _Window:
    started_at: float
    attempts: int = 0


class FixedWindowRateLimiter:
    """Counts attempts per key inside a fixed time window.

    Callers check before doing work and record afterwards, so they can decide
    which outcomes count (login only records failures).
    """

    def __init__(
        self,
        max_attempts: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_attempts < 1:
            raise RuntimeError("Rate limit must allow at least one attempt.")
        self._max_attempts = max_attempts
        self._window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def retry_after(self, key: str) -> Optional[int]:
        """Seconds until ``key`` may try again, or None when it is under the limit."""
        with self._lock:
            window = self._current_locked(key)
            if window is None or window.attempts < self._max_attempts:
                return None
            remaining = window.started_at + self._window_seconds - self._clock()
            return max(1, math.ceil(remaining))

    def record(self, key: str) -> None:
        with self._lock:
            self._purge_locked()
            window = self._current_locked(key)
            if window is None:
                window = _Window(started_at=self._clock())
                self._windows[key] = window
            window.attempts += 1

    def reset(self, key: str) -> None:
        with self._lock:
            self._windows.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            self._purge_locked()
            return len(self._windows)

    def _purge_locked(self) -> None:
        now = self._clock()
        expired = [key for key, window in self._windows.items() if now - window.started_at >= self._window_seconds]
        for key in expired:
            del self._windows[key]

    def _current_locked(self, key: str) -> Optional[_Window]:
        window = self._windows.get(key)
        if window and self._clock() - window.started_at >= self._window_seconds:
            del self._windows[key]
            return None
        return window
