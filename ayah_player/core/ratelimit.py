import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable

from fastapi import Request

from ayah_player.core.errors import RateLimitError

RATE_LIMIT_MESSAGE = "Too many requests, please reload the page."
SESSION_HEADER = "x-session-id"


@dataclass
class _Window:
    started_at: float
    hits: int


class FixedWindowRateLimiter:
    """Allows ``limit`` hits per key in each ``window_seconds`` window.

    A key's window opens on its first hit and resets once it has elapsed.
    """

    def __init__(self, limit: int, window_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._guard = Lock()

    def hit(self, key: str) -> None:
        now = self._clock()
        with self._guard:
            self._prune(now)
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.window_seconds:
                self._windows[key] = _Window(started_at=now, hits=1)
                return
            if window.hits >= self.limit:
                retry_after = self.window_seconds - (now - window.started_at)
                raise RateLimitError(RATE_LIMIT_MESSAGE, retry_after=retry_after)
            window.hits += 1

    def reset(self) -> None:
        with self._guard:
            self._windows.clear()

    def _prune(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now - window.started_at >= self.window_seconds]
        for key in expired:
            del self._windows[key]


def caller_identity(request: Request) -> str:
    session_id = request.headers.get(SESSION_HEADER)
    if session_id:
        return session_id
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
