"""Fixed-window rate limiter keyed by client address.

Every attempt is counted, including denied ones, so a client that keeps
hammering a closed window stays denied until the window rolls over.
Client windows are never evicted; the map grows with distinct addresses.
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # epoch seconds when the current window ends

    @property
    def reset_epoch(self) -> int:
        """Reset time as whole Unix seconds, for the X-RateLimit-Reset header."""
        return math.ceil(self.reset_at)

    def headers(self) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_epoch),
        }


@dataclass
class ClientWindow:
    count: int
    window_start: float


class FixedWindowRateLimiter:
    def __init__(
        self,
        window_ms: int,
        max_requests: int,
        clock: Callable[[], float] = time.time,
    ):
        self.window_ms = window_ms
        self.max_requests = max_requests
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, ClientWindow] = {}

    def admit(self, client_key: str) -> RateLimitDecision:
        """Count one request for ``client_key`` and decide whether to admit it."""
        window_seconds = self.window_ms / 1000
        with self._lock:
            now = self._clock()
            window = self._windows.get(client_key)
            if window is None:
                window = ClientWindow(count=0, window_start=now)
                self._windows[client_key] = window
            elif now - window.window_start >= window_seconds:
                window.count = 0
                window.window_start = now

            window.count += 1
            count = window.count
            reset_at = window.window_start + window_seconds

        return RateLimitDecision(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_at=reset_at,
        )

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
