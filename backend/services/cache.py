"""Simple in-memory TTL cache for upstream responses.

Entries are checked lazily on read; there is no eviction thread. Each
uvicorn worker holds its own cache, so with several workers the upstream
may be fetched once per worker.
"""

import threading
import time
from typing import Any, Callable


class TTLCache:
    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.Lock()
        self._store: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        with self._lock:
            if key in self._store:
                expires_at, value = self._store[key]
                if self._clock() < expires_at:
                    return value
                del self._store[key]
        return None

    def set(self, key: str, value: Any, ttl_seconds: float = 60) -> None:
        with self._lock:
            self._store[key] = (self._clock() + ttl_seconds, value)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
