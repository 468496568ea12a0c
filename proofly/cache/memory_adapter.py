import threading
import time
from collections.abc import Callable
from typing import Any

from proofly.cache.base import BaseResultCache


class InMemoryResultCache(BaseResultCache):
    """Process-local cache with per-key expiry. Lost on restart.

    Expired entries are dropped on read and swept on every write, so keys
    that are never read again do not accumulate.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def put(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        with self._lock:
            self._sweep()
            self._entries[key] = (self._clock() + ttl_seconds, dict(value))

    def get(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            return self._live_value(key)

    def put_if_absent(self, key: str, value: dict[str, Any], ttl_seconds: int) -> bool:
        with self._lock:
            self._sweep()
            if key in self._entries:
                return False
            self._entries[key] = (self._clock() + ttl_seconds, dict(value))
            return True

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _sweep(self) -> None:
        now = self._clock()
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def _live_value(self, key: str) -> dict[str, Any] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return dict(value)
