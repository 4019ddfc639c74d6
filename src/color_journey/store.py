# store.py – expiring key/value store and the two HTTP-layer collaborators
# built on it (response cache, per-client rate limiter). The engine never
# touches these; it stays a pure function of its config.

from __future__ import annotations

import json
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from .models import ColorJourneyConfig

Clock = Callable[[], float]


class TTLStore:
    """Thread-safe in-memory map whose entries expire ``ttl`` seconds after
    they are written. Oldest entries are dropped past ``max_entries``."""

    def __init__(
        self, ttl: float, *, max_entries: int = 1024, clock: Clock = time.monotonic
    ) -> None:
        self.ttl = float(ttl)
        self.max_entries = int(max_entries)
        self._clock = clock
        self._data: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired()
            return len(self._data)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            expires, value = entry
            if expires <= self._clock():
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        with self._lock:
            self._data.pop(key, None)
            self._data[key] = (self._clock() + (self.ttl if ttl is None else ttl), value)
            self._trim()

    def incr(self, key: str, ttl: Optional[float] = None) -> int:
        """Increment a counter, keeping the expiry set by its first write."""
        with self._lock:
            now = self._clock()
            entry = self._data.get(key)
            if entry is None or entry[0] <= now:
                self._data.pop(key, None)
                self._data[key] = (now + (self.ttl if ttl is None else ttl), 1)
                self._trim()
                return 1
            expires, count = entry
            self._data[key] = (expires, count + 1)
            return count + 1

    def evict_expired(self) -> int:
        with self._lock:
            return self._evict_expired()

    # ---- internals ----

    def _evict_expired(self) -> int:
        now = self._clock()
        stale = [k for k, (expires, _) in self._data.items() if expires <= now]
        for k in stale:
            del self._data[k]
        return len(stale)

    def _trim(self) -> None:
        if len(self._data) <= self.max_entries:
            return
        self._evict_expired()
        while len(self._data) > self.max_entries:
            del self._data[next(iter(self._data))]


def config_key(config: ColorJourneyConfig) -> str:
    """Canonical cache key: the config's wire JSON with sorted keys."""
    return json.dumps(config.to_dict(), sort_keys=True, separators=(",", ":"))


class ResponseCache:
    def __init__(self, store: TTLStore) -> None:
        self.store = store

    def get(self, config: ColorJourneyConfig) -> Optional[Dict[str, Any]]:
        return self.store.get(config_key(config))

    def put(self, config: ColorJourneyConfig, data: Dict[str, Any]) -> None:
        self.store.set(config_key(config), data)


class RateLimiter:
    """Fixed-window limiter: ``limit`` hits per ``window`` seconds per client."""

    def __init__(self, limit: int, window: float, store: Optional[TTLStore] = None) -> None:
        self.limit = int(limit)
        self.window = float(window)
        self.store = store if store is not None else TTLStore(self.window, max_entries=10000)

    def hit(self, client_id: str) -> bool:
        """Record one request; False once the client is over its limit."""
        return self.store.incr(client_id, ttl=self.window) <= self.limit


__all__ = ["RateLimiter", "ResponseCache", "TTLStore", "config_key"]
