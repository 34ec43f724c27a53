"""TTL cache for league query results."""

import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

DEFAULT_MAX_ENTRIES = 1024


@dataclass
class _Entry:
    value: Any
    expires_at: float


class QueryCache:
    """In-memory cache keyed by query name + parameters.

    Keys come from request parameters, so the cache is bounded: expired
    entries are purged on every write and the oldest entries are evicted
    past ``max_entries``. The clock is injected so expiry can be driven
    deterministically.
    """

    def __init__(
        self,
        default_ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        # Route handlers run in a threadpool
        self._lock = threading.Lock()

    @staticmethod
    def make_key(name: str, params: Optional[dict] = None) -> str:
        """Stable key from a query name and its non-None parameters."""
        cleaned = {k: v for k, v in (params or {}).items() if v is not None}
        return f"{name}:{json.dumps(cleaned, sort_keys=True, default=str)}"

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if self._clock() >= entry.expires_at:
                self._entries.pop(key, None)
                return default
            return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            # Re-inserting moves the key to the newest position
            self._entries.pop(key, None)
            while self._entries and len(self._entries) >= self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._entries[key] = _Entry(value=value, expires_at=now + ttl)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one key, or everything when no key is given."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
