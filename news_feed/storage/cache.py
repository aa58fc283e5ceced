"""In-memory query result cache.

Results are keyed by query expression and parameters and expire after a
fixed time-to-live. The number of entries is capped; nothing is persisted.
"""

import json
import time
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

DEFAULT_MAX_ENTRIES = 256


def make_cache_key(expression: str, params: Optional[Dict[str, Any]] = None) -> Tuple[str, str]:
    """Build a stable cache key for a query and its parameters."""
    return (expression, json.dumps(params or {}, sort_keys=True, default=str))


class QueryCache:
    """Time-bounded, size-bounded mapping from query keys to decoded results.

    When full, expired entries are dropped first, then the oldest writes.
    """

    def __init__(
        self,
        ttl: float = 60.0,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, List[Any]]] = {}

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl

    def get(self, key: Hashable) -> Optional[List[Any]]:
        """Return a copy of the cached result, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, value = entry
        if self._expired(stored_at, self._clock()):
            del self._entries[key]
            return None

        return list(value)

    def set(self, key: Hashable, value: List[Any]) -> None:
        if self.ttl <= 0 or self.max_entries <= 0:
            return

        now = self._clock()
        # Re-inserting moves the key to the end of the eviction order
        self._entries.pop(key, None)

        if len(self._entries) >= self.max_entries:
            self.purge_expired(now)
        while len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]

        self._entries[key] = (now, list(value))

    def purge_expired(self, now: Optional[float] = None) -> int:
        """Drop every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._clock() if now is None else now
        stale = [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
