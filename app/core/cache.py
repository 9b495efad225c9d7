"""CHANLENS — Explicit TTL Cache.

Short-lived cache for list endpoints. Owned and injected by the API layer;
the metrics engine never touches it. Any write to channel data must call
``clear()`` so readers never see metrics older than the write.
"""

import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple


class TTLCache:
    """In-process key/value cache whose entries expire after ``ttl_seconds``."""

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        if self.ttl_seconds <= 0:
            return
        self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry (invalidation-on-write)."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
