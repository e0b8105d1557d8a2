"""In-process TTL cache.

One instance is constructed per service and passed to the adapters that
need it; nothing is cached at module level.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """Key/value store whose entries expire ``ttl`` seconds after ``set``."""

    def __init__(self, ttl: float = 900.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def _is_valid(self, key: str) -> bool:
        entry = self._entries.get(key)
        if entry is None:
            return False
        stored_at, _ = entry
        return self._clock() - stored_at < self.ttl

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or ``None`` if absent or expired."""
        if not self._is_valid(key):
            self._entries.pop(key, None)
            return None
        return self._entries[key][1]

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one key, or everything when ``key`` is ``None``."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return self._is_valid(key)
