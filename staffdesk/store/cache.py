"""Time-boxed in-process cache for collection reads."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass
class _Entry:
    data: Any
    stored_at: float


@dataclass
class TTLCache:
    """
    Map of cache key → value that expires entries older than ``ttl`` seconds.

    The clock is injectable so tests can move time forward without sleeping.
    Invalidation is best-effort; there is no locking.
    """

    ttl: float = 300.0
    clock: Callable[[], float] = time.monotonic
    _entries: dict[str, _Entry] = field(default_factory=dict, init=False)

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() - entry.stored_at >= self.ttl:
            del self._entries[key]
            return None
        return entry.data

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = _Entry(data=data, stored_at=self.clock())

    def invalidate(self, fragment: str) -> int:
        """Drop every key containing *fragment*. Returns the number removed."""
        doomed = [k for k in self._entries if fragment in k]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
