"""Time-bounded in-memory cache for quotes, history and reference data."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Any

from .models import now_ms

# Default time-to-live per class of data, in milliseconds
QUOTE_TTL_MS = 60_000
HISTORICAL_TTL_MS = 3_600_000
REFERENCE_TTL_MS = 86_400_000


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A cached value together with when it was stored and how long it lives."""

    key: str
    value: Any
    stored_at: int  # Unix milliseconds
    ttl_ms: int


def is_fresh(entry: CacheEntry, now: int) -> bool:
    """An entry is fresh iff strictly less than ttl_ms has elapsed since storage."""
    return now - entry.stored_at < entry.ttl_ms


def quote_key(symbol: str) -> str:
    return f"quote:{symbol}"


def historical_key(symbol: str, period: str, interval: str) -> str:
    return f"historical:{symbol}:{period}:{interval}"


class TTLCache:
    """Key -> CacheEntry table with per-entry time-to-live.

    Stale entries are never evicted proactively. They stay in the table,
    invisible to readers, until the next set() for the same key overwrites
    them or clear() drops everything.
    """

    def __init__(self, clock: Callable[[], int] = now_ms) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()
        self._clock = clock

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if the key is absent or stale."""
        entry = self.entry(key)
        return entry.value if entry else None

    def entry(self, key: str) -> CacheEntry | None:
        """Return the fresh CacheEntry for a key, or None."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or not is_fresh(entry, self._clock()):
            return None
        return entry

    def set(self, key: str, value: Any, ttl_ms: int) -> CacheEntry:
        """Store a value, replacing any previous entry for the key."""
        entry = CacheEntry(key=key, value=value, stored_at=self._clock(), ttl_ms=ttl_ms)
        with self._lock:
            self._entries[key] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        """Number of physically stored entries, fresh or stale."""
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.entry(key) is not None
