"""
Run-scoped caches keyed by explicit snapshot ids.

Pages are generated once per (filter combination x sort option), so the
same filter set is requested under every sort key. Caching the unsorted
match per filter path turns `combinations x sorts` matcher passes into
`combinations` matcher passes plus cheap sorts.

Both caches live exactly as long as the run that owns them; nothing here
survives a generation pass.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from .models import Item

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheStats:
    """Hit/miss counters for one cache."""
    hits: int = 0
    misses: int = 0
    entries: int = 0

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0


class ResultCache:
    """
    Unsorted match results keyed by (snapshot id, canonical filter path).

    Safe to share between threads: the map is guarded by a lock, and values
    are published with setdefault so every caller gets the same tuple even
    if two threads miss on one key at once.
    """

    def __init__(self):
        self._entries: dict[str, dict[str, tuple[Item, ...]]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, snapshot_id: str, path: str) -> Optional[tuple[Item, ...]]:
        """Return the cached match for a filter path, or None."""
        with self._lock:
            found = self._entries.get(snapshot_id, {}).get(path)
            if found is None:
                self._misses += 1
            else:
                self._hits += 1
        return found

    def put(self, snapshot_id: str, path: str, items: tuple[Item, ...]) -> tuple[Item, ...]:
        """Store a match; returns whichever tuple ended up in the cache."""
        with self._lock:
            return self._entries.setdefault(snapshot_id, {}).setdefault(path, items)

    def get_or_compute(
        self,
        snapshot_id: str,
        path: str,
        compute: Callable[[], tuple[Item, ...]],
    ) -> tuple[Item, ...]:
        cached = self.get(snapshot_id, path)
        if cached is not None:
            logger.debug(f"Result cache hit: {snapshot_id}/{path}")
            return cached
        logger.debug(f"Result cache miss: {snapshot_id}/{path}")
        return self.put(snapshot_id, path, compute())

    def release(self, snapshot_id: str) -> int:
        """Drop every entry for one snapshot. Returns how many were dropped."""
        with self._lock:
            return len(self._entries.pop(snapshot_id, {}))

    def clear(self):
        with self._lock:
            self._entries = {}
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            entries = sum(len(paths) for paths in self._entries.values())
            return CacheStats(hits=self._hits, misses=self._misses, entries=entries)

    def __contains__(self, key: tuple[str, str]) -> bool:
        snapshot_id, path = key
        with self._lock:
            return path in self._entries.get(snapshot_id, {})


class SnapshotMemo:
    """
    One memoized value per (view name, snapshot id).

    Holds the index and the read-only facet views so each is built once
    per snapshot per run.
    """

    def __init__(self):
        self._values: dict[tuple[str, str], object] = {}
        self._lock = threading.Lock()

    def get_or_build(self, view: str, snapshot_id: str, build: Callable[[], T]) -> T:
        key = (view, snapshot_id)
        with self._lock:
            if key in self._values:
                return self._values[key]  # type: ignore[return-value]
        value = build()
        with self._lock:
            return self._values.setdefault(key, value)  # type: ignore[return-value]

    def release(self, snapshot_id: str) -> int:
        with self._lock:
            stale = [key for key in self._values if key[1] == snapshot_id]
            for key in stale:
                del self._values[key]
        return len(stale)

    def clear(self):
        with self._lock:
            self._values = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
