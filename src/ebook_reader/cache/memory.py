"""In-memory pagination cache."""

from __future__ import annotations

import threading
from collections import OrderedDict

from ebook_reader.models.pagination import PaginationResult

DEFAULT_MAX_ENTRIES = 32


class PageCache:
    """Thread-safe LRU store of pagination results keyed by fingerprint.

    ``max_entries=None`` disables eviction.
    """

    def __init__(self, max_entries: int | None = DEFAULT_MAX_ENTRIES):
        self.max_entries = max_entries
        self._entries: OrderedDict[str, PaginationResult] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> PaginationResult | None:
        """Return a cached result and mark it recently used."""
        with self._lock:
            result = self._entries.get(key)
            if result is not None:
                self._entries.move_to_end(key)
            return result

    def put(self, key: str, result: PaginationResult) -> None:
        """Store a completed result, evicting the least recently used if full."""
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)

    def clear(self) -> int:
        """Drop all entries. Returns number of entries cleared."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
