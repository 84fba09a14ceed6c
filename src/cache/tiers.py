# src/cache/tiers.py — v1
"""The three in-memory cache structures: Hot, Warm and the Disk index.

These are plain containers. They hold no lock and apply no policy: the
TierManager decides when to promote, evict or expire, and serialises all
mutations.
"""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

from folio.core.models import CacheEntry, DiskIndexEntry, WarmEntry

_BYTES_PER_MB = 1024 * 1024

E = TypeVar("E", CacheEntry, WarmEntry, DiskIndexEntry)


class _Tier(Generic[E]):
    def __init__(self, max_entries: int) -> None:
        self.max_entries = max_entries
        self._entries: dict[str, E] = {}

    def get(self, book_id: str) -> E | None:
        return self._entries.get(book_id)

    def put(self, book_id: str, entry: E) -> None:
        self._entries[book_id] = entry

    def remove(self, book_id: str) -> E | None:
        return self._entries.pop(book_id, None)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def keys(self) -> list[str]:
        return list(self._entries)

    def is_full(self) -> bool:
        return len(self._entries) >= self.max_entries

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))


class HotTier(_Tier[CacheEntry]):
    """Full content for a handful of actively-read books."""

    def lru_order(self) -> list[str]:
        """Book ids, least recently accessed first."""
        return sorted(self._entries, key=lambda k: self._entries[k].accessed_at)

    def memory_usage_mb(self) -> float:
        """Characters held across content + HTML, expressed in MB."""
        total = sum(entry.size_chars for entry in self._entries.values())
        return total / _BYTES_PER_MB


class WarmTier(_Tier[WarmEntry]):
    """Metadata for recently-touched books."""

    def lru_order(self) -> list[str]:
        return sorted(self._entries, key=lambda k: self._entries[k].accessed_at)


class DiskIndex(_Tier[DiskIndexEntry]):
    """Pointers to persisted JSON blobs."""

    def oldest(self, count: int) -> list[str]:
        """The ``count`` entries with the earliest ``cached_at``."""
        ordered = sorted(self._entries, key=lambda k: self._entries[k].cached_at)
        return ordered[:count]

    def is_over_capacity(self) -> bool:
        return len(self._entries) > self.max_entries
