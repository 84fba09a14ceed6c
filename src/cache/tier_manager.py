# src/cache/tier_manager.py — v1
"""Three-tier content cache: Hot (full content), Warm (metadata), Disk.

Lookup order is hot → warm/disk → miss. Disk hits are promoted into Hot.
Extraction is the expensive path: concurrent misses for the same book share
one in-flight extraction task.

All index mutations happen under a single asyncio.Lock; disk and extraction
I/O run outside it. Disk failures are logged and degrade to re-extraction on
a later request, they never escape the manager.
"""

from __future__ import annotations

import asyncio
import logging
import time
from functools import partial
from typing import TYPE_CHECKING, Awaitable, Callable

from folio.cache.fingerprint import compute_file_hash, has_changed
from folio.cache.stats import (
    CacheStats,
    CacheStatsReport,
    HotTierReport,
    TierReport,
    performance_report,
    utilization,
)
from folio.cache.tiers import DiskIndex, HotTier, WarmTier
from folio.core.errors import DiskIOError
from folio.core.models import (
    BookMetadata,
    CacheEntry,
    CachedContent,
    ContentFormat,
    DiskIndexEntry,
    DiskRecord,
    Priority,
    TierSource,
    WarmEntry,
)
from folio.extraction.adapter import extract_content
from folio.logging.context import book_context
from folio.reader.pagination import split_words

if TYPE_CHECKING:
    from folio.api.models import Book
    from folio.cache.base_cache_store import BaseDiskStore
    from folio.config.settings import Settings

logger = logging.getLogger(__name__)

ExtractFn = Callable[[str, str], Awaitable[tuple[str, str]]]


class TierManager:
    """Owns the Hot, Warm and Disk tiers and every transition between them."""

    def __init__(
        self,
        settings: Settings,
        store: BaseDiskStore,
        extract: ExtractFn = extract_content,
        clock: Callable[[], float] = time.time,
        fingerprint: Callable[..., str] = compute_file_hash,
    ) -> None:
        self._settings = settings
        self._store = store
        self._extract = extract
        self._clock = clock
        self._fingerprint = fingerprint

        self._hot = HotTier(settings.max_hot_entries)
        self._warm = WarmTier(settings.max_warm_entries)
        self._disk = DiskIndex(settings.max_disk_entries)
        self.stats = CacheStats()

        self._lock = asyncio.Lock()
        self._inflight: dict[str, asyncio.Task[tuple[str, str]]] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Rebuild the disk index from persisted blobs."""
        entries = await self._store.scan()
        now = self._clock()
        expired: list[str] = []
        async with self._lock:
            for entry in entries:
                if now - entry.cached_at < self._settings.disk_ttl_seconds:
                    self._disk.put(entry.book_id, entry)
                else:
                    expired.append(entry.book_id)

        for book_id in expired:
            await self._delete_blob(book_id)
        if self._disk.is_over_capacity():
            await self._cleanup_disk()

        logger.info(
            "Disk index rebuilt: %d entries (%d expired)", len(self._disk), len(expired)
        )

    async def close(self) -> None:
        """Wait for in-flight extractions to settle."""
        pending = list(self._inflight.values())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def get_content(self, book_id: str, fmt: ContentFormat = "html") -> CachedContent | None:
        """Resolve content from the tiers, or None on a miss."""
        if fmt not in ("text", "html"):
            raise ValueError(f"Unknown content format: {fmt!r}")

        now = self._clock()
        async with self._lock:
            hot_entry = self._hot.get(book_id)
            if hot_entry is not None:
                if now - hot_entry.cached_at < self._settings.hot_ttl_seconds:
                    self._touch(book_id, now)
                    self.stats.hot_hits += 1
                    logger.debug("Hot cache hit for %s", book_id)
                    return self._view(hot_entry, fmt, "hot")
                self._expire_hot(book_id)

            via_warm = self._warm_is_fresh(book_id, now)
            index_entry = self._disk.get(book_id)
            disk_expired = (
                index_entry is not None
                and now - index_entry.cached_at >= self._settings.disk_ttl_seconds
            )
            if index_entry is None:
                self.stats.misses += 1

        if index_entry is None:
            logger.debug("Cache miss for %s", book_id)
            return None

        if disk_expired:
            logger.info("Disk cache expired for %s", book_id)
            await self._remove_disk_entry(book_id)
            await self._record_miss()
            return None

        record = await self._load_disk_record(book_id, index_entry)
        if record is None:
            await self._record_miss()
            return None

        entry = CacheEntry(
            book_id=book_id,
            content=record.content,
            html_content=record.html_content,
            cached_at=now,
            accessed_at=now,
            file_hash=record.file_hash,
            metadata=record.metadata,
        )
        async with self._lock:
            if via_warm:
                self.stats.warm_hits += 1
            else:
                self.stats.disk_hits += 1
            # A concurrent clear may have dropped the book while we read.
            if book_id in self._disk:
                self._promote(entry)
        logger.debug("Disk cache hit for %s (via warm: %s)", book_id, via_warm)
        return self._view(entry, fmt, "disk")

    def is_cached(self, book_id: str) -> bool:
        """True if the book is in Hot or indexed on Disk (TTL not checked)."""
        return book_id in self._hot or book_id in self._disk

    @property
    def hot(self) -> HotTier:
        return self._hot

    @property
    def warm(self) -> WarmTier:
        return self._warm

    @property
    def disk_index(self) -> DiskIndex:
        return self._disk

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    async def cache_book_content(self, book: Book, priority: Priority = "normal") -> tuple[str, str]:
        """Extract a book once and place it in the tiers.

        Concurrent calls for the same book join the in-flight extraction and
        receive its result (or its exception).

        Raises:
            ExtractionFailedError: The file could not be extracted.
            UnsupportedFormatError: The format has no extractor.
        """
        async with self._lock:
            task = self._inflight.get(book.book_id)
            if task is None:
                task = asyncio.create_task(
                    self._extract_and_place(book, priority),
                    name=f"extract:{book.book_id}",
                )
                self._inflight[book.book_id] = task
                task.add_done_callback(partial(self._forget_inflight, book.book_id))
            else:
                logger.debug("Joining in-flight extraction for %s", book.book_id)
        return await asyncio.shield(task)

    def _forget_inflight(self, book_id: str, task: asyncio.Task[tuple[str, str]]) -> None:
        if self._inflight.get(book_id) is task:
            del self._inflight[book_id]
        if not task.cancelled():
            # Mark the exception retrieved even if every waiter was cancelled.
            task.exception()

    async def _extract_and_place(self, book: Book, priority: Priority) -> tuple[str, str]:
        with book_context(book.book_id, "extract"):
            logger.info("Extracting %s (priority: %s)", book.title or book.book_id, priority)
            started = time.perf_counter()
            text, html = await self._extract(str(book.file_path), book.format_hint)
            file_hash = await asyncio.to_thread(self._fingerprint, book.file_path)
            duration_ms = int((time.perf_counter() - started) * 1000)

            now = self._clock()
            metadata = BookMetadata(
                title=book.title,
                author=book.author,
                file_size_bytes=book.resolved_file_size(),
                total_words=len(split_words(text)),
                extraction_duration_ms=duration_ms,
            )
            entry = CacheEntry(
                book_id=book.book_id,
                content=text,
                html_content=html,
                cached_at=now,
                accessed_at=now,
                file_hash=file_hash,
                metadata=metadata,
            )
            async with self._lock:
                self.stats.extractions += 1

            await self._persist(entry)

            async with self._lock:
                if priority == "high" or self._hot.memory_usage_mb() < self._settings.max_hot_memory_mb:
                    self._place_in_hot(entry)
                    tier = "hot"
                else:
                    self._add_to_warm(book.book_id, metadata, now)
                    tier = "warm"

            logger.info(
                "Cached %s in %s tier (%d words, %d ms)",
                book.title or book.book_id, tier, metadata.total_words, duration_ms,
            )
            return text, html

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    async def clear_book(self, book_id: str) -> bool:
        """Remove a book from every tier. False if it was not cached anywhere."""
        async with self._lock:
            in_hot = self._hot.remove(book_id) is not None
            in_warm = self._warm.remove(book_id) is not None
            in_disk = book_id in self._disk

        removed_blob = await self._delete_blob(book_id)
        if removed_blob:
            async with self._lock:
                self._disk.remove(book_id)

        cleared = in_hot or in_warm or in_disk
        if cleared:
            logger.info("Cleared cache for %s", book_id)
        return cleared

    async def clear_all(self) -> None:
        """Empty every tier, delete every indexed blob and reset stats."""
        async with self._lock:
            hot_count = self._hot.clear()
            warm_count = self._warm.clear()
            disk_ids = self._disk.keys()
            self.stats.reset()

        for book_id in disk_ids:
            await self._remove_disk_entry(book_id)

        logger.info(
            "All caches cleared: %d hot, %d warm, %d disk entries",
            hot_count, warm_count, len(disk_ids),
        )

    async def invalidate_if_changed(self, book: Book) -> bool:
        """Clear a book whose source file no longer matches its fingerprint."""
        hot_entry = self._hot.get(book.book_id)
        disk_entry = self._disk.get(book.book_id)
        if hot_entry is not None:
            known_hash = hot_entry.file_hash
        elif disk_entry is not None:
            known_hash = disk_entry.file_hash
        else:
            return False

        changed = await asyncio.to_thread(has_changed, book.file_path, known_hash)
        if changed:
            logger.info("Source changed for %s, invalidating cache", book.book_id)
            await self.clear_book(book.book_id)
        return changed

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def stats_report(self) -> CacheStatsReport:
        s = self._settings
        return CacheStatsReport(
            hot_cache=HotTierReport(
                entries=len(self._hot),
                max_size=s.max_hot_entries,
                utilization_percent=utilization(len(self._hot), s.max_hot_entries),
                memory_usage_mb=round(self._hot.memory_usage_mb(), 2),
                max_memory_mb=s.max_hot_memory_mb,
            ),
            warm_cache=TierReport(
                entries=len(self._warm),
                max_size=s.max_warm_entries,
                utilization_percent=utilization(len(self._warm), s.max_warm_entries),
            ),
            disk_cache=TierReport(
                entries=len(self._disk),
                max_size=s.max_disk_entries,
                utilization_percent=utilization(len(self._disk), s.max_disk_entries),
            ),
            performance=performance_report(self.stats),
        )

    # ------------------------------------------------------------------
    # Tier transitions (caller holds the lock)
    # ------------------------------------------------------------------

    def _touch(self, book_id: str, now: float) -> None:
        hot_entry = self._hot.get(book_id)
        if hot_entry is not None:
            hot_entry.accessed_at = now
        warm_entry = self._warm.get(book_id)
        if warm_entry is not None:
            warm_entry.accessed_at = now

    def _expire_hot(self, book_id: str) -> None:
        self._hot.remove(book_id)
        logger.debug("Hot cache expired for %s", book_id)

    def _warm_is_fresh(self, book_id: str, now: float) -> bool:
        warm_entry = self._warm.get(book_id)
        if warm_entry is None:
            return False
        if now - warm_entry.cached_at < self._settings.warm_ttl_seconds:
            warm_entry.accessed_at = now
            return True
        self._warm.remove(book_id)
        logger.debug("Warm cache expired for %s", book_id)
        return False

    def _promote(self, entry: CacheEntry) -> None:
        self._place_in_hot(entry)
        self.stats.promotions += 1

    def _place_in_hot(self, entry: CacheEntry) -> None:
        self._hot.remove(entry.book_id)
        self._evict_from_hot()
        self._hot.put(entry.book_id, entry)
        self._add_to_warm(entry.book_id, entry.metadata, entry.cached_at)

    def _evict_from_hot(self) -> None:
        """Evict LRU entries until there is room, at most one batch."""
        evicted = 0
        while (
            len(self._hot) > 0
            and evicted < self._settings.hot_eviction_batch
            and (
                self._hot.is_full()
                or self._hot.memory_usage_mb() > self._settings.max_hot_memory_mb
            )
        ):
            victim = self._hot.lru_order()[0]
            self._hot.remove(victim)
            evicted += 1
            self.stats.evictions += 1
            logger.info("Evicted from hot cache: %s", victim)

    def _add_to_warm(self, book_id: str, metadata: BookMetadata, now: float) -> None:
        if book_id not in self._warm and self._warm.is_full():
            self._evict_from_warm()
        self._warm.put(book_id, WarmEntry(metadata=metadata, cached_at=now, accessed_at=now))

    def _evict_from_warm(self) -> None:
        """Evict one LRU batch, never touching books resident in Hot."""
        candidates = [k for k in self._warm.lru_order() if k not in self._hot]
        for victim in candidates[: self._settings.warm_eviction_batch]:
            self._warm.remove(victim)
            self.stats.evictions += 1
        logger.debug("Evicted %d warm entries", min(len(candidates), self._settings.warm_eviction_batch))

    # ------------------------------------------------------------------
    # Disk tier (I/O outside the lock)
    # ------------------------------------------------------------------

    async def _persist(self, entry: CacheEntry) -> None:
        record = DiskRecord(
            book_id=entry.book_id,
            content=entry.content,
            html_content=entry.html_content,
            cached_at=entry.cached_at,
            file_hash=entry.file_hash,
            metadata=entry.metadata,
        )
        try:
            path = await self._store.save(entry.book_id, record)
        except DiskIOError:
            logger.warning("Disk tier unavailable for %s", entry.book_id, exc_info=True)
            await self._remove_disk_entry(entry.book_id)
            return

        async with self._lock:
            self._disk.put(
                entry.book_id,
                DiskIndexEntry(
                    book_id=entry.book_id,
                    file_path=str(path),
                    cached_at=record.cached_at,
                    file_hash=record.file_hash,
                    metadata=record.metadata,
                ),
            )
            over_capacity = self._disk.is_over_capacity()
        if over_capacity:
            await self._cleanup_disk()

    async def _load_disk_record(self, book_id: str, index_entry: DiskIndexEntry) -> DiskRecord | None:
        try:
            return await self._store.load(book_id)
        except DiskIOError:
            logger.warning("Dropping stale disk index entry for %s", book_id, exc_info=True)
        await self._delete_blob(book_id)
        async with self._lock:
            if self._disk.get(book_id) is index_entry:
                self._disk.remove(book_id)
        return None

    async def _cleanup_disk(self) -> None:
        """Drop the oldest share of the disk tier once it is over capacity."""
        async with self._lock:
            if not self._disk.is_over_capacity():
                return
            max_entries = self._settings.max_disk_entries
            count = max(
                len(self._disk) - max_entries,
                int(max_entries * self._settings.disk_cleanup_ratio),
                1,
            )
            victims = self._disk.oldest(count)

        removed = 0
        for book_id in victims:
            if await self._remove_disk_entry(book_id):
                removed += 1
        async with self._lock:
            self.stats.evictions += removed
        logger.info("Disk cache cleanup removed %d of %d entries", removed, len(victims))

    async def _remove_disk_entry(self, book_id: str) -> bool:
        """Delete the blob first, then the index entry."""
        if not await self._delete_blob(book_id):
            return False
        async with self._lock:
            return self._disk.remove(book_id) is not None

    async def _delete_blob(self, book_id: str) -> bool:
        try:
            await self._store.delete(book_id)
        except DiskIOError:
            logger.warning("Failed to delete disk cache for %s", book_id, exc_info=True)
            return False
        return True

    async def _record_miss(self) -> None:
        async with self._lock:
            self.stats.misses += 1

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _view(entry: CacheEntry, fmt: ContentFormat, source: TierSource) -> CachedContent:
        return CachedContent(
            book_id=entry.book_id,
            content=entry.html_content if fmt == "html" else entry.content,
            metadata=entry.metadata,
            source=source,
        )
