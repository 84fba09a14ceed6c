# src/api/facade.py — v1
"""Public API facade consumed by the transport layer.

Usage:
    from folio.cache.cache_factory import create_reader_service

    async with create_reader_service(settings) as service:
        page = await service.read_page(book, page=3)
        hits = await service.search_in_book(book.book_id, "krishna")

Construct one ReaderService per process and pass it to request handlers.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Iterable

from folio.core.errors import FolioError, NotFoundError
from folio.core.models import ContentFormat, PageResult, Priority, SearchResult
from folio.logging.context import book_context
from folio.reader.pagination import paginate_html, paginate_text
from folio.reader.search import search_html

if TYPE_CHECKING:
    from folio.api.models import Book
    from folio.cache.stats import CacheStatsReport
    from folio.cache.tier_manager import TierManager
    from folio.config.settings import Settings

logger = logging.getLogger(__name__)


class ReaderService:
    """Paginated reading, search and cache administration over a TierManager."""

    def __init__(self, settings: Settings, tier_manager: TierManager) -> None:
        self._settings = settings
        self._tiers = tier_manager
        self._background: set[asyncio.Task[int]] = set()

    @property
    def tiers(self) -> TierManager:
        return self._tiers

    # --- Lifecycle ---

    async def start(self) -> None:
        await self._tiers.start()

    async def close(self) -> None:
        """Cancel background preloads and let in-flight extractions settle."""
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        await self._tiers.close()

    async def __aenter__(self) -> ReaderService:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # --- Reading ---

    async def get_paginated_content(
        self,
        book_id: str,
        page: int = 1,
        words_per_page: int | None = None,
        fmt: ContentFormat = "html",
    ) -> PageResult | None:
        """Serve one page from cache, or None on a cache miss."""
        words_per_page = words_per_page or self._settings.default_words_per_page
        cached = await self._tiers.get_content(book_id, fmt)
        if cached is None:
            return None

        if fmt == "html":
            page_slice = paginate_html(cached.content, page, words_per_page)
            total_words = None
        else:
            page_slice = paginate_text(cached.content, page, words_per_page)
            total_words = page_slice.total_items

        return PageResult(
            content=page_slice.content,
            current_page=page_slice.current_page,
            total_pages=page_slice.total_pages,
            has_next_page=page_slice.has_next_page,
            has_prev_page=page_slice.has_prev_page,
            format=fmt,
            total_words=total_words,
            book_id=book_id,
            title=cached.metadata.title,
            author=cached.metadata.author,
            source=cached.source,
        )

    async def read_page(
        self,
        book: Book,
        page: int = 1,
        words_per_page: int | None = None,
        fmt: ContentFormat = "html",
    ) -> PageResult:
        """Serve a page, extracting the book first on a cache miss.

        Raises:
            ExtractionFailedError: Extraction failed (map to a 5xx).
            UnsupportedFormatError: The book format has no extractor.
            NotFoundError: Content vanished between extraction and read.
        """
        result = await self.get_paginated_content(book.book_id, page, words_per_page, fmt)
        if result is not None:
            return result

        with book_context(book.book_id, "read"):
            logger.info("Cache miss for %s, extracting content", book.title or book.book_id)
            await self._tiers.cache_book_content(book, "high")

        result = await self.get_paginated_content(book.book_id, page, words_per_page, fmt)
        if result is None:
            raise NotFoundError(f"No cached content for book {book.book_id}")
        return result

    async def cache_book_content(self, book: Book, priority: Priority = "normal") -> tuple[str, str]:
        return await self._tiers.cache_book_content(book, priority)

    # --- Search ---

    async def search_in_book(
        self,
        book_id: str,
        query: str,
        limit: int | None = None,
        words_per_page: int | None = None,
    ) -> SearchResult:
        """Search a cached book; page numbers match HTML pagination.

        Raises:
            NotFoundError: The book has no cached content.
        """
        if not query or not query.strip():
            return SearchResult(query=query or "")

        words_per_page = words_per_page or self._settings.default_words_per_page
        with book_context(book_id, "search"):
            cached = await self._tiers.get_content(book_id, "html")
            if cached is None:
                raise NotFoundError(f"Book {book_id} has no cached content to search")

            result = search_html(
                cached.content,
                query,
                words_per_page=words_per_page,
                limit=limit if limit is not None else self._settings.search_default_limit,
                max_limit=self._settings.search_max_limit,
                context_chars=self._settings.search_context_chars,
            )
            logger.info(
                "Search %r: returning %d of %d matches",
                query, result.returned_matches, result.total_matches,
            )
            return result

    # --- Administration ---

    async def clear_book_cache(self, book_id: str) -> bool:
        return await self._tiers.clear_book(book_id)

    async def clear_all_caches(self) -> None:
        await self._tiers.clear_all()

    def get_cache_stats(self) -> CacheStatsReport:
        return self._tiers.stats_report()

    async def refresh_if_changed(self, book: Book) -> bool:
        """Drop cached content whose source file has changed."""
        return await self._tiers.invalidate_if_changed(book)

    def preload_popular_books(self, books: Iterable[Book], max_count: int = 5) -> asyncio.Task[int]:
        """Start a background preload of the most viewed books.

        Returns the task so callers may await it; request paths should not.
        """
        task = asyncio.create_task(self._preload(list(books), max_count), name="preload")
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _preload(self, books: list[Book], max_count: int) -> int:
        ranked = sorted(books, key=lambda b: b.view_count, reverse=True)[: max(0, max_count)]
        logger.info("Preloading %d popular books", len(ranked))
        semaphore = asyncio.Semaphore(self._settings.preload_concurrency)
        loaded = 0

        async def _warm(book: Book) -> None:
            nonlocal loaded
            async with semaphore:
                if self._tiers.is_cached(book.book_id):
                    return
                try:
                    await self._tiers.cache_book_content(book, "low")
                    loaded += 1
                except FolioError as exc:
                    logger.warning("Failed to preload %s: %s", book.title or book.book_id, exc)

        await asyncio.gather(*(_warm(book) for book in ranked))
        logger.info(
            "Preload completed: %d extracted, hit rate %.2f%%",
            loaded, self._tiers.stats.hit_rate,
        )
        return loaded
