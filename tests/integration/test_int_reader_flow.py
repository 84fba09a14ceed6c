# tests/integration/test_int_reader_flow.py — v1
"""End-to-end reader flow over real text files and the real extraction adapter.

Exercises extraction → hot tier → disk persistence → restart → promotion,
and checks that search page numbers land on the pages the reader serves.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from folio.api.models import Book
from folio.cache.cache_factory import create_reader_service
from folio.config.settings import Settings


def _write_book(directory: Path, name: str, paragraphs: list[str]) -> Book:
    path = directory / f"{name}.txt"
    path.write_text("\n\n".join(paragraphs), encoding="utf-8")
    return Book(book_id=name, title=name.title(), author="Anon", file_path=path, mime_type="text/plain")


@pytest.fixture
def int_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        cache_root=tmp_path / "cache",
        max_hot_entries=2,
        max_warm_entries=4,
        max_disk_entries=10,
    )


@pytest.fixture
def library(tmp_path) -> list[Book]:
    books_dir = tmp_path / "books"
    books_dir.mkdir()
    books = []
    for n in range(4):
        paragraphs = [
            f"Book {n} paragraph {i}: the pilgrims walked along the dusty road "
            f"towards the temple on the hill, speaking softly of rain."
            for i in range(1, 61)
        ]
        paragraphs[42] = "At the ford, Krishna waited for the travellers."
        books.append(_write_book(books_dir, f"book{n}", paragraphs))
    return books


class TestReaderFlow:
    @pytest.mark.asyncio
    async def test_read_search_and_restart(self, int_settings, library):
        book = library[0]
        async with create_reader_service(int_settings) as service:
            first = await service.read_page(book, page=1, words_per_page=250)
            assert first.source == "hot"
            assert first.total_pages == 12
            assert first.content.startswith("<p>Book 0 paragraph 1:")

            hits = await service.search_in_book(book.book_id, "krishna", words_per_page=250)
            assert hits.total_matches == 1
            page = await service.read_page(book, hits.results[0].page_number, 250)
            assert "Krishna" in page.content
            assert page.current_page == 9

        async with create_reader_service(int_settings) as restarted:
            cached = await restarted.get_paginated_content(book.book_id, 1, 250)
            assert cached is not None
            assert cached.source == "disk"
            assert cached.content == first.content
            again = await restarted.get_paginated_content(book.book_id, 1, 250)
            assert again.source == "hot"

    @pytest.mark.asyncio
    async def test_search_pages_agree_for_every_hit(self, int_settings, library):
        book = library[1]
        async with create_reader_service(int_settings) as service:
            await service.cache_book_content(book, "high")
            for words_per_page in (50, 300, 500, 1000):
                result = await service.search_in_book(book.book_id, "temple", limit=500, words_per_page=words_per_page)
                assert result.total_matches == 59
                for hit in result.results:
                    page = await service.get_paginated_content(book.book_id, hit.page_number, words_per_page)
                    assert "temple" in page.content.lower()

    @pytest.mark.asyncio
    async def test_hot_tier_bounded_across_library(self, int_settings, library):
        async with create_reader_service(int_settings) as service:
            for book in library:
                await service.read_page(book)
            stats = service.get_cache_stats()
            assert stats.hot_cache.entries == 2
            assert stats.disk_cache.entries == 4
            assert stats.performance.evictions >= 2

            for book in library:
                page = await service.get_paginated_content(book.book_id)
                assert page is not None

    @pytest.mark.asyncio
    async def test_concurrent_readers_share_one_extraction(self, int_settings, library):
        book = library[2]
        async with create_reader_service(int_settings) as service:
            pages = await asyncio.gather(*(service.read_page(book, page=p) for p in (1, 2, 3, 1)))
            assert [p.current_page for p in pages] == [1, 2, 3, 1]
            assert service.get_cache_stats().performance.extractions == 1

    @pytest.mark.asyncio
    async def test_preload_then_read(self, int_settings, library):
        for i, book in enumerate(library):
            book.view_count = i * 10
        async with create_reader_service(int_settings) as service:
            loaded = await service.preload_popular_books(library, max_count=2)
            assert loaded == 2
            page = await service.get_paginated_content("book3")
            assert page is not None
            assert await service.get_paginated_content("book0") is None
