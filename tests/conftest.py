# tests/conftest.py — v1
"""Shared test fixtures for unit and integration tests.

Provides settings pointing at a temp cache directory, a controllable clock,
a file-backed fake extractor and factories for sample books.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock

import pytest

from folio.api.facade import ReaderService
from folio.api.models import Book
from folio.cache.json_store import JsonDiskStore
from folio.cache.tier_manager import TierManager
from folio.config.settings import Settings
from folio.extraction.txt_extractor import TxtExtractor
from tests.helpers import FakeClock


def _fake_extract(file_path: str, mime_or_ext: str) -> tuple[str, str]:
    text = Path(file_path).read_text(encoding="utf-8")
    return text, TxtExtractor.text_to_html(text)


# === FIXTURES: Config & clock ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary disk cache directory."""
    cache = tmp_path / "cache"
    cache.mkdir()
    return cache


@pytest.fixture
def settings(tmp_cache_dir: Path) -> Settings:
    """Small tiers so eviction is easy to trigger."""
    return Settings(
        _env_file=None,
        cache_root=tmp_cache_dir,
        max_hot_entries=3,
        max_warm_entries=10,
        max_disk_entries=20,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# === FIXTURES: Books ===


@pytest.fixture
def book_factory(tmp_path: Path) -> Callable[..., Book]:
    """Write a .txt book to disk and return its catalog record."""
    books_dir = tmp_path / "books"
    books_dir.mkdir()

    def _make(book_id: str, text: str | None = None, view_count: int = 0) -> Book:
        path = books_dir / f"{book_id}.txt"
        path.write_text(text if text is not None else f"Contents of {book_id}.", encoding="utf-8")
        return Book(
            book_id=book_id,
            title=f"Title {book_id}",
            author="Anon",
            file_path=path,
            mime_type="text/plain",
            view_count=view_count,
        )

    return _make


# === FIXTURES: Cache stack ===


@pytest.fixture
def fake_extract() -> AsyncMock:
    """Extraction adapter stand-in that reads the file as plain text."""
    return AsyncMock(side_effect=_fake_extract)


@pytest.fixture
def store(tmp_cache_dir: Path) -> JsonDiskStore:
    return JsonDiskStore(cache_root=tmp_cache_dir)


@pytest.fixture
def tier_manager(
    settings: Settings, store: JsonDiskStore, fake_extract: AsyncMock, clock: FakeClock
) -> TierManager:
    return TierManager(settings, store, extract=fake_extract, clock=clock)


@pytest.fixture
def service(settings: Settings, tier_manager: TierManager) -> ReaderService:
    return ReaderService(settings, tier_manager)
