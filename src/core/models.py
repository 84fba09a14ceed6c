# src/core/models.py — v1
"""Core domain models shared across cache, reader and api packages.

Timestamps are float epoch seconds so that TTL arithmetic stays trivial and
a fake clock can drive the tier manager in tests.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ContentFormat = Literal["text", "html"]
Priority = Literal["high", "normal", "low"]
TierSource = Literal["hot", "disk"]

DISK_SCHEMA_VERSION = 1


# === EXTRACTION MODELS ===


class ExtractedContent(BaseModel):
    """Extractor output: plain text plus paragraph-structured HTML."""

    text: str
    html: str


# === CACHE MODELS ===


class BookMetadata(BaseModel):
    """Descriptive data captured at extraction time."""

    title: str = ""
    author: str = ""
    file_size_bytes: int = 0
    total_words: int = 0
    extraction_duration_ms: int = 0


class CacheEntry(BaseModel):
    """Hot tier entry holding the complete extracted content."""

    book_id: str
    content: str
    html_content: str
    cached_at: float
    accessed_at: float
    file_hash: str = ""
    metadata: BookMetadata = Field(default_factory=BookMetadata)

    @property
    def size_chars(self) -> int:
        return len(self.content) + len(self.html_content)


class WarmEntry(BaseModel):
    """Warm tier entry: metadata only, no content."""

    metadata: BookMetadata
    cached_at: float
    accessed_at: float


class DiskIndexEntry(BaseModel):
    """In-memory pointer to a persisted JSON blob."""

    book_id: str
    file_path: str
    cached_at: float
    file_hash: str = ""
    metadata: BookMetadata = Field(default_factory=BookMetadata)


class DiskRecord(BaseModel):
    """The JSON document persisted per book."""

    schema_version: int = DISK_SCHEMA_VERSION
    book_id: str
    content: str
    html_content: str
    cached_at: float
    file_hash: str = ""
    metadata: BookMetadata = Field(default_factory=BookMetadata)


class CachedContent(BaseModel):
    """Content resolved from one of the tiers, in the requested format."""

    book_id: str
    content: str
    metadata: BookMetadata
    source: TierSource


# === READER MODELS ===


class PageResult(BaseModel):
    """One page of a book as served to a reader."""

    content: str
    current_page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    format: ContentFormat
    total_words: int | None = None
    book_id: str = ""
    title: str = ""
    author: str = ""
    source: TierSource | None = None


class SearchMatch(BaseModel):
    """A single occurrence of the query, tagged with its reader page."""

    page_number: int
    match: str
    before_context: str
    after_context: str
    context: str
    full_context: str


class SearchResult(BaseModel):
    """Ordered, limit-truncated search outcome for one book."""

    query: str
    results: list[SearchMatch] = Field(default_factory=list)
    total_matches: int = 0
    returned_matches: int = 0
    limit: int = 0
    has_more: bool = False
