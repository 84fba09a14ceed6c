# src/core/errors.py — v1
"""Exception taxonomy.

Extraction and disk errors bubble up from the call that triggered them.
An empty search query is not an error: it yields an empty SearchResult.
"""

from __future__ import annotations


class FolioError(Exception):
    """Base class for all folio errors."""


class ExtractionFailedError(FolioError):
    """Source file could not be read or parsed. Never cached."""


class UnsupportedFormatError(FolioError, ValueError):
    """No extractor is registered for the requested format."""


class DiskIOError(FolioError):
    """Persisting, reading or deleting a disk cache blob failed."""

    def __init__(self, message: str, book_id: str | None = None) -> None:
        super().__init__(message)
        self.book_id = book_id


class NotFoundError(FolioError, LookupError):
    """Book has no cached content and no extraction was requested."""
