# src/api/models.py — v1
"""Public API input models.

``Book`` is the record handed over by the document catalog. The service
never stores it; it only reads identity, display fields and file location.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class Book(BaseModel):
    """Catalog record for a book file."""

    book_id: str = Field(min_length=1)
    title: str = ""
    author: str = ""
    file_path: Path
    mime_type: str = ""
    file_size_bytes: int | None = None
    view_count: int = 0

    @property
    def format_hint(self) -> str:
        """MIME type if known, else the file suffix."""
        return self.mime_type or self.file_path.suffix

    def resolved_file_size(self) -> int:
        if self.file_size_bytes is not None:
            return self.file_size_bytes
        try:
            return self.file_path.stat().st_size
        except OSError:
            return 0
