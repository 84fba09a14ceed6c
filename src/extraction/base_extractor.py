# src/extraction/base_extractor.py — v1
"""Abstract extractor interface for document formats."""

from __future__ import annotations

import asyncio
import html
from abc import ABC, abstractmethod
from pathlib import Path

from folio.core.models import ExtractedContent


class BaseExtractor(ABC):
    """Unified interface for document format extractors.

    Subclasses implement the blocking ``_extract_sync``; ``extract`` runs it
    in a worker thread so parsing a large book never stalls the event loop.
    """

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """File extensions this extractor handles (e.g., ['.pdf'])."""

    @abstractmethod
    def _extract_sync(self, path: Path) -> ExtractedContent:
        """Parse the file at ``path`` into text and HTML."""

    async def extract(self, path: str | Path) -> ExtractedContent:
        """Extract plain text and HTML from a document on disk."""
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"Book file not found: {file_path}")
        return await asyncio.to_thread(self._extract_sync, file_path)


def paragraph_html(text: str, tag: str = "p") -> str:
    """Wrap one paragraph of plain text in an escaped HTML tag."""
    return f"<{tag}>{html.escape(text.strip(), quote=False)}</{tag}>"
