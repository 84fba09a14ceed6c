# src/extraction/epub_extractor.py — v1
"""EPUB extractor using ebooklib.

Keeps the body markup of each spine document so paragraph boundaries survive.
Requires the 'ebooklib' and 'beautifulsoup4' packages.
"""

from __future__ import annotations

import logging
from pathlib import Path

from folio.core.models import ExtractedContent
from folio.extraction.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)


class EpubExtractor(BaseExtractor):
    """Extractor for EPUB files (.epub)."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".epub"]

    def _extract_sync(self, path: Path) -> ExtractedContent:
        try:
            import ebooklib
            from ebooklib import epub
        except ImportError as e:
            raise ImportError(
                "ebooklib package required for EPUB extraction: "
                "pip install ebooklib beautifulsoup4"
            ) from e

        try:
            from bs4 import BeautifulSoup
        except ImportError as e:
            raise ImportError(
                "beautifulsoup4 required for EPUB extraction: pip install beautifulsoup4"
            ) from e

        book = epub.read_epub(str(path))

        text_parts: list[str] = []
        html_parts: list[str] = []

        for item in book.get_items_of_type(ebooklib.ITEM_DOCUMENT):
            markup = item.get_content().decode("utf-8", errors="replace")
            soup = BeautifulSoup(markup, "html.parser")
            for tag in soup(["script", "style"]):
                tag.decompose()

            text = soup.get_text(separator="\n", strip=True)
            if not text:
                continue
            text_parts.append(text)
            body = soup.body or soup
            html_parts.append(body.decode_contents().strip())

        return ExtractedContent(text="\n\n".join(text_parts), html="\n".join(html_parts))
