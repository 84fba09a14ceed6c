# src/extraction/pdf_extractor.py — v1
"""PDF extractor using PyMuPDF (fitz).

Each text block of a page becomes one HTML paragraph, which gives the
reader's paragraph-based pagination something meaningful to split on.
Requires the 'pymupdf' package.
"""

from __future__ import annotations

import logging
from pathlib import Path

from folio.core.models import ExtractedContent
from folio.extraction.base_extractor import BaseExtractor, paragraph_html

logger = logging.getLogger(__name__)

# Block tuple layout: (x0, y0, x1, y1, text, block_no, block_type)
_TEXT_BLOCK = 0


class PdfExtractor(BaseExtractor):
    """Extractor for PDF files using PyMuPDF."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".pdf"]

    def _extract_sync(self, path: Path) -> ExtractedContent:
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for PDF extraction: pip install pymupdf"
            ) from e

        text_parts: list[str] = []
        html_parts: list[str] = []

        with fitz.open(str(path)) as doc:
            for page in doc:
                text_parts.append(page.get_text("text"))
                for block in page.get_text("blocks"):
                    if block[6] != _TEXT_BLOCK:
                        continue
                    block_text = " ".join(block[4].split())
                    if block_text:
                        html_parts.append(paragraph_html(block_text))
            logger.debug("Extracted %d PDF pages from %s", doc.page_count, path.name)

        return ExtractedContent(text="\n".join(text_parts), html="\n".join(html_parts))
