# src/extraction/txt_extractor.py — v1
"""Plain text extractor: blank lines delimit paragraphs."""

from __future__ import annotations

import re
from pathlib import Path

from folio.core.models import ExtractedContent
from folio.extraction.base_extractor import BaseExtractor, paragraph_html

_BLANK_LINES = re.compile(r"\n\s*\n")


class TxtExtractor(BaseExtractor):
    """Extractor for plain text files (.txt)."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".txt"]

    def _extract_sync(self, path: Path) -> ExtractedContent:
        text = path.read_bytes().decode("utf-8", errors="replace")
        return ExtractedContent(text=text, html=self.text_to_html(text))

    @staticmethod
    def text_to_html(text: str) -> str:
        paragraphs = [p for p in _BLANK_LINES.split(text) if p.strip()]
        return "\n".join(paragraph_html(" ".join(p.split())) for p in paragraphs)
