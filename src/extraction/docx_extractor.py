# src/extraction/docx_extractor.py — v1
"""DOCX extractor using python-docx.

Headings map to <hN>, body paragraphs to <p>, tables to a <table> block.
Requires the 'python-docx' package.
"""

from __future__ import annotations

import html
import logging
from pathlib import Path

from folio.core.models import ExtractedContent
from folio.extraction.base_extractor import BaseExtractor, paragraph_html

logger = logging.getLogger(__name__)


class DocxExtractor(BaseExtractor):
    """Extractor for Word documents (.docx)."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".docx"]

    def _extract_sync(self, path: Path) -> ExtractedContent:
        try:
            import docx
        except ImportError as e:
            raise ImportError(
                "python-docx package required for DOCX extraction: "
                "pip install python-docx"
            ) from e

        doc = docx.Document(str(path))

        text_parts: list[str] = []
        html_parts: list[str] = []

        for para in doc.paragraphs:
            if not para.text.strip():
                continue
            text_parts.append(para.text)
            level = self._heading_level(para.style.name if para.style else "")
            tag = f"h{level}" if level else "p"
            html_parts.append(paragraph_html(para.text, tag))

        for table in doc.tables:
            rows = [[cell.text.strip() for cell in row.cells] for row in table.rows]
            if rows:
                text_parts.append("\n".join("\t".join(r) for r in rows))
                html_parts.append(self._rows_to_html(rows))

        return ExtractedContent(text="\n\n".join(text_parts), html="\n".join(html_parts))

    @staticmethod
    def _heading_level(style_name: str) -> int:
        """Return 1-6 for 'Heading N' styles, 0 otherwise."""
        name = (style_name or "").lower()
        if not name.startswith("heading"):
            return 0
        try:
            level = int(name.replace("heading", "").strip())
        except ValueError:
            level = 1
        return min(max(level, 1), 6)

    @staticmethod
    def _rows_to_html(rows: list[list[str]]) -> str:
        body = "".join(
            "<tr>" + "".join(f"<td>{html.escape(c, quote=False)}</td>" for c in row) + "</tr>"
            for row in rows
        )
        return f"<table>{body}</table>"
