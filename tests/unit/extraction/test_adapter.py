# tests/unit/extraction/test_adapter.py — v1
"""Tests for extraction/adapter.py."""

from __future__ import annotations

import pytest

from folio.core.errors import ExtractionFailedError, UnsupportedFormatError
from folio.extraction.adapter import extract_content


class TestExtractContent:
    @pytest.mark.asyncio
    async def test_txt(self, tmp_path):
        path = tmp_path / "book.txt"
        path.write_text("First line\nsame paragraph.\n\nSecond paragraph.", encoding="utf-8")
        text, html = await extract_content(path, "text/plain")
        assert text.startswith("First line")
        assert html == "<p>First line same paragraph.</p>\n<p>Second paragraph.</p>"

    @pytest.mark.asyncio
    async def test_hint_from_suffix(self, tmp_path):
        path = tmp_path / "book.txt"
        path.write_text("hello", encoding="utf-8")
        text, _ = await extract_content(str(path))
        assert text == "hello"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(ExtractionFailedError, match="missing.txt"):
            await extract_content(tmp_path / "missing.txt")

    @pytest.mark.asyncio
    async def test_unsupported_format(self, tmp_path):
        path = tmp_path / "image.png"
        path.write_bytes(b"\x89PNG")
        with pytest.raises(UnsupportedFormatError):
            await extract_content(path)

    @pytest.mark.asyncio
    async def test_corrupt_pdf(self, tmp_path):
        pytest.importorskip("fitz")
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf")
        with pytest.raises(ExtractionFailedError) as exc_info:
            await extract_content(path)
        assert exc_info.value.__cause__ is not None
