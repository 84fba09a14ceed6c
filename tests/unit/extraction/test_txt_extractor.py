# tests/unit/extraction/test_txt_extractor.py — v1
"""Tests for extraction/txt_extractor.py and base_extractor helpers."""

from __future__ import annotations

import pytest

from folio.extraction.base_extractor import paragraph_html
from folio.extraction.txt_extractor import TxtExtractor


class TestTextToHtml:
    def test_blank_lines_split_paragraphs(self):
        html = TxtExtractor.text_to_html("one\ntwo\n\n\nthree\n   \nfour")
        assert html == "<p>one two</p>\n<p>three</p>\n<p>four</p>"

    def test_escapes_markup(self):
        assert TxtExtractor.text_to_html("a < b & c") == "<p>a &lt; b &amp; c</p>"

    def test_empty(self):
        assert TxtExtractor.text_to_html("") == ""

    def test_paragraph_html_tag(self):
        assert paragraph_html("  Title ", "h2") == "<h2>Title</h2>"


class TestTxtExtractor:
    @pytest.mark.asyncio
    async def test_extract(self, tmp_path):
        path = tmp_path / "book.txt"
        path.write_text("Call me Ishmael.\n\nSome years ago.", encoding="utf-8")
        result = await TxtExtractor().extract(path)
        assert result.text == "Call me Ishmael.\n\nSome years ago."
        assert result.html.count("<p>") == 2

    @pytest.mark.asyncio
    async def test_invalid_utf8_replaced(self, tmp_path):
        path = tmp_path / "latin.txt"
        path.write_bytes(b"caf\xe9")
        result = await TxtExtractor().extract(path)
        assert result.text.startswith("caf")

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await TxtExtractor().extract(tmp_path / "nope.txt")
