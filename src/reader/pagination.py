# src/reader/pagination.py — v1
"""Deterministic page slicing shared by page-fetch and search.

Text is paged by word count. HTML is paged by paragraph count, using a fixed
estimate of words per paragraph. Search walks ``iter_html_pages`` so its page
numbers are the same pages ``paginate_html`` serves; keep every boundary
computation in this module.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

AVG_WORDS_PER_PARAGRAPH = 50
PAGE_JOINER = "</p><p>"

# Closing tag, optional whitespace, then an opening tag of the same element.
# The opening tag must end right after the name or continue with attributes,
# so "</p><pre>" and "</li><link>" are not boundaries.
_PARAGRAPH_BOUNDARY = re.compile(
    r"</p>\s*<p(?:\s[^>]*)?>|</div>\s*<div(?:\s[^>]*)?>|</li>\s*<li(?:\s[^>]*)?>",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class PageSlice:
    """One page of content plus navigation flags."""

    content: str
    current_page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    total_items: int


def _check_words_per_page(words_per_page: int) -> None:
    if words_per_page <= 0:
        raise ValueError(f"words_per_page must be > 0, got {words_per_page}")


def split_words(text: str) -> list[str]:
    """Split on whitespace runs; empty tokens are discarded."""
    return text.split()


def split_paragraphs(html: str) -> list[str]:
    """Split HTML into paragraph fragments. Empty HTML has no paragraphs."""
    if not html or not html.strip():
        return []
    return _PARAGRAPH_BOUNDARY.split(html)


def paragraphs_per_page(words_per_page: int) -> int:
    _check_words_per_page(words_per_page)
    return max(1, words_per_page // AVG_WORDS_PER_PARAGRAPH)


def count_pages(total_items: int, per_page: int) -> int:
    """ceil(total_items / per_page)."""
    return -(-total_items // per_page)


def page_bounds(page: int, per_page: int, total_items: int) -> tuple[int, int]:
    """Half-open item range ``[start, end)`` of a 1-indexed page."""
    start = min((page - 1) * per_page, total_items)
    end = min(start + per_page, total_items)
    return start, end


def iter_html_pages(html: str, words_per_page: int) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(page_number, paragraphs)`` for every HTML page in order."""
    paragraphs = split_paragraphs(html)
    per_page = paragraphs_per_page(words_per_page)
    for page in range(1, count_pages(len(paragraphs), per_page) + 1):
        start, end = page_bounds(page, per_page, len(paragraphs))
        yield page, paragraphs[start:end]


def paginate_text(text: str, page: int, words_per_page: int) -> PageSlice:
    """Page ``page`` of plain text, ``words_per_page`` words per page."""
    _check_words_per_page(words_per_page)
    page = max(1, page)
    words = split_words(text)
    start, end = page_bounds(page, words_per_page, len(words))
    return PageSlice(
        content=" ".join(words[start:end]),
        current_page=page,
        total_pages=count_pages(len(words), words_per_page),
        has_next_page=end < len(words),
        has_prev_page=page > 1,
        total_items=len(words),
    )


def paginate_html(html: str, page: int, words_per_page: int) -> PageSlice:
    """Page ``page`` of HTML, ``paragraphs_per_page(words_per_page)`` paragraphs per page."""
    per_page = paragraphs_per_page(words_per_page)
    page = max(1, page)
    paragraphs = split_paragraphs(html)
    start, end = page_bounds(page, per_page, len(paragraphs))
    content = PAGE_JOINER.join(paragraphs[start:end])
    if content and not content.startswith("<"):
        content = f"<p>{content}</p>"
    return PageSlice(
        content=content,
        current_page=page,
        total_pages=count_pages(len(paragraphs), per_page),
        has_next_page=end < len(paragraphs),
        has_prev_page=page > 1,
        total_items=len(paragraphs),
    )
