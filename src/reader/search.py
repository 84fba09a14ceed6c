# src/reader/search.py — v1
"""Full-text search over a book's HTML, tagged with reader page numbers.

Pages come from ``iter_html_pages`` so a hit reported on page N is on the
page N that ``paginate_html`` returns for the same ``words_per_page``.
"""

from __future__ import annotations

import re

from folio.core.models import SearchMatch, SearchResult
from folio.reader.pagination import PAGE_JOINER, iter_html_pages

ELLIPSIS = "..."
DEFAULT_CONTEXT_CHARS = 150
DEFAULT_MAX_LIMIT = 500

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")
_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)


def clean_html(fragment: str) -> str:
    """Strip tags, decode common entities and collapse whitespace for display."""
    text = _TAG_RE.sub("", fragment)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return _WS_RE.sub(" ", text).strip()


def _match_pattern(query: str) -> re.Pattern[str]:
    # Zero-width lookahead: every start offset is reported, including
    # overlapping occurrences, with offsets into the original text.
    return re.compile(f"(?=({re.escape(query)}))", re.IGNORECASE)


def _build_match(
    page_text: str, start: int, end: int, page_number: int, context_chars: int
) -> SearchMatch:
    ctx_start = max(0, start - context_chars)
    ctx_end = min(len(page_text), end + context_chars)
    lead = ELLIPSIS if ctx_start > 0 else ""
    trail = ELLIPSIS if ctx_end < len(page_text) else ""
    window = clean_html(page_text[ctx_start:ctx_end])
    return SearchMatch(
        page_number=page_number,
        match=clean_html(page_text[start:end]),
        before_context=clean_html(page_text[ctx_start:start]),
        after_context=clean_html(page_text[end:ctx_end]),
        context=f"{lead}{window}{trail}",
        full_context=window,
    )


def search_html(
    html: str,
    query: str,
    *,
    words_per_page: int,
    limit: int,
    max_limit: int = DEFAULT_MAX_LIMIT,
    context_chars: int = DEFAULT_CONTEXT_CHARS,
) -> SearchResult:
    """Find every case-insensitive occurrence of ``query`` in ``html``.

    Results are ordered by page, then by position within the page. Only the
    first ``min(limit, max_limit)`` matches are materialised; the rest are
    counted.

    Args:
        html: Full book HTML.
        query: Search term. Blank queries return an empty result.
        words_per_page: Same value the reader paginates with.
        limit: Requested result count.
        max_limit: Hard cap on returned results.
        context_chars: Characters of context kept on each side of a match.
    """
    if not query or not query.strip():
        return SearchResult(query=query or "")

    applied_limit = max(0, min(limit, max_limit))
    pattern = _match_pattern(query)
    results: list[SearchMatch] = []
    total = 0

    for page_number, paragraphs in iter_html_pages(html, words_per_page):
        # Joined like paginate_html so a hit reads the same as the served page.
        page_text = PAGE_JOINER.join(paragraphs)
        for m in pattern.finditer(page_text):
            total += 1
            if len(results) < applied_limit:
                results.append(
                    _build_match(page_text, m.start(1), m.end(1), page_number, context_chars)
                )

    return SearchResult(
        query=query,
        results=results,
        total_matches=total,
        returned_matches=len(results),
        limit=applied_limit,
        has_more=total > applied_limit,
    )
