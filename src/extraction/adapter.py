# src/extraction/adapter.py — v1
"""Extraction adapter: file path + MIME/extension → (plain text, HTML).

This is the only entry point the cache layer uses. Every failure other than
an unsupported format surfaces as ExtractionFailedError.
"""

from __future__ import annotations

import logging
from pathlib import Path

from folio.core.errors import ExtractionFailedError
from folio.extraction.extractor_factory import create_extractor, resolve_extension

logger = logging.getLogger(__name__)


async def extract_content(file_path: str | Path, mime_or_ext: str = "") -> tuple[str, str]:
    """Extract plain text and HTML from a book file.

    Args:
        file_path: Path to the source document.
        mime_or_ext: MIME type or extension hint; the suffix is used if empty.

    Returns:
        ``(plain_text, html_text)``.

    Raises:
        UnsupportedFormatError: No extractor handles the format.
        ExtractionFailedError: The file is missing, unreadable or unparseable.
    """
    extension = resolve_extension(file_path, mime_or_ext)
    extractor = create_extractor(extension)
    try:
        result = await extractor.extract(file_path)
    except ImportError as e:
        raise ExtractionFailedError(str(e)) from e
    except Exception as e:
        raise ExtractionFailedError(
            f"Failed to extract {Path(file_path).name} ({extension}): {e}"
        ) from e

    logger.debug(
        "Extracted %s: %d text chars, %d html chars",
        Path(file_path).name, len(result.text), len(result.html),
    )
    return result.text, result.html
