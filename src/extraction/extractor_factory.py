# src/extraction/extractor_factory.py — v1
"""Factory: instantiate extractor from document format/extension/MIME type."""

from __future__ import annotations

from pathlib import Path

from folio.core.errors import UnsupportedFormatError
from folio.extraction.base_extractor import BaseExtractor
from folio.extraction.docx_extractor import DocxExtractor
from folio.extraction.epub_extractor import EpubExtractor
from folio.extraction.pdf_extractor import PdfExtractor
from folio.extraction.txt_extractor import TxtExtractor

# Registry maps extension → extractor class.
_EXTRACTOR_REGISTRY: dict[str, type[BaseExtractor]] = {}

_MIME_EXTENSIONS: dict[str, str] = {
    "application/pdf": ".pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/epub+zip": ".epub",
    "text/plain": ".txt",
}


def _register_defaults() -> None:
    """Register built-in extractors."""
    for cls in [TxtExtractor, PdfExtractor, EpubExtractor, DocxExtractor]:
        instance = cls()
        for ext in instance.supported_extensions:
            _EXTRACTOR_REGISTRY[ext.lower()] = cls


_register_defaults()


def _normalize_extension(extension: str) -> str:
    ext = extension.strip().lower()
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext


def resolve_extension(file_path: str | Path, mime_or_ext: str = "") -> str:
    """Pick the registered extension for a file.

    ``mime_or_ext`` may be a MIME type ("application/pdf"), a dotted or bare
    extension ("docx"), or empty. Falls back to the file suffix.

    Raises:
        UnsupportedFormatError: If nothing maps to a registered extractor.
    """
    hint = (mime_or_ext or "").strip().lower()
    candidates: list[str] = []
    if "/" in hint:
        mime = hint.split(";", 1)[0].strip()
        if mime in _MIME_EXTENSIONS:
            candidates.append(_MIME_EXTENSIONS[mime])
        elif "wordprocessingml" in mime:
            candidates.append(".docx")
        elif "pdf" in mime:
            candidates.append(".pdf")
        elif "epub" in mime:
            candidates.append(".epub")
    elif hint:
        candidates.append(_normalize_extension(hint))
    candidates.append(_normalize_extension(Path(file_path).suffix))

    for ext in candidates:
        if ext in _EXTRACTOR_REGISTRY:
            return ext
    raise UnsupportedFormatError(
        f"Unsupported file format {mime_or_ext or Path(file_path).suffix!r}. "
        f"Supported: {', '.join(supported_extensions())}"
    )


def create_extractor(extension: str) -> BaseExtractor:
    """Create an extractor for the given file extension.

    Args:
        extension: File extension with or without dot (e.g. ".pdf", "docx").

    Raises:
        UnsupportedFormatError: If no extractor is registered.
    """
    ext = _normalize_extension(extension)
    cls = _EXTRACTOR_REGISTRY.get(ext)
    if cls is None:
        raise UnsupportedFormatError(
            f"No extractor for format {ext!r}. "
            f"Supported: {', '.join(supported_extensions())}"
        )
    return cls()


def register_extractor(extension: str, cls: type[BaseExtractor]) -> None:
    """Register a custom extractor for an extension."""
    _EXTRACTOR_REGISTRY[_normalize_extension(extension)] = cls


def supported_extensions() -> list[str]:
    """Return list of supported file extensions."""
    return sorted(_EXTRACTOR_REGISTRY.keys())
