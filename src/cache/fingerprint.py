# src/cache/fingerprint.py — v1
"""Source-file fingerprinting for cache invalidation.

A fingerprint is the SHA-256 of the raw file bytes. An empty string means
"unknown" and never matches, so an unreadable file always counts as changed.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


def hash_bytes(raw_bytes: bytes) -> str:
    """SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(raw_bytes).hexdigest()


def compute_file_hash(path: str | Path) -> str:
    """SHA-256 of a file, streamed in 1 MiB chunks.

    Returns an empty string if the file cannot be read.
    """
    digest = hashlib.sha256()
    try:
        with Path(path).open("rb") as fh:
            for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as e:
        logger.warning("Cannot fingerprint %s: %s", path, e)
        return ""
    return digest.hexdigest()


def has_changed(path: str | Path, known_hash: str) -> bool:
    """True if the file's current fingerprint differs from ``known_hash``."""
    if not known_hash:
        return True
    current = compute_file_hash(path)
    return not current or current != known_hash
