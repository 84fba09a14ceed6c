# src/cache/json_store.py — v1
"""JSON file-based disk store.

Stores one JSON document per book under the cache directory, named by the
SHA-256 of the book id so distinct ids never share a file.
Writes go through a temporary file and ``os.replace`` so readers never see a
half-written blob.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from folio.cache.base_cache_store import BaseDiskStore
from folio.cache.fingerprint import hash_bytes
from folio.core.errors import DiskIOError
from folio.core.models import DISK_SCHEMA_VERSION, DiskIndexEntry, DiskRecord

logger = logging.getLogger(__name__)


class JsonDiskStore(BaseDiskStore):
    """File-based disk store using JSON files."""

    def __init__(self, cache_root: str | Path) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    async def save(self, book_id: str, record: DiskRecord) -> Path:
        """Persist a record atomically."""
        path = self.path_for(book_id)
        payload = record.model_dump_json()
        try:
            await asyncio.to_thread(self._write_atomic, path, payload)
        except OSError as e:
            raise DiskIOError(f"Failed to write disk cache for {book_id}: {e}", book_id) from e
        return path

    async def load(self, book_id: str) -> DiskRecord:
        """Read a record; missing, corrupt or foreign-schema files raise DiskIOError."""
        path = self.path_for(book_id)
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            raise DiskIOError(f"Failed to read disk cache for {book_id}: {e}", book_id) from e
        record = self._parse(raw, book_id)
        if record.book_id != book_id:
            raise DiskIOError(
                f"Disk cache file for {book_id} holds book {record.book_id}", book_id
            )
        return record

    async def delete(self, book_id: str) -> None:
        """Remove a record file."""
        path = self.path_for(book_id)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise DiskIOError(f"Failed to delete disk cache for {book_id}: {e}", book_id) from e

    async def scan(self) -> list[DiskIndexEntry]:
        """Enumerate valid records; unreadable blobs are removed."""
        return await asyncio.to_thread(self._scan_sync)

    def path_for(self, book_id: str) -> Path:
        """Return file path for a book id."""
        return self._root / f"{hash_bytes(book_id.encode('utf-8'))}.json"

    # --- Internals ---

    @staticmethod
    def _write_atomic(path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)

    @staticmethod
    def _parse(raw: str, book_id: str) -> DiskRecord:
        try:
            data = json.loads(raw)
            record = DiskRecord(**data)
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise DiskIOError(f"Corrupt disk cache for {book_id}: {e}", book_id) from e
        if record.schema_version != DISK_SCHEMA_VERSION:
            raise DiskIOError(
                f"Unsupported disk cache schema {record.schema_version} for {book_id}",
                book_id,
            )
        return record

    def _scan_sync(self) -> list[DiskIndexEntry]:
        entries: list[DiskIndexEntry] = []
        if not self._root.is_dir():
            return entries

        for path in sorted(self._root.glob("*.json")):
            try:
                record = self._parse(path.read_text(encoding="utf-8"), path.stem)
                if path.name != self.path_for(record.book_id).name:
                    raise DiskIOError(f"File name does not match book {record.book_id}")
            except (OSError, DiskIOError) as e:
                logger.warning("Dropping unreadable disk cache file %s: %s", path.name, e)
                try:
                    path.unlink(missing_ok=True)
                except OSError:
                    logger.warning("Could not remove %s", path.name, exc_info=True)
                continue
            entries.append(
                DiskIndexEntry(
                    book_id=record.book_id,
                    file_path=str(path),
                    cached_at=record.cached_at,
                    file_hash=record.file_hash,
                    metadata=record.metadata,
                )
            )
        return entries
