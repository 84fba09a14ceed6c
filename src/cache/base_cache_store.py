# src/cache/base_cache_store.py — v1
"""Abstract disk store interface: one persisted record per book."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from folio.core.models import DiskIndexEntry, DiskRecord


class BaseDiskStore(ABC):
    """Durable backstop beneath the in-memory tiers.

    Implementations raise DiskIOError on failure; callers decide whether the
    failure is fatal.
    """

    @abstractmethod
    async def save(self, book_id: str, record: DiskRecord) -> Path:
        """Persist a record, returning the file it was written to."""

    @abstractmethod
    async def load(self, book_id: str) -> DiskRecord:
        """Read and validate a record."""

    @abstractmethod
    async def delete(self, book_id: str) -> None:
        """Remove a record. Missing records are not an error."""

    @abstractmethod
    async def scan(self) -> list[DiskIndexEntry]:
        """Enumerate persisted records (used to rebuild the disk index)."""

    @abstractmethod
    def path_for(self, book_id: str) -> Path:
        """Location of the record for ``book_id``."""
