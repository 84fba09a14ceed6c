# src/cache/cache_factory.py — v1
"""Factories wiring settings, disk store, tier manager and service."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.api.facade import ReaderService
from folio.cache.json_store import JsonDiskStore
from folio.cache.tier_manager import ExtractFn, TierManager
from folio.config.settings import Settings

if TYPE_CHECKING:
    from folio.cache.base_cache_store import BaseDiskStore


def create_disk_store(settings: Settings | None = None) -> BaseDiskStore:
    """Instantiate the JSON disk store, creating the cache directory."""
    settings = settings or Settings()
    return JsonDiskStore(cache_root=settings.cache_dir)


def create_reader_service(
    settings: Settings | None = None,
    extract: ExtractFn | None = None,
) -> ReaderService:
    """Build a ReaderService with the default stack.

    Args:
        settings: Application settings. Loaded from .env if None.
        extract: Extraction callable; defaults to the built-in adapter.

    Returns:
        An unstarted ReaderService (use ``async with`` or call ``start()``).
    """
    settings = settings or Settings()
    store = create_disk_store(settings)
    if extract is None:
        tier_manager = TierManager(settings, store)
    else:
        tier_manager = TierManager(settings, store, extract=extract)
    return ReaderService(settings, tier_manager)
