# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for cache sizing, TTLs, pagination and logging.
Settings are immutable for the lifetime of a ReaderService; build a new
service to apply new values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Disk cache location ===
    cache_root: Path = Path("~/.folio/cache")

    # === Tier capacities ===
    max_hot_entries: int = 10
    max_warm_entries: int = 100
    max_disk_entries: int = 1000
    max_hot_memory_mb: float = 100.0

    # === TTLs (seconds) ===
    hot_ttl_seconds: float = 15 * 60
    warm_ttl_seconds: float = 2 * 60 * 60
    disk_ttl_seconds: float = 24 * 60 * 60

    # === Eviction ===
    hot_eviction_batch: int = 3
    warm_eviction_batch: int = 10
    disk_cleanup_ratio: float = 0.1

    # === Pagination ===
    default_words_per_page: int = 500

    # === Search ===
    search_default_limit: int = 100
    search_max_limit: int = 500
    search_context_chars: int = 150

    # === Preload ===
    preload_concurrency: int = 1

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator(
        "max_hot_entries",
        "max_warm_entries",
        "max_disk_entries",
        "hot_eviction_batch",
        "warm_eviction_batch",
        "default_words_per_page",
        "search_default_limit",
        "search_max_limit",
        "preload_concurrency",
    )
    @classmethod
    def validate_positive(cls, v: int, info) -> int:  # noqa: N805
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @field_validator("hot_ttl_seconds", "warm_ttl_seconds", "disk_ttl_seconds", "max_hot_memory_mb")
    @classmethod
    def validate_non_negative(cls, v: float, info) -> float:  # noqa: N805
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("disk_cleanup_ratio")
    @classmethod
    def validate_ratio(cls, v: float) -> float:  # noqa: N805
        if not 0 < v <= 1:
            raise ValueError("disk_cleanup_ratio must be in (0, 1]")
        return v

    @field_validator("search_context_chars")
    @classmethod
    def validate_context_chars(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("search_context_chars must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Cross-field rules."""
        errors: list[str] = []

        # Every hot book is mirrored in warm
        if self.max_warm_entries < self.max_hot_entries:
            errors.append("MAX_WARM_ENTRIES must be >= MAX_HOT_ENTRIES")

        if self.search_default_limit > self.search_max_limit:
            errors.append("SEARCH_DEFAULT_LIMIT must be <= SEARCH_MAX_LIMIT")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def cache_dir(self) -> Path:
        """Expanded disk cache directory."""
        return Path(self.cache_root).expanduser()


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or embedding).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
