# tests/unit/config/test_settings.py — v1
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from folio.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_capacities(self):
        s = Settings(_env_file=None)
        assert s.max_hot_entries == 10
        assert s.max_warm_entries == 100
        assert s.max_disk_entries == 1000
        assert s.max_hot_memory_mb == 100.0

    def test_default_ttls(self):
        s = Settings(_env_file=None)
        assert s.hot_ttl_seconds == 900
        assert s.warm_ttl_seconds == 7200
        assert s.disk_ttl_seconds == 86400

    def test_default_reader(self):
        s = Settings(_env_file=None)
        assert s.default_words_per_page == 500
        assert s.search_default_limit == 100
        assert s.search_max_limit == 500
        assert s.search_context_chars == 150

    def test_cache_dir_expands_user(self):
        s = Settings(_env_file=None, cache_root=Path("~/somewhere"))
        assert "~" not in str(s.cache_dir)


class TestSettingsEnv:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MAX_HOT_ENTRIES", "4")
        monkeypatch.setenv("HOT_TTL_SECONDS", "60")
        s = Settings(_env_file=None)
        assert s.max_hot_entries == 4
        assert s.hot_ttl_seconds == 60

    def test_reads_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("MAX_DISK_ENTRIES=42\nUNRELATED_KEY=x\n", encoding="utf-8")
        s = Settings(_env_file=env)
        assert s.max_disk_entries == 42


class TestSettingsValidation:
    def test_warm_smaller_than_hot(self):
        with pytest.raises(ConfigurationError, match="MAX_WARM_ENTRIES"):
            Settings(_env_file=None, max_hot_entries=20, max_warm_entries=10)

    def test_default_limit_above_max(self):
        with pytest.raises(ConfigurationError, match="SEARCH_DEFAULT_LIMIT"):
            Settings(_env_file=None, search_default_limit=600, search_max_limit=500)

    def test_non_positive_capacity(self):
        with pytest.raises(ValidationError, match="max_hot_entries"):
            Settings(_env_file=None, max_hot_entries=0)

    def test_negative_ttl(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, hot_ttl_seconds=-1)

    @pytest.mark.parametrize("ratio", [0, 1.5])
    def test_cleanup_ratio_bounds(self, ratio):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, disk_cleanup_ratio=ratio)

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")


class TestLoadSettings:
    def test_overrides(self, tmp_path):
        s = load_settings(_env_file=None, cache_root=tmp_path, max_hot_entries=2)
        assert s.max_hot_entries == 2
        assert s.cache_dir == tmp_path
