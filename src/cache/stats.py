# src/cache/stats.py — v1
"""Cache statistics: per-tier hit counters and the report served to admins."""

from __future__ import annotations

from dataclasses import dataclass, fields

from pydantic import BaseModel


@dataclass
class CacheStats:
    """Mutable counters owned by the TierManager."""

    hot_hits: int = 0
    warm_hits: int = 0
    disk_hits: int = 0
    misses: int = 0
    extractions: int = 0
    promotions: int = 0
    evictions: int = 0

    @property
    def hits(self) -> int:
        return self.hot_hits + self.warm_hits + self.disk_hits

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Hit rate as a percentage (0-100)."""
        total = self.total_requests
        return self.hits / total * 100 if total > 0 else 0.0

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, 0)


class TierReport(BaseModel):
    entries: int
    max_size: int
    utilization_percent: float


class HotTierReport(TierReport):
    memory_usage_mb: float
    max_memory_mb: float


class PerformanceReport(BaseModel):
    hit_rate: float
    hot_hits: int
    warm_hits: int
    disk_hits: int
    misses: int
    total_requests: int
    extractions: int
    promotions: int
    evictions: int


class CacheStatsReport(BaseModel):
    """Snapshot returned by ReaderService.get_cache_stats()."""

    hot_cache: HotTierReport
    warm_cache: TierReport
    disk_cache: TierReport
    performance: PerformanceReport


def utilization(entries: int, max_size: int) -> float:
    return round(entries / max_size * 100, 1) if max_size else 0.0


def performance_report(stats: CacheStats) -> PerformanceReport:
    return PerformanceReport(
        hit_rate=round(stats.hit_rate, 2),
        hot_hits=stats.hot_hits,
        warm_hits=stats.warm_hits,
        disk_hits=stats.disk_hits,
        misses=stats.misses,
        total_requests=stats.total_requests,
        extractions=stats.extractions,
        promotions=stats.promotions,
        evictions=stats.evictions,
    )
