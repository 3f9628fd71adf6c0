"""Provider statistics for diagnostics and reporting."""

from __future__ import annotations

from core.stats.collector import ProviderRanking, StatsCollector

__all__: list[str] = ["ProviderRanking", "StatsCollector"]
