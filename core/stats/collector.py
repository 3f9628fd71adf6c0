"""Observational per-provider statistics.

Nothing in the cascade reads these numbers; they only feed reporting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, NamedTuple

from models.translation_models import StatsRecord
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["ProviderRanking", "StatsCollector"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

LATENCY_FLOOR_MS: Final[float] = 100.0
LATENCY_SCALE_MS: Final[float] = 1000.0


class ProviderRanking(NamedTuple):
    provider: str
    score: float
    record: StatsRecord


class StatsCollector:
    def __init__(self) -> None:
        self._records: dict[str, StatsRecord] = {}

    def record(self, provider: str) -> StatsRecord:
        return self._records.setdefault(provider, StatsRecord())

    @property
    def records(self) -> dict[str, StatsRecord]:
        return dict(self._records)

    def record_success(self, provider: str, latency_ms: int) -> None:
        record: StatsRecord = self.record(provider)
        record.success_count += 1
        record.total_latency_ms += max(0, int(latency_ms))

    def record_failure(self, provider: str) -> None:
        self.record(provider).failure_count += 1

    @staticmethod
    def ranking_score(record: StatsRecord) -> float:
        """`success_rate * 1000 / max(avg_latency_ms, 100)`."""
        return record.success_rate * (LATENCY_SCALE_MS / max(record.avg_latency_ms, LATENCY_FLOOR_MS))

    def ranking(self) -> list[ProviderRanking]:
        """Providers with at least one attempt, best first. Ties keep first-recorded order."""
        ranked: list[ProviderRanking] = [
            ProviderRanking(name, self.ranking_score(record), record)
            for name, record in self._records.items()
            if record.attempts > 0
        ]
        return sorted(ranked, key=lambda item: item.score, reverse=True)

    def best_provider(self) -> str | None:
        ranked: list[ProviderRanking] = self.ranking()
        return ranked[0].provider if ranked else None

    def summary(self) -> list[str]:
        lines: list[str] = []
        for item in self.ranking():
            record: StatsRecord = item.record
            lines.append(
                f"{item.provider}: success {record.success_count}/{record.attempts} "
                f"({record.success_rate:.0%}), avg latency {record.avg_latency_ms:.0f} ms, score {item.score:.2f}"
            )
        return lines
