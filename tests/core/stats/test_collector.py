from __future__ import annotations

import pytest

from core.stats.collector import StatsCollector


@pytest.fixture
def stats() -> StatsCollector:
    return StatsCollector()


def test_record_success_accumulates_latency(stats: StatsCollector) -> None:
    stats.record_success("deepl", 200)
    stats.record_success("deepl", 400)
    stats.record_failure("deepl")

    record = stats.records["deepl"]
    assert record.success_count == 2
    assert record.failure_count == 1
    assert record.attempts == 3
    assert record.avg_latency_ms == 300.0


def test_negative_latency_counts_as_zero(stats: StatsCollector) -> None:
    stats.record_success("google", -5)

    assert stats.records["google"].total_latency_ms == 0


def test_ranking_score_uses_latency_floor(stats: StatsCollector) -> None:
    stats.record_success("fast", 50)
    stats.record_failure("fast")
    stats.record_success("slow", 200)
    stats.record_success("slow", 400)

    ranking = stats.ranking()

    assert [item.provider for item in ranking] == ["fast", "slow"]
    assert ranking[0].score == pytest.approx(5.0)
    assert ranking[1].score == pytest.approx(1000.0 / 300.0)
    assert stats.best_provider() == "fast"


def test_provider_with_only_failures_scores_zero(stats: StatsCollector) -> None:
    stats.record_failure("google")

    assert stats.ranking()[0].score == 0.0


def test_best_provider_without_data(stats: StatsCollector) -> None:
    assert stats.ranking() == []
    assert stats.best_provider() is None
    assert stats.summary() == []


def test_summary_lists_providers_best_first(stats: StatsCollector) -> None:
    stats.record_success("deepl", 250)
    stats.record_failure("google")

    lines = stats.summary()

    assert len(lines) == 2
    assert lines[0].startswith("deepl: success 1/1 (100%), avg latency 250 ms")
    assert lines[1].startswith("google: success 0/1 (0%)")
