"""Tests for TranslationCacheManager.

Covers lookups, TTL expiry, capacity eviction, statistics and export.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from core.cache.manager import TranslationCacheManager
from models.cache_models import CacheEntry
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    from pathlib import Path

    from models.cache_models import CacheStatistics

DAY: float = 86400.0


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now: float = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_manager(clock: FakeClock) -> TranslationCacheManager:
    """Create a TranslationCacheManager that never schedules snapshots."""
    return TranslationCacheManager(capacity=3, retention=2, clock=clock, rng=lambda: 1.0)


def test_retention_must_not_exceed_capacity() -> None:
    with pytest.raises(ValueError, match="Retention"):
        TranslationCacheManager(capacity=10, retention=11)
    with pytest.raises(ValueError, match="Retention"):
        TranslationCacheManager(capacity=10, retention=0)


def test_cache_miss(cache_manager: TranslationCacheManager) -> None:
    assert cache_manager.get("missing") == ("", False)
    assert cache_manager.misses == 1


def test_cache_hit_updates_usage(cache_manager: TranslationCacheManager, clock: FakeClock) -> None:
    key: str = StringUtils.generate_cache_key("Hola", "es", "en")
    cache_manager.put(key, "Hello", 0.9)
    clock.now += 10.0

    assert cache_manager.get(key) == ("Hello", True)

    entry = cache_manager.peek(key)
    assert entry is not None
    assert entry.use_count == 1
    assert entry.last_used_at == clock.now
    assert cache_manager.hits == 1


def test_put_overwrites_existing_key(cache_manager: TranslationCacheManager) -> None:
    cache_manager.put("key", "first", 0.6)
    cache_manager.get("key")
    cache_manager.put("key", "second", 1.7)

    entry = cache_manager.peek("key")
    assert len(cache_manager) == 1
    assert entry is not None
    assert entry.translation == "second"
    assert entry.use_count == 0
    assert entry.quality == 1.0


def test_default_ttl_boundary(cache_manager: TranslationCacheManager, clock: FakeClock) -> None:
    cache_manager.put("key", "value", 0.8)

    clock.now += DAY - 1
    assert cache_manager.get("key") == ("value", True)

    clock.now += 1
    assert cache_manager.get("key") == ("", False)
    assert "key" not in cache_manager


def test_popular_entries_live_longer(cache_manager: TranslationCacheManager, clock: FakeClock) -> None:
    cache_manager.put("key", "value", 0.8)
    for _ in range(TranslationCacheManager.POPULAR_USE_COUNT + 1):
        cache_manager.get("key")

    clock.now += 2 * DAY
    assert cache_manager.get("key") == ("value", True)

    clock.now += 5 * DAY
    assert cache_manager.get("key") == ("", False)


def test_eviction_keeps_frequently_used_entries(cache_manager: TranslationCacheManager, clock: FakeClock) -> None:
    for key in ("a", "b", "c"):
        cache_manager.put(key, key.upper(), 0.8)
        clock.now += 1.0
    cache_manager.get("a")
    cache_manager.get("a")
    clock.now += 1.0

    cache_manager.put("d", "D", 0.8)

    assert len(cache_manager) == 2
    assert "a" in cache_manager
    assert "d" in cache_manager
    assert cache_manager.evicted == 2


def test_snapshot_hook_called_by_probability(clock: FakeClock) -> None:
    calls: list[int] = []
    manager = TranslationCacheManager(capacity=10, retention=5, snapshot_probability=0.5, clock=clock, rng=lambda: 0.2)
    manager.set_snapshot_hook(lambda: calls.append(1))

    manager.put("key", "value", 0.8)

    assert calls == [1]

    manager.snapshot_probability = 0.1
    manager.put("key2", "value", 0.8)
    assert calls == [1]


def test_snapshot_hook_error_does_not_break_put(clock: FakeClock) -> None:
    def hook() -> None:
        msg = "no running event loop"
        raise RuntimeError(msg)

    manager = TranslationCacheManager(capacity=10, retention=5, snapshot_probability=1.0, clock=clock, rng=lambda: 0.0)
    manager.set_snapshot_hook(hook)

    manager.put("key", "value", 0.8)

    assert "key" in manager


def test_restore_evicts_over_capacity(cache_manager: TranslationCacheManager, clock: FakeClock) -> None:
    pairs = [
        (f"key{index}", CacheEntry(f"value{index}", 0.8, clock.now, clock.now - index, use_count=5 - index))
        for index in range(5)
    ]

    loaded: int = cache_manager.restore(pairs)

    assert loaded == 5
    assert [key for key, _ in cache_manager.entries()] == ["key0", "key1"]


def test_cache_statistics(cache_manager: TranslationCacheManager, clock: FakeClock) -> None:
    empty: CacheStatistics = cache_manager.get_cache_statistics()
    assert empty.total_entries == 0
    assert empty.capacity == 3

    cache_manager.put("a", "A", 0.8)
    clock.now += 5.0
    cache_manager.put("b", "B", 0.8)
    cache_manager.get("a")

    stats: CacheStatistics = cache_manager.get_cache_statistics()
    assert stats.total_entries == 2
    assert stats.total_hits == 1
    assert stats.hit_distribution == {0: 1, 1: 1}
    assert stats.newest_entry is not None
    assert stats.oldest_entry is not None
    assert stats.newest_entry - stats.oldest_entry == 5.0


def test_export_cache_detailed(cache_manager: TranslationCacheManager, tmp_path: Path) -> None:
    cache_manager.put("es:en:hola", "hello", 0.9)
    output: Path = tmp_path / "export.txt"

    assert cache_manager.export_cache_detailed(output) is True

    content: str = output.read_text(encoding="utf-8")
    assert "Cache Key: es:en:hola" in content
    assert "Translation: hello" in content
    assert "Quality: 0.90" in content


def test_export_cache_detailed_reports_failure(cache_manager: TranslationCacheManager, tmp_path: Path) -> None:
    assert cache_manager.export_cache_detailed(tmp_path / "missing" / "export.txt") is False


def test_clear(cache_manager: TranslationCacheManager) -> None:
    cache_manager.put("key", "value", 0.8)
    cache_manager.clear()

    assert len(cache_manager) == 0
