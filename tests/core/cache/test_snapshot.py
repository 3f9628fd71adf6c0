from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from core.cache.manager import TranslationCacheManager
from core.cache.snapshot import SnapshotStore
from models.cache_models import CacheEntry

if TYPE_CHECKING:
    from pathlib import Path

DAY: float = 86400.0


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now: float = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def _cache(clock: FakeClock) -> TranslationCacheManager:
    return TranslationCacheManager(capacity=100, retention=80, clock=clock, rng=lambda: 1.0)


def test_save_and_load_drop_stale_entries(tmp_path: Path, clock: FakeClock) -> None:
    path: Path = tmp_path / "cache.json"
    cache = _cache(clock)
    cache.put("fresh", "hello", 0.9)
    cache.restore([("stale", CacheEntry("old", 0.8, clock.now - 8 * DAY, clock.now - 8 * DAY, use_count=9))])

    assert SnapshotStore(path, cache, clock=clock).save() is True

    restored = _cache(clock)
    loaded: int = SnapshotStore(path, restored, clock=clock).load()

    assert loaded == 1
    assert restored.get("fresh") == ("hello", True)
    assert "stale" not in restored
    entry = restored.peek("fresh")
    assert entry is not None
    assert entry.quality == 0.9


def test_snapshot_file_is_a_list_of_records(tmp_path: Path, clock: FakeClock) -> None:
    path: Path = tmp_path / "cache.json"
    cache = _cache(clock)
    cache.put("es-en-hola", "hello", 0.9)

    SnapshotStore(path, cache, clock=clock).save()

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(raw, list)
    assert raw[0]["key"] == "es-en-hola"


@pytest.mark.parametrize("content", ["not json", '{"key": "value"}', '[{"key": "missing entry"}]'])
def test_load_ignores_unreadable_snapshot(tmp_path: Path, clock: FakeClock, content: str) -> None:
    path: Path = tmp_path / "cache.json"
    path.write_text(content, encoding="utf-8")
    cache = _cache(clock)

    assert SnapshotStore(path, cache, clock=clock).load() == 0
    assert len(cache) == 0


def test_missing_file_loads_nothing(tmp_path: Path, clock: FakeClock) -> None:
    assert SnapshotStore(tmp_path / "absent.json", _cache(clock), clock=clock).load() == 0


def test_disabled_store(clock: FakeClock) -> None:
    store = SnapshotStore(None, _cache(clock), clock=clock)

    assert store.enabled is False
    assert store.load() == 0
    assert store.save() is False


@pytest.mark.asyncio
async def test_teardown_writes_final_snapshot(tmp_path: Path, clock: FakeClock) -> None:
    path: Path = tmp_path / "cache.json"
    cache = _cache(clock)
    store = SnapshotStore(path, cache, interval=3600.0, clock=clock)

    await store.component_load()
    cache.put("key", "value", 0.7)
    await store.component_teardown()

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert [record["key"] for record in raw] == ["key"]


@pytest.mark.asyncio
async def test_put_schedules_background_save(tmp_path: Path, clock: FakeClock) -> None:
    path: Path = tmp_path / "cache.json"
    cache = TranslationCacheManager(capacity=10, retention=5, snapshot_probability=1.0, clock=clock, rng=lambda: 0.0)
    store = SnapshotStore(path, cache, interval=3600.0, clock=clock)
    await store.component_load()

    cache.put("key", "value", 0.7)
    assert await store.save_async() is True
    await store.component_teardown()

    assert path.exists()
