from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from core.engine_context import EngineContext
from models.config_models import Config
from models.translation_models import EnhancedTranslation, TranslationRequest, TranslationResult

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def config(tmp_path: Path) -> Config:
    config = Config()
    config.TRANSLATION.PROVIDERS = [{"name": "phrasebook", "priority": 1, "quality": 0.6}]
    config.CACHE.SNAPSHOT_PATH = str(tmp_path / "cache.json")
    config.CACHE.SNAPSHOT_INTERVAL = 3600.0
    return config


def test_context_wires_optional_components(config: Config) -> None:
    config.CASCADE.SINGLE_FLIGHT = True
    config.CONTEXT.ENABLED = False

    context = EngineContext(config)

    assert context.enhancer is None
    assert context.inflight_manager is not None
    assert context.inflight_manager.wait_timeout == 6 * 8.0 + 1.0
    assert context.snapshot_store.enabled is True
    assert context.cache_manager.capacity == 1000


def test_context_without_snapshot_path(config: Config) -> None:
    config.CACHE.SNAPSHOT_PATH = ""

    context = EngineContext(config)

    assert context.snapshot_store.enabled is False
    assert context.inflight_manager is None
    assert context.enhancer is not None


@pytest.mark.asyncio
async def test_start_translate_and_close(config: Config, tmp_path: Path) -> None:
    context = EngineContext(config)

    await context.start()
    await context.start()
    assert context.registry.names == ["phrasebook"]
    assert context.trans_manager.registry is context.registry

    outcome = await context.translate(TranslationRequest(text="gracias", source_lang="es", target_lang="en"))
    assert isinstance(outcome, EnhancedTranslation)
    assert outcome.text == "thank you"
    assert outcome.provider == "phrasebook"
    assert context.stats.best_provider() == "phrasebook"

    cached = await context.translate(TranslationRequest(text="Gracias ", source_lang="ES", target_lang="en"))
    assert isinstance(cached, TranslationResult)
    assert cached.provider == "cache"

    await context.close()

    raw = json.loads((tmp_path / "cache.json").read_text(encoding="utf-8"))
    assert len(raw) == 1


@pytest.mark.asyncio
async def test_snapshot_is_restored_on_start(config: Config) -> None:
    first = EngineContext(config)
    await first.start()
    await first.translate(TranslationRequest(text="hola", source_lang="es", target_lang="en"))
    await first.close()

    second = EngineContext(config)
    await second.start()
    try:
        assert len(second.cache_manager) == 1
    finally:
        await second.close()


@pytest.mark.asyncio
async def test_close_without_start_is_noop(config: Config, tmp_path: Path) -> None:
    context = EngineContext(config)

    await context.close()

    assert not (tmp_path / "cache.json").exists()
