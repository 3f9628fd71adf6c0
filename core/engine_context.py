"""Shared state of one translation engine instance.

EngineContext owns every table shared between requests: the cache and its snapshot store,
the circuit states, the provider registry, the statistics and the conversation window.
Components receive it explicitly; nothing is kept in module globals.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from core.cache.inflight_manager import InFlightManager
from core.cache.manager import TranslationCacheManager
from core.cache.snapshot import SnapshotStore
from core.context.enhancer import ContextEnhancer
from core.stats.collector import StatsCollector
from core.trans.health import ProviderHealthTracker
from core.trans.manager import TransManager
from core.trans.registry import ProviderRegistry
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from models.config_models import Config
    from models.translation_models import TranslationOutcome, TranslationRequest


__all__: list[str] = ["EngineContext"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

INFLIGHT_WAIT_MARGIN_SEC: Final[float] = 1.0


@dataclass
class EngineContext:
    _config: Config = field()
    _clock: Callable[[], float] = field(default=time.time)
    _cache_manager: TranslationCacheManager = field(init=False)
    _snapshot_store: SnapshotStore = field(init=False)
    _health: ProviderHealthTracker = field(init=False)
    _registry: ProviderRegistry = field(init=False)
    _stats: StatsCollector = field(init=False)
    _enhancer: ContextEnhancer | None = field(init=False)
    _inflight_manager: InFlightManager | None = field(init=False)
    _trans_manager: TransManager = field(init=False)
    _started: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        config: Config = self._config
        self._cache_manager = TranslationCacheManager.from_config(config.CACHE, clock=self._clock)
        snapshot_path: Path | None = Path(config.CACHE.SNAPSHOT_PATH) if config.CACHE.SNAPSHOT_PATH else None
        self._snapshot_store = SnapshotStore(
            snapshot_path, self._cache_manager, interval=config.CACHE.SNAPSHOT_INTERVAL, clock=self._clock
        )
        self._health = ProviderHealthTracker.from_config(config.CIRCUIT, clock=self._clock)
        self._registry = ProviderRegistry(self._health, clock=self._clock)
        self._stats = StatsCollector()
        self._enhancer = ContextEnhancer(config.CONTEXT.WINDOW_SIZE) if config.CONTEXT.ENABLED else None
        self._inflight_manager = (
            InFlightManager(
                (config.CASCADE.MAX_ATTEMPTS + 1) * config.CASCADE.ATTEMPT_TIMEOUT + INFLIGHT_WAIT_MARGIN_SEC
            )
            if config.CASCADE.SINGLE_FLIGHT
            else None
        )
        self._trans_manager = TransManager(
            config.CASCADE,
            self._registry,
            self._cache_manager,
            self._stats,
            enhancer=self._enhancer,
            inflight=self._inflight_manager,
        )

    async def start(self) -> None:
        """Initialize the engines, restore the cache snapshot and start background tasks."""
        if self._started:
            return
        logger.info("Engine context start-up started")
        await self._registry.initialize(self._config)
        await self._snapshot_store.component_load()
        if self._inflight_manager is not None:
            await self._inflight_manager.component_load()
        self._started = True
        logger.info("Engine context ready. Providers: %s", self._registry.names)

    async def close(self) -> None:
        """Stop background tasks, write the final snapshot and close the engines."""
        if not self._started:
            return
        logger.info("Engine context shutdown started")
        if self._inflight_manager is not None:
            await self._inflight_manager.component_teardown()
        await self._snapshot_store.component_teardown()
        await self._trans_manager.close()
        self._started = False
        logger.info("Engine context shutdown completed")

    async def translate(self, request: TranslationRequest) -> TranslationOutcome:
        return await self._trans_manager.translate(request)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def cache_manager(self) -> TranslationCacheManager:
        return self._cache_manager

    @property
    def snapshot_store(self) -> SnapshotStore:
        return self._snapshot_store

    @property
    def health(self) -> ProviderHealthTracker:
        return self._health

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def stats(self) -> StatsCollector:
        return self._stats

    @property
    def enhancer(self) -> ContextEnhancer | None:
        return self._enhancer

    @property
    def inflight_manager(self) -> InFlightManager | None:
        return self._inflight_manager

    @property
    def trans_manager(self) -> TransManager:
        return self._trans_manager
