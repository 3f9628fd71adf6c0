"""Provider registry: ordered descriptors, engine instances, daily budgets and circuit states."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from core.trans.interface import TransInterface, TranslateExceptionError
from models.translation_models import FailureKind, ProviderDescriptor
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from core.trans.health import ProviderHealthTracker
    from models.config_models import Config
    from models.translation_models import CharacterQuota

__all__: list[str] = ["RESERVED_PROVIDER", "ProviderRegistry", "RegisteredProvider"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

RESERVED_PROVIDER: Final[str] = "phrasebook"
SECONDS_PER_DAY: Final[int] = 86400
RESERVED_PRIORITY: Final[int] = 99
RESERVED_QUALITY: Final[float] = 0.6


@dataclass
class RegisteredProvider:
    descriptor: ProviderDescriptor
    engine: TransInterface

    @property
    def name(self) -> str:
        return self.descriptor.name


class ProviderRegistry:
    """Ordered set of providers taking part in the cascade.

    The reserved offline provider is always ordered last and bypasses the circuit breaker
    and the daily budget. Budgets reset at UTC midnight.
    """

    def __init__(self, health: ProviderHealthTracker, *, clock: Callable[[], float] = time.time) -> None:
        self.health: ProviderHealthTracker = health
        self._clock: Callable[[], float] = clock
        self._providers: dict[str, RegisteredProvider] = {}
        self._usage: dict[str, int] = {}
        self._usage_day: int = self._current_day()

    @staticmethod
    def build_descriptors(providers: list[dict[str, str | int | float]]) -> list[ProviderDescriptor]:
        """Convert validated configuration items into descriptors."""
        return [
            ProviderDescriptor(
                name=str(item["name"]),
                priority=int(item.get("priority", index)),
                daily_rate_budget=int(item.get("budget", 0)),
                base_quality=float(item.get("quality", 0.5)),
            )
            for index, item in enumerate(providers)
        ]

    @staticmethod
    def is_reserved(name: str) -> bool:
        return name == RESERVED_PROVIDER

    def register(self, descriptor: ProviderDescriptor, engine: TransInterface) -> None:
        if descriptor.name in self._providers:
            msg: str = f"Provider '{descriptor.name}' is already registered."
            raise ValueError(msg)
        self._providers[descriptor.name] = RegisteredProvider(descriptor, engine)

    async def initialize(self, config: Config) -> None:
        """Instantiate and initialize the engines named in the configuration.

        Unknown names and engines that fail to start are skipped with an error log. The reserved
        offline provider is added with default settings when the configuration leaves it out.
        """
        for descriptor in self.build_descriptors(config.TRANSLATION.PROVIDERS):
            await self._load_engine(descriptor, config)

        if RESERVED_PROVIDER not in self._providers and RESERVED_PROVIDER in TransInterface.registered:
            descriptor = ProviderDescriptor(RESERVED_PROVIDER, RESERVED_PRIORITY, base_quality=RESERVED_QUALITY)
            await self._load_engine(descriptor, config)

    async def _load_engine(self, descriptor: ProviderDescriptor, config: Config) -> None:
        engine_cls: type[TransInterface] | None = TransInterface.registered.get(descriptor.name)
        if engine_cls is None:
            logger.error("Translation engine not found: '%s'", descriptor.name)
            return
        engine: TransInterface = engine_cls()
        try:
            engine.initialize(config)
        except (TranslateExceptionError, RuntimeError, ValueError) as err:
            logger.error("Failed to initialize translation engine '%s': %s", descriptor.name, err)
            return
        if not engine.is_available:
            logger.warning("Translation engine '%s' is not available and was skipped", descriptor.name)
            await engine.close()
            return
        self.register(descriptor, engine)
        logger.info(
            "Translation engine loaded: '%s' (%s, priority %d)",
            descriptor.name,
            engine.engine_name,
            descriptor.priority,
        )

    @property
    def providers(self) -> list[RegisteredProvider]:
        """All providers in cascade order."""
        return sorted(
            self._providers.values(),
            key=lambda p: (self.is_reserved(p.name), p.descriptor.priority),
        )

    @property
    def names(self) -> list[str]:
        return [provider.name for provider in self.providers]

    def get(self, name: str) -> RegisteredProvider | None:
        return self._providers.get(name)

    def _current_day(self) -> int:
        return int(self._clock() // SECONDS_PER_DAY)

    def _roll_budget_day(self) -> None:
        day: int = self._current_day()
        if day != self._usage_day:
            self._usage.clear()
            self._usage_day = day

    def usage(self, name: str) -> int:
        self._roll_budget_day()
        return self._usage.get(name, 0)

    def budget_exhausted(self, descriptor: ProviderDescriptor) -> bool:
        if descriptor.unlimited or self.is_reserved(descriptor.name):
            return False
        return self.usage(descriptor.name) >= descriptor.daily_rate_budget

    def consume_budget(self, name: str) -> None:
        self._roll_budget_day()
        self._usage[name] = self._usage.get(name, 0) + 1

    def is_callable(self, provider: RegisteredProvider) -> bool:
        """Whether the provider may be attempted right now."""
        if self.is_reserved(provider.name):
            return True
        if not self.health.is_available(provider.name):
            logger.debug(
                "Circuit open for '%s' (%.0f s left)", provider.name, self.health.remaining_cooldown(provider.name)
            )
            return False
        if self.budget_exhausted(provider.descriptor):
            logger.debug("Daily budget exhausted for '%s'", provider.name)
            return False
        return provider.engine.is_available and not provider.engine.limit_reached

    def candidates(self, limit: int | None = None) -> list[RegisteredProvider]:
        """Providers to attempt, ascending by priority, filtered by circuit state and budget.

        Args:
            limit (int | None): Maximum number of regular providers. The reserved provider is
                appended after them and never counts against the limit.
        """
        regular: list[RegisteredProvider] = [
            provider
            for provider in self.providers
            if not self.is_reserved(provider.name) and self.is_callable(provider)
        ]
        if limit is not None:
            regular = regular[: max(limit, 0)]
        reserved: RegisteredProvider | None = self._providers.get(RESERVED_PROVIDER)
        return [*regular, reserved] if reserved is not None else regular

    def classify_failure(self, provider: RegisteredProvider, err: BaseException) -> FailureKind:
        return FailureKind.RATE_LIMIT if provider.engine.is_rate_limit_error(err) else FailureKind.GENERIC

    def record_failure(self, provider: RegisteredProvider, kind: FailureKind) -> None:
        if self.is_reserved(provider.name):
            return
        self.health.record_failure(provider.name, kind)

    def record_success(self, provider: RegisteredProvider) -> None:
        self.health.record_success(provider.name)

    async def quota_report(self) -> dict[str, CharacterQuota]:
        """Character quota of every provider exposing a quota API."""
        report: dict[str, CharacterQuota] = {}
        for provider in self.providers:
            if not provider.engine.has_quota_api:
                continue
            try:
                report[provider.name] = await provider.engine.get_quota_status()
            except TranslateExceptionError as err:
                logger.warning("Failed to fetch quota for '%s': %s", provider.name, err)
        return report

    async def close(self) -> None:
        for provider in self._providers.values():
            await provider.engine.close()
        logger.info("All translation engines closed")
