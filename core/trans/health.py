"""Per-provider circuit breaker.

A provider becomes unavailable for a cooldown after any failure and becomes available
again lazily once the cooldown has elapsed; no reset call is involved.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from models.translation_models import CircuitState, FailureKind
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Circuit

__all__: list[str] = ["ProviderHealthTracker"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

type Clock = Callable[[], float]


class ProviderHealthTracker:
    """Track circuit states keyed by provider name.

    States are created on the first failure of a provider. With escalation enabled, the
    cooldown doubles for every consecutive failure (`cooldown * 2 ** (n - 1)`), capped at
    `max_cooldown`.
    """

    def __init__(
        self,
        *,
        generic_cooldown: float = 60.0,
        rate_limit_cooldown: float = 3600.0,
        escalate: bool = False,
        max_cooldown: float = 7200.0,
        clock: Clock = time.time,
    ) -> None:
        self.generic_cooldown: float = generic_cooldown
        self.rate_limit_cooldown: float = rate_limit_cooldown
        self.escalate: bool = escalate
        self.max_cooldown: float = max_cooldown
        self._clock: Clock = clock
        self._states: dict[str, CircuitState] = {}

    @classmethod
    def from_config(cls, config: Circuit, *, clock: Clock = time.time) -> ProviderHealthTracker:
        return cls(
            generic_cooldown=config.GENERIC_COOLDOWN,
            rate_limit_cooldown=config.RATE_LIMIT_COOLDOWN,
            escalate=config.ESCALATE,
            max_cooldown=config.MAX_COOLDOWN,
            clock=clock,
        )

    def state(self, provider: str) -> CircuitState | None:
        return self._states.get(provider)

    @property
    def states(self) -> dict[str, CircuitState]:
        return dict(self._states)

    def is_available(self, provider: str) -> bool:
        """Check availability, treating an elapsed cooldown as available."""
        state: CircuitState | None = self._states.get(provider)
        if state is None or state.available:
            return True
        return self._clock() >= state.unavailable_until

    def remaining_cooldown(self, provider: str) -> float:
        state: CircuitState | None = self._states.get(provider)
        if state is None or state.available:
            return 0.0
        return max(0.0, state.unavailable_until - self._clock())

    def cooldown_for(self, kind: FailureKind, consecutive_failures: int = 1) -> float:
        base: float = self.rate_limit_cooldown if kind is FailureKind.RATE_LIMIT else self.generic_cooldown
        if not self.escalate:
            return base
        return min(base * (2 ** max(consecutive_failures - 1, 0)), max(self.max_cooldown, base))

    def record_failure(self, provider: str, kind: FailureKind = FailureKind.GENERIC) -> float:
        """Mark the provider unavailable.

        Args:
            provider (str): Provider name.
            kind (FailureKind): Failure class selecting the cooldown.

        Returns:
            float: Cooldown applied in seconds.
        """
        state: CircuitState = self._states.setdefault(provider, CircuitState())
        state.consecutive_failures += 1
        state.last_failure_kind = kind
        cooldown: float = self.cooldown_for(kind, state.consecutive_failures)
        # A long rate-limit cooldown is never shortened by a later generic failure.
        state.unavailable_until = max(state.unavailable_until, self._clock() + cooldown)
        state.available = False
        logger.warning(
            "Provider '%s' unavailable for %.0f sec (%s, consecutive failures: %d)",
            provider,
            cooldown,
            kind.value,
            state.consecutive_failures,
        )
        return cooldown

    def record_success(self, provider: str) -> None:
        state: CircuitState | None = self._states.get(provider)
        if state is None:
            return
        if state.consecutive_failures:
            logger.info("Provider '%s' recovered after %d failure(s)", provider, state.consecutive_failures)
        state.available = True
        state.consecutive_failures = 0
        state.unavailable_until = 0.0
