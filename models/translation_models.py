"""Models for translation-related data.

Defines the request handed to the engine, the provider descriptor built from configuration,
per-provider circuit and statistics records, and the result/failure values returned to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from utils.string_utils import StringUtils

__all__: list[str] = [
    "FAILURE_MARKER_FORMAT",
    "CharacterQuota",
    "CircuitState",
    "EnhancedTranslation",
    "FailureKind",
    "ProviderDescriptor",
    "StatsRecord",
    "TranslationFailure",
    "TranslationOutcome",
    "TranslationRequest",
    "TranslationResult",
]

FAILURE_MARKER_FORMAT: Final[str] = "[translation failed: {text}]"


class FailureKind(StrEnum):
    """Failure class that selects the circuit breaker cooldown."""

    GENERIC = "generic"
    RATE_LIMIT = "rate_limit"


@dataclass
class TranslationRequest:
    """Translation request received from a collaborator.

    Attributes:
        text (str): Text to translate.
        source_lang (str): Source language code (BCP-47-like, e.g. "en-US").
        target_lang (str): Target language code.
    """

    text: str
    source_lang: str
    target_lang: str

    @property
    def cache_key(self) -> str:
        return StringUtils.generate_cache_key(self.text, self.source_lang, self.target_lang)

    @property
    def is_same_language(self) -> bool:
        return StringUtils.is_same_language(self.source_lang, self.target_lang)


@dataclass(frozen=True)
class ProviderDescriptor:
    """Immutable provider settings defined at startup.

    Attributes:
        name (str): Registered engine name.
        priority (int): Cascade order; lower values are tried first.
        daily_rate_budget (int): Maximum calls per day. 0 means unlimited.
        base_quality (float): Advertised quality used as the scorer's starting point.
    """

    name: str
    priority: int
    daily_rate_budget: int = 0
    base_quality: float = 0.5

    @property
    def unlimited(self) -> bool:
        return self.daily_rate_budget <= 0


@dataclass
class CircuitState:
    """Circuit breaker state of one provider.

    `available` is the stored flag; callers must use the health tracker, which treats an
    expired `unavailable_until` as available without mutating the state.
    """

    available: bool = True
    unavailable_until: float = 0.0
    consecutive_failures: int = 0
    last_failure_kind: FailureKind | None = None


@dataclass
class StatsRecord:
    """Accumulated outcome counters of one provider."""

    success_count: int = 0
    failure_count: int = 0
    total_latency_ms: int = 0

    @property
    def attempts(self) -> int:
        return self.success_count + self.failure_count

    @property
    def success_rate(self) -> float:
        if self.attempts == 0:
            return 0.0
        return self.success_count / self.attempts

    @property
    def avg_latency_ms(self) -> float:
        """Average latency over successful calls. Failed calls carry no latency."""
        if self.success_count == 0:
            return 0.0
        return self.total_latency_ms / self.success_count


@dataclass
class TranslationResult:
    """Accepted translation.

    Attributes:
        text (str): Translated text.
        provider (str): Engine name, "cache" for cache hits, or "passthrough" for same-language requests.
        score (float): Quality score in [0, 1].
        latency_ms (int): Provider latency of the accepted attempt.
    """

    text: str
    provider: str
    score: float
    latency_ms: int = 0

    @property
    def ok(self) -> bool:
        return True

    @property
    def display_text(self) -> str:
        return self.text


@dataclass
class EnhancedTranslation(TranslationResult):
    """Translation annotated by the context stage.

    Attributes:
        original_score (float): Score before the confidence adjustment.
        confidence_adjustment (float): Adjustment applied to the score.
        topics (list[str]): Topics recently discussed in the conversation.
        cultural_notes (list[str]): Hints derived from the language pair profiles.
        substitutions (list[tuple[str, str]]): Casual to formal replacements applied to the text.
    """

    original_score: float = 0.0
    confidence_adjustment: float = 0.0
    topics: list[str] = field(default_factory=list)
    cultural_notes: list[str] = field(default_factory=list)
    substitutions: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class TranslationFailure:
    """Non-fatal result returned when every provider failed."""

    original_text: str

    @property
    def ok(self) -> bool:
        return False

    @property
    def marker(self) -> str:
        return FAILURE_MARKER_FORMAT.format(text=self.original_text)

    @property
    def display_text(self) -> str:
        return self.marker

    def __str__(self) -> str:
        return self.marker


type TranslationOutcome = TranslationResult | TranslationFailure


@dataclass
class CharacterQuota:
    """Translation service character quota status.

    Attributes:
        count (int): Characters used in current billing period.
        limit (int): Maximum characters allowed in billing period.
        is_quota_valid (bool): Whether quota information is available and valid.
    """

    count: int = 0
    limit: int = 0
    is_quota_valid: bool = True
