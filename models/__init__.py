"""Data models for the translation engine.

This package contains dataclass definitions for configuration sections, cache entries
and the request, result and provider state types of the translation cascade.
"""

from __future__ import annotations

from models.cache_models import CacheEntry, CacheStatistics, SnapshotRecord
from models.config_models import Cache, Cascade, Circuit, Config, Context, General, Translation
from models.translation_models import (
    CharacterQuota,
    CircuitState,
    EnhancedTranslation,
    FailureKind,
    ProviderDescriptor,
    StatsRecord,
    TranslationFailure,
    TranslationOutcome,
    TranslationRequest,
    TranslationResult,
)

__all__: list[str] = [
    "Cache",
    "CacheEntry",
    "CacheStatistics",
    "Cascade",
    "CharacterQuota",
    "Circuit",
    "CircuitState",
    "Config",
    "Context",
    "EnhancedTranslation",
    "FailureKind",
    "General",
    "ProviderDescriptor",
    "SnapshotRecord",
    "StatsRecord",
    "Translation",
    "TranslationFailure",
    "TranslationOutcome",
    "TranslationRequest",
    "TranslationResult",
]
