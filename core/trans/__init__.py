"""Translation engines, provider health and the fallback cascade.

Importing the engines package registers every engine implementation with `TransInterface`.
"""

from core.trans import engines  # noqa: F401
from core.trans.health import ProviderHealthTracker
from core.trans.interface import (
    NotSupportedLanguagesError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationQuotaExceededError,
    TranslationRateLimitError,
)
from core.trans.manager import TransManager
from core.trans.registry import ProviderRegistry
from core.trans.scorer import QualityScorer

__all__: list[str] = [
    "NotSupportedLanguagesError",
    "ProviderHealthTracker",
    "ProviderRegistry",
    "QualityScorer",
    "Result",
    "TransInterface",
    "TransManager",
    "TranslateExceptionError",
    "TranslationQuotaExceededError",
    "TranslationRateLimitError",
]
