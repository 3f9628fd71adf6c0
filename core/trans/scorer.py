"""Confidence scoring of provider responses."""

from __future__ import annotations

from typing import Final

__all__: list[str] = ["ERROR_MARKERS", "QualityScorer"]

SLOW_LATENCY_MS: Final[int] = 2000
VERY_SLOW_LATENCY_MS: Final[int] = 5000
MIN_TEXT_LENGTH: Final[int] = 3
MAX_TEXT_LENGTH: Final[int] = 500

SLOW_PENALTY: Final[float] = 0.1
VERY_SLOW_PENALTY: Final[float] = 0.2
SHORT_TEXT_PENALTY: Final[float] = 0.3
LONG_TEXT_PENALTY: Final[float] = 0.1
ERROR_MARKER_PENALTY: Final[float] = 0.5

# Lowercase substrings that indicate the provider returned an error text instead of a translation.
ERROR_MARKERS: Final[tuple[str, ...]] = (
    "[translation failed",
    "translation error",
    "failed to translate",
    "error:",
    "exception:",
)


class QualityScorer:
    """Deterministic score of a translated text.

    The score starts at the provider's advertised quality and is reduced for slow
    responses, suspicious text length and embedded error markers. The result is
    always clamped to [0, 1].
    """

    @staticmethod
    def latency_penalty(latency_ms: float) -> float:
        if latency_ms > VERY_SLOW_LATENCY_MS:
            return VERY_SLOW_PENALTY
        if latency_ms > SLOW_LATENCY_MS:
            return SLOW_PENALTY
        return 0.0

    @staticmethod
    def length_penalty(text: str) -> float:
        if len(text) < MIN_TEXT_LENGTH:
            return SHORT_TEXT_PENALTY
        if len(text) > MAX_TEXT_LENGTH:
            return LONG_TEXT_PENALTY
        return 0.0

    @staticmethod
    def contains_error_marker(text: str) -> bool:
        lowered: str = text.lower()
        return any(marker in lowered for marker in ERROR_MARKERS)

    @classmethod
    def score(cls, base_quality: float, latency_ms: float, text: str) -> float:
        """Score a translation.

        Args:
            base_quality (float): Advertised quality of the provider.
            latency_ms (float): Time the provider took to answer.
            text (str): Translated text.

        Returns:
            float: Score in [0, 1].
        """
        value: float = base_quality
        value -= cls.latency_penalty(latency_ms)
        value -= cls.length_penalty(text)
        if cls.contains_error_marker(text):
            value -= ERROR_MARKER_PENALTY
        return min(1.0, max(0.0, value))
