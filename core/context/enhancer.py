"""Conversation-aware post-processing of accepted translations.

The enhancer keeps a rolling window of recent messages and annotates each accepted
translation with topic hints, cultural notes for the language pair and a bounded
confidence adjustment. The only change it makes to the text itself is the casual to
formal substitution applied when the target language is the more formal one.
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from core.context.profiles import (
    CASUAL_TO_FORMAL,
    CULTURAL_PROFILES,
    DEFAULT_PROFILE,
    PAIR_NOTES,
    TOPIC_KEYWORDS,
    CulturalProfile,
)
from models.translation_models import EnhancedTranslation
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from models.translation_models import TranslationRequest, TranslationResult

__all__: list[str] = ["ContextEnhancer", "ContextMessage"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_WINDOW_SIZE: Final[int] = 50
LONG_CONVERSATION: Final[int] = 10
MAX_ADJUSTMENT: Final[float] = 0.2
CONVERSATION_BONUS: Final[float] = 0.05
CONTINUITY_BONUS: Final[float] = 0.1
RATIO_SOFT_PENALTY: Final[float] = 0.1
RATIO_HARD_PENALTY: Final[float] = 0.2
RATIO_SOFT_BOUNDS: Final[tuple[float, float]] = (0.5, 2.0)
RATIO_HARD_BOUNDS: Final[tuple[float, float]] = (0.3, 3.0)


def _is_cjk(text: str) -> bool:
    return any("぀" <= ch <= "鿿" or "가" <= ch <= "힯" for ch in text)


def _compile_keyword(keyword: str) -> re.Pattern[str]:
    if _is_cjk(keyword):
        return re.compile(re.escape(keyword))
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)", re.IGNORECASE)


@dataclass
class ContextMessage:
    text: str
    language: str
    topics: frozenset[str]


class ContextEnhancer:
    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE) -> None:
        self._window: deque[ContextMessage] = deque(maxlen=window_size)
        self._topic_patterns: dict[str, list[re.Pattern[str]]] = {
            topic: [_compile_keyword(keyword) for keyword in keywords] for topic, keywords in TOPIC_KEYWORDS.items()
        }
        self._formal_patterns: dict[str, list[tuple[re.Pattern[str], str]]] = {
            lang: [(re.compile(pattern, re.IGNORECASE), replacement) for pattern, replacement in rules]
            for lang, rules in CASUAL_TO_FORMAL.items()
        }

    @property
    def window(self) -> list[ContextMessage]:
        return list(self._window)

    def detect_topics(self, text: str) -> frozenset[str]:
        return frozenset(
            topic for topic, patterns in self._topic_patterns.items() if any(p.search(text) for p in patterns)
        )

    def add_message(self, text: str, language: str) -> ContextMessage:
        """Append a message to the rolling window. The oldest message drops out when full."""
        message = ContextMessage(
            text=text, language=StringUtils.primary_subtag(language), topics=self.detect_topics(text)
        )
        self._window.append(message)
        return message

    def recent_topics(self) -> list[str]:
        """Topics of the window, most recently mentioned first."""
        seen: dict[str, None] = {}
        for message in reversed(self._window):
            for topic in sorted(message.topics):
                seen.setdefault(topic, None)
        return list(seen)

    @staticmethod
    def profile(language: str) -> CulturalProfile:
        return CULTURAL_PROFILES.get(StringUtils.primary_subtag(language), DEFAULT_PROFILE)

    def cultural_notes(self, source_lang: str, target_lang: str) -> list[str]:
        src: str = StringUtils.primary_subtag(source_lang)
        tgt: str = StringUtils.primary_subtag(target_lang)
        notes: list[str] = []
        if pair_note := PAIR_NOTES.get((src, tgt)):
            notes.append(pair_note)
        target_profile: CulturalProfile = self.profile(tgt)
        if target_profile.note and self.profile(src).formality != target_profile.formality:
            notes.append(target_profile.note)
        return notes

    def formalize(self, text: str, target_lang: str) -> tuple[str, list[tuple[str, str]]]:
        """Apply casual to formal substitutions for the target language.

        Returns:
            tuple[str, list[tuple[str, str]]]: The new text and the (original, replacement) pairs applied.
        """
        applied: list[tuple[str, str]] = []

        def _replace(match: re.Match[str], replacement: str) -> str:
            original: str = match.group(0)
            if original[:1].isupper():
                replacement = replacement[:1].upper() + replacement[1:]
            applied.append((original, replacement))
            return replacement

        for pattern, replacement in self._formal_patterns.get(StringUtils.primary_subtag(target_lang), []):
            text = pattern.sub(lambda m, r=replacement: _replace(m, r), text)
        return text, applied

    def length_ratio_adjustment(self, original: str, translated: str, source_lang: str, target_lang: str) -> float:
        expected: float = self.profile(target_lang).length_factor / self.profile(source_lang).length_factor
        ratio: float = (len(translated) / max(len(original), 1)) / expected
        if not RATIO_HARD_BOUNDS[0] <= ratio <= RATIO_HARD_BOUNDS[1]:
            return -RATIO_HARD_PENALTY
        if not RATIO_SOFT_BOUNDS[0] <= ratio <= RATIO_SOFT_BOUNDS[1]:
            return -RATIO_SOFT_PENALTY
        return 0.0

    def confidence_adjustment(self, request: TranslationRequest, translated: str, topics: frozenset[str]) -> float:
        """Bounded adjustment from conversation length, topic continuity and length ratio."""
        adjustment: float = 0.0
        if len(self._window) >= LONG_CONVERSATION:
            adjustment += CONVERSATION_BONUS
        if topics and topics.intersection(self.recent_topics()):
            adjustment += CONTINUITY_BONUS
        adjustment += self.length_ratio_adjustment(request.text, translated, request.source_lang, request.target_lang)
        return max(-MAX_ADJUSTMENT, min(MAX_ADJUSTMENT, adjustment))

    def enhance(self, result: TranslationResult, request: TranslationRequest) -> EnhancedTranslation:
        """Annotate an accepted translation and record the request in the window."""
        topics: frozenset[str] = self.detect_topics(request.text)
        adjustment: float = self.confidence_adjustment(request, result.text, topics)
        notes: list[str] = self.cultural_notes(request.source_lang, request.target_lang)

        text: str = result.text
        substitutions: list[tuple[str, str]] = []
        if self.profile(request.target_lang).formality > self.profile(request.source_lang).formality:
            text, substitutions = self.formalize(text, request.target_lang)

        self.add_message(request.text, request.source_lang)
        enhanced = EnhancedTranslation(
            text=text,
            provider=result.provider,
            score=min(1.0, max(0.0, result.score + adjustment)),
            latency_ms=result.latency_ms,
            original_score=result.score,
            confidence_adjustment=adjustment,
            topics=self.recent_topics(),
            cultural_notes=notes,
            substitutions=substitutions,
        )
        logger.debug(
            "Context enhancement: adjustment %+.2f, topics %s, substitutions %d",
            adjustment,
            enhanced.topics,
            len(substitutions),
        )
        return enhanced
