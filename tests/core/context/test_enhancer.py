from __future__ import annotations

import pytest

from core.context.enhancer import ContextEnhancer
from core.context.profiles import CASUAL_TO_FORMAL, CULTURAL_PROFILES, Formality
from models.translation_models import EnhancedTranslation, TranslationRequest, TranslationResult


@pytest.fixture
def enhancer() -> ContextEnhancer:
    return ContextEnhancer()


def _result(text: str, score: float = 0.7) -> TranslationResult:
    return TranslationResult(text=text, provider="deepl", score=score, latency_ms=120)


def test_detect_topics_respects_word_boundaries(enhancer: ContextEnhancer) -> None:
    assert enhancer.detect_topics("We have a meeting at the hotel") == frozenset({"work", "travel"})
    assert enhancer.detect_topics("this is it") == frozenset()


def test_detect_topics_matches_cjk_substrings(enhancer: ContextEnhancer) -> None:
    assert enhancer.detect_topics("明日は仕事です") == frozenset({"work"})


def test_window_keeps_most_recent_messages() -> None:
    enhancer = ContextEnhancer(window_size=3)

    for index in range(5):
        enhancer.add_message(f"message {index}", "en-US")

    window = enhancer.window
    assert [message.text for message in window] == ["message 2", "message 3", "message 4"]
    assert window[0].language == "en"


def test_recent_topics_most_recent_first(enhancer: ContextEnhancer) -> None:
    enhancer.add_message("I booked the hotel", "en")
    enhancer.add_message("Where should we have dinner?", "en")

    assert enhancer.recent_topics() == ["food", "travel"]


def test_cultural_notes_for_pair_and_target_profile(enhancer: ContextEnhancer) -> None:
    notes = enhancer.cultural_notes("en-GB", "de")

    assert len(notes) == 2
    assert "Sie" in notes[0]
    assert enhancer.cultural_notes("en", "es") == ["'Usted' is expected with strangers and elders."]


def test_cultural_notes_empty_for_same_formality(enhancer: ContextEnhancer) -> None:
    assert enhancer.cultural_notes("fr", "de") == []
    assert enhancer.cultural_notes("xx", "yy") == []


def test_formalize_preserves_capitalization(enhancer: ContextEnhancer) -> None:
    text, applied = enhancer.formalize("Hallo Anna, danke!", "de")

    assert text == "Guten Tag Anna, vielen Dank!"
    assert applied == [("Hallo", "Guten Tag"), ("danke", "vielen Dank")]


def test_formalize_has_no_rules_for_the_most_casual_register(enhancer: ContextEnhancer) -> None:
    assert enhancer.formalize("hey, thanks", "en") == ("hey, thanks", [])


@pytest.mark.parametrize("lang", sorted(CASUAL_TO_FORMAL))
def test_formal_rules_only_exist_for_languages_that_can_be_formalized(lang: str) -> None:
    assert CULTURAL_PROFILES[lang].formality > Formality.CASUAL


def test_length_ratio_adjustment(enhancer: ContextEnhancer) -> None:
    assert enhancer.length_ratio_adjustment("hello", "howdy", "en", "en") == 0.0
    assert enhancer.length_ratio_adjustment("hello", "ab", "en", "en") == -0.1
    assert enhancer.length_ratio_adjustment("hello", "x" * 20, "en", "en") == -0.2


def test_enhance_substitutes_when_target_is_more_formal(enhancer: ContextEnhancer) -> None:
    request = TranslationRequest(text="Hi friend", source_lang="en", target_lang="de")

    enhanced = enhancer.enhance(_result("Hallo Freund"), request)

    assert isinstance(enhanced, EnhancedTranslation)
    assert enhanced.text == "Guten Tag Freund"
    assert enhanced.substitutions == [("Hallo", "Guten Tag")]
    assert enhanced.original_score == 0.7
    assert len(enhanced.cultural_notes) == 2


def test_enhance_keeps_text_when_target_is_less_formal(enhancer: ContextEnhancer) -> None:
    request = TranslationRequest(text="Hola amigo", source_lang="es", target_lang="en")

    enhanced = enhancer.enhance(_result("hi friend"), request)

    assert enhanced.text == "hi friend"
    assert enhanced.substitutions == []


def test_enhance_rewards_topic_continuity(enhancer: ContextEnhancer) -> None:
    first = TranslationRequest(text="the meeting moved", source_lang="en", target_lang="es")
    second = TranslationRequest(text="the project deadline", source_lang="en", target_lang="es")

    enhanced_first = enhancer.enhance(_result("la reunión se movió"), first)
    enhanced_second = enhancer.enhance(_result("el plazo del proyecto"), second)

    assert enhanced_first.confidence_adjustment == 0.0
    assert enhanced_second.confidence_adjustment == pytest.approx(0.1)
    assert enhanced_second.score == pytest.approx(0.8)
    assert enhanced_second.topics == ["work"]
    assert len(enhancer.window) == 2


def test_enhance_rewards_long_conversation(enhancer: ContextEnhancer) -> None:
    for _ in range(10):
        enhancer.add_message("the meeting moved", "en")
    request = TranslationRequest(text="the project deadline", source_lang="en", target_lang="es")

    enhanced = enhancer.enhance(_result("el plazo del proyecto"), request)

    assert enhanced.confidence_adjustment == pytest.approx(0.15)


def test_enhance_clamps_final_score(enhancer: ContextEnhancer) -> None:
    low = enhancer.enhance(
        _result("x" * 40, score=0.1), TranslationRequest(text="hello", source_lang="en", target_lang="en-GB")
    )

    assert low.confidence_adjustment == -0.2
    assert low.score == 0.0

    for _ in range(10):
        enhancer.add_message("the meeting moved", "en")
    high = enhancer.enhance(
        _result("el plazo del proyecto", score=0.95),
        TranslationRequest(text="the project deadline", source_lang="en", target_lang="es"),
    )

    assert high.score == 1.0
