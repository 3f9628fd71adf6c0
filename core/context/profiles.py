"""Fixed tables used by the context enhancer: topic keywords, cultural profiles and formal substitutions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

__all__: list[str] = [
    "CASUAL_TO_FORMAL",
    "CULTURAL_PROFILES",
    "DEFAULT_PROFILE",
    "PAIR_NOTES",
    "TOPIC_KEYWORDS",
    "CulturalProfile",
    "Formality",
]


class Formality(IntEnum):
    CASUAL = 0
    NEUTRAL = 1
    FORMAL = 2


@dataclass(frozen=True)
class CulturalProfile:
    """Conversation conventions of one language.

    Attributes:
        formality (Formality): Default register of everyday conversation.
        length_factor (float): Typical text length relative to English.
        note (str): Hint shown to the reader of translations into this language.
    """

    formality: Formality = Formality.NEUTRAL
    length_factor: float = 1.0
    note: str = ""


DEFAULT_PROFILE: Final[CulturalProfile] = CulturalProfile()

CULTURAL_PROFILES: Final[dict[str, CulturalProfile]] = {
    "en": CulturalProfile(Formality.CASUAL, 1.0, "First names and casual greetings are common."),
    "es": CulturalProfile(Formality.NEUTRAL, 1.15, "'Usted' is expected with strangers and elders."),
    "pt": CulturalProfile(Formality.NEUTRAL, 1.1, "Use 'o senhor/a senhora' for formal address."),
    "it": CulturalProfile(Formality.NEUTRAL, 1.1, "'Lei' is the polite form of address."),
    "fr": CulturalProfile(Formality.FORMAL, 1.15, "'Vous' is expected until invited to use 'tu'."),
    "de": CulturalProfile(Formality.FORMAL, 1.2, "'Sie' is expected in first conversations."),
    "ja": CulturalProfile(Formality.FORMAL, 0.5, "Polite forms (desu/masu) are expected with new contacts."),
    "ko": CulturalProfile(Formality.FORMAL, 0.6, "Honorific speech levels depend on age and status."),
    "zh": CulturalProfile(Formality.NEUTRAL, 0.4, "Titles and surnames are preferred over first names."),
}

PAIR_NOTES: Final[dict[tuple[str, str], str]] = {
    ("en", "ja"): "English directness may read as abrupt in Japanese; the translation was softened.",
    ("ja", "en"): "Japanese indirect refusals may translate as hesitations rather than a clear 'no'.",
    ("en", "de"): "German separates the formal 'Sie' from the familiar 'du'.",
    ("en", "fr"): "French separates the formal 'vous' from the familiar 'tu'.",
    ("es", "en"): "Spanish diminutives often express warmth rather than size.",
}

TOPIC_KEYWORDS: Final[dict[str, tuple[str, ...]]] = {
    "greeting": ("hello", "hi", "hola", "bonjour", "hallo", "ciao", "olá", "こんにちは", "good morning", "buenos días"),
    "travel": ("flight", "airport", "hotel", "train", "ticket", "vuelo", "viaje", "voyage", "reise", "旅行"),
    "food": ("eat", "dinner", "lunch", "restaurant", "food", "comida", "cena", "manger", "essen", "ご飯"),
    "work": ("meeting", "project", "deadline", "office", "job", "trabajo", "reunión", "travail", "arbeit", "仕事"),
    "family": ("mother", "father", "family", "kids", "brother", "sister", "familia", "famille", "familie", "家族"),
    "health": ("doctor", "sick", "hospital", "medicine", "pain", "médico", "malade", "krank", "病院"),
    "technology": ("computer", "phone", "app", "internet", "software", "teléfono", "ordinateur", "handy", "パソコン"),
    "weather": ("rain", "sunny", "weather", "cold", "hot", "lluvia", "tiempo", "météo", "wetter", "天気"),
    "shopping": ("buy", "price", "shop", "store", "cost", "comprar", "precio", "acheter", "kaufen", "買い物"),
}

# Per target language: (regex, replacement) pairs applied case-insensitively.
CASUAL_TO_FORMAL: Final[dict[str, tuple[tuple[str, str], ...]]] = {
    "es": (
        (r"\bchao\b", "adiós"),
        (r"\boye\b", "disculpe"),
        (r"(?<!muchas )\bgracias\b", "muchas gracias"),
    ),
    "fr": (
        (r"\bsalut\b", "bonjour"),
        (r"\bouais\b", "oui"),
        (r"\bmerci\b(?! beaucoup)", "merci beaucoup"),
    ),
    "de": (
        (r"\bhallo\b", "guten Tag"),
        (r"\btschüss\b", "auf Wiedersehen"),
        (r"\bdanke\b(?! schön)", "vielen Dank"),
    ),
    "ja": (
        (r"ありがとう(?!ございます)", "ありがとうございます"),
        (r"ごめん(?!なさい)", "申し訳ありません"),
        (r"やあ", "こんにちは"),
    ),
}
