"""Constants for the Google Translate web endpoint."""

from __future__ import annotations

from typing import Final

__all__: list[str] = ["DEFAULT_SERVICE_URLS", "LANGUAGES"]

DEFAULT_SERVICE_URLS: Final[tuple[str, ...]] = (
    "translate.google.com",
    "translate.google.co.jp",
    "translate.google.co.uk",
    "translate.google.co.in",
    "translate.google.com.au",
    "translate.google.com.br",
    "translate.google.ca",
    "translate.google.de",
    "translate.google.es",
    "translate.google.fr",
    "translate.google.it",
    "translate.google.nl",
    "translate.google.pl",
    "translate.google.pt",
    "translate.google.ru",
)

LANGUAGES: Final[dict[str, str]] = {
    "af": "afrikaans",
    "ar": "arabic",
    "bg": "bulgarian",
    "bn": "bengali",
    "ca": "catalan",
    "cs": "czech",
    "da": "danish",
    "de": "german",
    "el": "greek",
    "en": "english",
    "es": "spanish",
    "et": "estonian",
    "fa": "persian",
    "fi": "finnish",
    "fr": "french",
    "he": "hebrew",
    "hi": "hindi",
    "hr": "croatian",
    "hu": "hungarian",
    "id": "indonesian",
    "it": "italian",
    "ja": "japanese",
    "ko": "korean",
    "lt": "lithuanian",
    "lv": "latvian",
    "ms": "malay",
    "nl": "dutch",
    "no": "norwegian",
    "pl": "polish",
    "pt": "portuguese",
    "ro": "romanian",
    "ru": "russian",
    "sk": "slovak",
    "sl": "slovenian",
    "sr": "serbian",
    "sv": "swedish",
    "sw": "swahili",
    "ta": "tamil",
    "th": "thai",
    "tl": "filipino",
    "tr": "turkish",
    "uk": "ukrainian",
    "ur": "urdu",
    "vi": "vietnamese",
    "zh-CN": "chinese (simplified)",
    "zh-TW": "chinese (traditional)",
}
