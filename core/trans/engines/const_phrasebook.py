"""Offline phrase table used by the phrasebook engine.

Each row maps one phrase to its equivalent in every supported language (primary subtags).
"""

from __future__ import annotations

from typing import Final

__all__: list[str] = ["PHRASES", "SUPPORTED_LANGUAGES"]

SUPPORTED_LANGUAGES: Final[tuple[str, ...]] = ("en", "es", "fr", "de", "it", "pt", "ja")

PHRASES: Final[tuple[dict[str, str], ...]] = (
    {"en": "hello", "es": "hola", "fr": "bonjour", "de": "hallo", "it": "ciao", "pt": "olá", "ja": "こんにちは"},
    {"en": "hi", "es": "hola", "fr": "salut", "de": "hallo", "it": "ciao", "pt": "oi", "ja": "やあ"},
    {
        "en": "good morning",
        "es": "buenos días",
        "fr": "bonjour",
        "de": "guten morgen",
        "it": "buongiorno",
        "pt": "bom dia",
        "ja": "おはようございます",
    },
    {
        "en": "good afternoon",
        "es": "buenas tardes",
        "fr": "bon après-midi",
        "de": "guten tag",
        "it": "buon pomeriggio",
        "pt": "boa tarde",
        "ja": "こんにちは",
    },
    {
        "en": "good evening",
        "es": "buenas noches",
        "fr": "bonsoir",
        "de": "guten abend",
        "it": "buonasera",
        "pt": "boa noite",
        "ja": "こんばんは",
    },
    {
        "en": "good night",
        "es": "buenas noches",
        "fr": "bonne nuit",
        "de": "gute nacht",
        "it": "buonanotte",
        "pt": "boa noite",
        "ja": "おやすみなさい",
    },
    {
        "en": "goodbye",
        "es": "adiós",
        "fr": "au revoir",
        "de": "auf wiedersehen",
        "it": "arrivederci",
        "pt": "adeus",
        "ja": "さようなら",
    },
    {
        "en": "see you later",
        "es": "hasta luego",
        "fr": "à plus tard",
        "de": "bis später",
        "it": "a dopo",
        "pt": "até logo",
        "ja": "またね",
    },
    {
        "en": "thank you",
        "es": "gracias",
        "fr": "merci",
        "de": "danke",
        "it": "grazie",
        "pt": "obrigado",
        "ja": "ありがとう",
    },
    {
        "en": "thank you very much",
        "es": "muchas gracias",
        "fr": "merci beaucoup",
        "de": "vielen dank",
        "it": "grazie mille",
        "pt": "muito obrigado",
        "ja": "どうもありがとうございます",
    },
    {
        "en": "you're welcome",
        "es": "de nada",
        "fr": "de rien",
        "de": "bitte schön",
        "it": "prego",
        "pt": "de nada",
        "ja": "どういたしまして",
    },
    {
        "en": "please",
        "es": "por favor",
        "fr": "s'il vous plaît",
        "de": "bitte",
        "it": "per favore",
        "pt": "por favor",
        "ja": "お願いします",
    },
    {"en": "yes", "es": "sí", "fr": "oui", "de": "ja", "it": "sì", "pt": "sim", "ja": "はい"},
    {"en": "no", "es": "no", "fr": "non", "de": "nein", "it": "no", "pt": "não", "ja": "いいえ"},
    {
        "en": "sorry",
        "es": "lo siento",
        "fr": "désolé",
        "de": "entschuldigung",
        "it": "scusa",
        "pt": "desculpe",
        "ja": "ごめんなさい",
    },
    {
        "en": "excuse me",
        "es": "disculpe",
        "fr": "excusez-moi",
        "de": "entschuldigen sie",
        "it": "mi scusi",
        "pt": "com licença",
        "ja": "すみません",
    },
    {
        "en": "how are you",
        "es": "¿cómo estás?",
        "fr": "comment ça va",
        "de": "wie geht's",
        "it": "come stai",
        "pt": "como vai",
        "ja": "お元気ですか",
    },
    {
        "en": "i'm fine",
        "es": "estoy bien",
        "fr": "je vais bien",
        "de": "mir geht's gut",
        "it": "sto bene",
        "pt": "estou bem",
        "ja": "元気です",
    },
    {
        "en": "nice to meet you",
        "es": "mucho gusto",
        "fr": "enchanté",
        "de": "freut mich",
        "it": "piacere",
        "pt": "prazer em conhecê-lo",
        "ja": "はじめまして",
    },
    {
        "en": "i don't understand",
        "es": "no entiendo",
        "fr": "je ne comprends pas",
        "de": "ich verstehe nicht",
        "it": "non capisco",
        "pt": "não entendo",
        "ja": "わかりません",
    },
    {
        "en": "can you repeat that",
        "es": "¿puede repetirlo?",
        "fr": "pouvez-vous répéter",
        "de": "können sie das wiederholen",
        "it": "può ripetere",
        "pt": "pode repetir",
        "ja": "もう一度言ってください",
    },
    {
        "en": "can you hear me",
        "es": "¿me escuchas?",
        "fr": "tu m'entends",
        "de": "hörst du mich",
        "it": "mi senti",
        "pt": "você me ouve",
        "ja": "聞こえますか",
    },
)
