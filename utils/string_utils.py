from __future__ import annotations

import unicodedata
from typing import Final

__all__: list[str] = ["StringUtils"]

KEY_SEPARATOR: Final[str] = "-"


class StringUtils:
    """String helpers shared by the cache, the cascade and the context stage."""

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Return the value as a string, mapping None to an empty string.

        Whitespace is left untouched; callers decide whether to strip.

        Args:
            value (str | None): The value to coerce.

        Returns:
            str: The value as a string.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def compress_blanks(value: str) -> str:
        """Collapse runs of whitespace into single spaces and trim both ends."""
        value = StringUtils.ensure_str(value)
        return " ".join(value.split())

    @staticmethod
    def normalize_text(text: str) -> str:
        """Normalize text using Unicode NFC normalization."""
        return unicodedata.normalize("NFC", text)

    @staticmethod
    def primary_subtag(language: str | None) -> str:
        """Extract the primary language subtag from a BCP-47-like code.

        Both '-' and '_' are accepted as separators.

        Examples:
            'en-US' -> 'en', 'pt_BR' -> 'pt', 'JA' -> 'ja'

        Args:
            language (str | None): Language code.

        Returns:
            str: Lowercase primary subtag, or an empty string.
        """
        code: str = StringUtils.ensure_str(language).strip().replace("_", "-")
        return code.split("-", 1)[0].lower()

    @staticmethod
    def is_same_language(source_lang: str | None, target_lang: str | None) -> bool:
        """Check whether two language codes share the same primary subtag.

        Empty codes never match, so an unknown source language still goes through translation.
        """
        source: str = StringUtils.primary_subtag(source_lang)
        target: str = StringUtils.primary_subtag(target_lang)
        return bool(source) and source == target

    @staticmethod
    def generate_cache_key(source_text: str, source_lang: str, target_lang: str) -> str:
        """Build the canonical cache key for a translation request.

        The key is `lower(source)-lower(target)-lower(trim(text))`, with the text NFC normalised
        so that composed and decomposed forms of the same string share one entry.

        Args:
            source_text (str): Text to translate.
            source_lang (str): Source language code.
            target_lang (str): Target language code.

        Returns:
            str: Canonical cache key.
        """
        normalized: str = StringUtils.normalize_text(StringUtils.ensure_str(source_text).strip()).lower()
        return KEY_SEPARATOR.join(
            (
                StringUtils.ensure_str(source_lang).lower(),
                StringUtils.ensure_str(target_lang).lower(),
                normalized,
            )
        )
