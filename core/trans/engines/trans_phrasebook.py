"""Offline last-resort engine that translates common conversational phrases from a fixed table."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Final

from core.trans.engines.const_phrasebook import PHRASES, SUPPORTED_LANGUAGES
from core.trans.interface import (
    EngineAttributes,
    NotSupportedLanguagesError,
    Result,
    TransInterface,
    TranslateExceptionError,
)
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = ["PhrasebookTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

_STRIP_CHARS: Final[str] = " .,!?¡¿。！？、~"

type PhraseTable = dict[str, str]


class PhrasebookTranslation(TransInterface):
    """Phrase lookup without network access or rate budget.

    Lookups ignore case, surrounding punctuation and repeated whitespace. A miss raises
    `TranslateExceptionError` so that the cascade reports it like any other failed attempt.
    """

    _tables: ClassVar[dict[tuple[str, str], PhraseTable]] = {}

    def __init__(self) -> None:
        super().__init__()
        self._initialized: bool = False

    @property
    def is_available(self) -> bool:
        return self._initialized

    @staticmethod
    def fetch_engine_name() -> str:
        return "phrasebook"

    def initialize(self, config: Config) -> None:
        _ = config
        self.engine_attributes = EngineAttributes(name="Phrasebook")
        self._initialized = True

    @staticmethod
    def normalize_phrase(text: str) -> str:
        return StringUtils.compress_blanks(StringUtils.normalize_text(text)).strip(_STRIP_CHARS).lower()

    @classmethod
    def _table_for(cls, src: str, tgt: str) -> PhraseTable:
        key: tuple[str, str] = (src, tgt)
        if key not in cls._tables:
            table: PhraseTable = {}
            for row in PHRASES:
                # Earlier rows win when a source phrase is ambiguous ('hola' -> 'hello', not 'hi').
                table.setdefault(cls.normalize_phrase(row[src]), row[tgt])
            cls._tables[key] = table
        return cls._tables[key]

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        src: str = StringUtils.primary_subtag(src_lang)
        tgt: str = StringUtils.primary_subtag(tgt_lang)
        if src not in SUPPORTED_LANGUAGES or tgt not in SUPPORTED_LANGUAGES:
            msg: str = f"Language pair not covered by the phrasebook: '{src_lang}' > '{tgt_lang}'"
            raise NotSupportedLanguagesError(msg)

        phrase: str | None = self._table_for(src, tgt).get(self.normalize_phrase(content))
        if phrase is None:
            msg = "No phrasebook entry for the given text"
            raise TranslateExceptionError(msg)

        first_letter: str = next((ch for ch in content if ch.isalpha()), "")
        if first_letter.isupper():
            phrase = phrase[:1].upper() + phrase[1:]
        logger.debug("Phrasebook hit (%s > %s): '%s' -> '%s'", src, tgt, content, phrase)
        return Result(text=phrase, detected_source_lang=src, metadata={"engine": self.fetch_engine_name()})

    async def close(self) -> None:
        self._initialized = False
