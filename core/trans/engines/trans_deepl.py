from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, ClassVar

from deepl import DeepLClient, Language, TextResult, Usage
from deepl.exceptions import (
    AuthorizationException,
    ConnectionException,
    DeepLException,
    QuotaExceededException,
    TooManyRequestsException,
)

from core.trans.interface import (
    EngineAttributes,
    MalformedResponseError,
    NotSupportedLanguagesError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationQuotaExceededError,
    TranslationRateLimitError,
)
from models.translation_models import CharacterQuota
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config


__all__: list[str] = ["DeeplTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class DeeplTranslation(TransInterface):
    """DeepL engine using the official client library.

    The library is synchronous, so every API call runs in a worker thread.
    The key is read from the DEEPL_API_OAUTH environment variable.
    """

    _source_codes: ClassVar[dict[str, str]] = {}
    _target_codes: ClassVar[dict[str, str]] = {}

    def __init__(self) -> None:
        super().__init__()
        self._client: DeepLClient | None = None
        self._usage: Usage | None = None
        self._quota_exhausted: bool = False
        if not DeeplTranslation._target_codes:
            self._generate_langcode_mappings()

    @staticmethod
    def _generate_langcode_mappings() -> None:
        """Map lowercase codes to DeepL's source and target codes.

        Source codes are always primary subtags ('EN'); target codes keep the regional
        variant DeepL requires for some languages ('EN-US', 'PT-BR').
        """
        constants: list[str] = [
            value for name, value in vars(Language).items() if name.isupper() and isinstance(value, str)
        ]
        for code in constants:
            primary: str = StringUtils.primary_subtag(code)
            DeeplTranslation._source_codes[primary] = primary.upper()
            DeeplTranslation._target_codes.setdefault(primary, code.upper())
            DeeplTranslation._target_codes[code.lower()] = code.upper()

        # English and Portuguese have no plain target code.
        DeeplTranslation._target_codes["en"] = "EN-US"
        DeeplTranslation._target_codes["pt"] = "PT-BR"
        for zh_variant in ("zh-cn", "zh-tw"):
            DeeplTranslation._source_codes[zh_variant] = "ZH"
            DeeplTranslation._target_codes[zh_variant] = "ZH"
        logger.debug("Language code mapping generated for DeepL.")

    @classmethod
    def _resolve_codes(cls, src_lang: str | None, tgt_lang: str) -> tuple[str | None, str]:
        src: str | None = None
        if src_lang:
            src = cls._source_codes.get(src_lang.lower()) or cls._source_codes.get(StringUtils.primary_subtag(src_lang))
        tgt: str | None = cls._target_codes.get(tgt_lang.lower()) or cls._target_codes.get(
            StringUtils.primary_subtag(tgt_lang)
        )
        if tgt is None or (src_lang and src is None):
            msg: str = f"Languages not supported by DeepL. Source language: '{src_lang}'. Target language: '{tgt_lang}'."
            raise NotSupportedLanguagesError(msg)
        return src, tgt

    @property
    def limit_reached(self) -> bool:
        if self._quota_exhausted:
            return True
        if self._usage is None:
            return False
        return self._usage.character.limit_reached

    @property
    def is_available(self) -> bool:
        return self._client is not None and not self.limit_reached

    @staticmethod
    def fetch_engine_name() -> str:
        return "deepl"

    def initialize(self, config: Config) -> None:
        """Create the DeepL client.

        The key is only verified by the first API call, so a wrong key surfaces as a
        translation failure rather than here.
        """
        _ = config
        self.engine_attributes = EngineAttributes(name="DeepL", supports_quota_api=True)

        auth_key: str = self.get_authentication_key()
        if not auth_key:
            logger.warning("DEEPL_API_OAUTH is not set; the DeepL engine is disabled.")
            return
        try:
            self._client = DeepLClient(auth_key)
        except (ValueError, DeepLException) as err:
            logger.error("Failed to create the DeepL client: %s", err)
            self._client = None

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        if self._client is None:
            msg = "The DeepL client is not initialised"
            raise TranslateExceptionError(msg)

        src, tgt = self._resolve_codes(src_lang, tgt_lang)
        logger.debug("'content': '%s', 'src_lang': '%s', 'tgt_lang': '%s'", content, src, tgt)
        try:
            results: TextResult | list[TextResult] = await asyncio.to_thread(
                self._client.translate_text,
                content,
                source_lang=src,
                target_lang=tgt,
            )
        except QuotaExceededException as err:
            self._quota_exhausted = True
            msg = "DeepL character quota exceeded"
            raise TranslationQuotaExceededError(msg) from err
        except TooManyRequestsException as err:
            msg = "DeepL rate limit reached"
            raise TranslationRateLimitError(msg) from err
        except AuthorizationException as err:
            msg = "Authorisation failed. Please check your authentication key"
            raise TranslateExceptionError(msg) from err
        except ConnectionException as err:
            msg = "An error occurred when connecting to the DeepL server"
            raise TranslateExceptionError(msg) from err
        except DeepLException as err:
            msg = f"An anomaly occurred during the translation process at DeepL: {err}"
            raise TranslateExceptionError(msg) from err

        return self._build_result(results)

    def _build_result(self, results: TextResult | list[TextResult]) -> Result:
        if isinstance(results, list):
            if not results:
                msg = "DeepL returned an empty result list"
                raise MalformedResponseError(msg)
            results = results[0]
        if not isinstance(results, TextResult):
            msg = f"Unexpected DeepL result type: {type(results)}"
            raise MalformedResponseError(msg)

        return Result(
            text=results.text,
            detected_source_lang=(results.detected_source_lang or "").lower() or None,
            metadata={"engine": self.fetch_engine_name()},
        )

    async def get_quota_status(self) -> CharacterQuota:
        """Fetch the character usage of the current billing period.

        Raises:
            TranslateExceptionError: If the usage could not be retrieved.
        """
        if self._client is None:
            return CharacterQuota(is_quota_valid=False)
        try:
            self._usage = await asyncio.to_thread(self._client.get_usage)
        except TooManyRequestsException as err:
            msg = "DeepL rate limit reached"
            raise TranslationRateLimitError(msg) from err
        except DeepLException as err:
            msg = f"Failed to fetch DeepL usage: {err}"
            raise TranslateExceptionError(msg) from err

        character = self._usage.character
        return CharacterQuota(count=character.count or 0, limit=character.limit or 0, is_quota_valid=character.valid)

    async def close(self) -> None:
        self._client = None
        self._usage = None
        logger.debug("'%s' process termination", self.__class__.__name__)
