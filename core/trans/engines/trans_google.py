"""Google Translate engine backed by the public web endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.trans.engines.async_google_translate import (
    AsyncTranslator,
    GoogleError,
    HTTPConnectionError,
    HTTPError,
    HTTPTimeoutError,
    HTTPTooManyRequests,
    ResponseFormatError,
    TextResult,
)
from core.trans.interface import (
    EngineAttributes,
    MalformedResponseError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationRateLimitError,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = ["GoogleTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class GoogleTranslation(TransInterface):
    def __init__(self) -> None:
        super().__init__()
        self._client: AsyncTranslator | None = None

    @property
    def is_available(self) -> bool:
        return self._client is not None

    @staticmethod
    def fetch_engine_name() -> str:
        return "google"

    def initialize(self, config: Config) -> None:
        self.engine_attributes = EngineAttributes(name="Google Translate")
        self._client = AsyncTranslator(
            url_suffix=config.TRANSLATION.GOOGLE_SUFFIX,
            timeout=config.CASCADE.ATTEMPT_TIMEOUT,
        )
        logger.debug("'%s' initialized (suffix: %s)", self.__class__.__name__, self._client.url_suffix)

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        if self._client is None:
            msg = "The google client is not initialised"
            raise TranslateExceptionError(msg)

        logger.debug("'content': '%s', 'src_lang': '%s', 'tgt_lang': '%s'", content, src_lang, tgt_lang)
        try:
            result: TextResult = await self._client.translate(content, tgt_lang, src_lang)
        except HTTPTooManyRequests as err:
            msg = "Google rate limit reached"
            raise TranslationRateLimitError(msg) from err
        except ResponseFormatError as err:
            msg = f"Unexpected response from Google: {err}"
            raise MalformedResponseError(msg) from err
        except (HTTPError, HTTPConnectionError, HTTPTimeoutError, GoogleError) as err:
            msg = f"An anomaly occurred during translation at Google: {err}"
            raise TranslateExceptionError(msg) from err

        return Result(
            text=result.text,
            detected_source_lang=result.detected_source_lang,
            metadata={"engine": self.fetch_engine_name(), **(result.metadata or {})},
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
        logger.info("'%s' process termination", self.__class__.__name__)
