"""Google Cloud Translation API Basic (v2) engine.

Authentication uses either a service account (GOOGLE_APPLICATION_CREDENTIALS) or an API key
in GOOGLE_CLOUD_API_OAUTH.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Final

from google.api_core.exceptions import BadRequest, Forbidden, GoogleAPIError, TooManyRequests
from google.auth.credentials import AnonymousCredentials
from google.auth.exceptions import DefaultCredentialsError
from google.auth.transport.requests import AuthorizedSession
from google.cloud import translate_v2 as translate

from core.trans.interface import (
    EngineAttributes,
    MalformedResponseError,
    NotSupportedLanguagesError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationRateLimitError,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = ["GoogleCloudTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

RATE_LIMIT_REASONS: Final[frozenset[str]] = frozenset(
    {"dailyLimitExceeded", "userRateLimitExceeded", "rateLimitExceeded", "quotaExceeded", "RATE_LIMIT_EXCEEDED"}
)


class APIKeySession(AuthorizedSession):
    """Authorized session that appends the API key to every request URL."""

    def __init__(self, api_key: str) -> None:
        super().__init__(AnonymousCredentials())
        self.api_key: str = api_key

    def request(self, method: str, url: str, *args: Any, **kwargs: Any):
        separator: str = "&" if "?" in url else "?"
        return super().request(method, f"{url}{separator}key={self.api_key}", *args, **kwargs)


class GoogleCloudTranslation(TransInterface):
    def __init__(self) -> None:
        super().__init__()
        self._client: translate.Client | None = None

    @property
    def is_available(self) -> bool:
        return self._client is not None

    @staticmethod
    def fetch_engine_name() -> str:
        return "google_cloud"

    def initialize(self, config: Config) -> None:
        _ = config
        self.engine_attributes = EngineAttributes(name="Google Cloud Translation")

        api_key: str = self.get_authentication_key()
        try:
            if api_key:
                logger.debug("Using API key authentication")
                self._client = translate.Client(credentials=AnonymousCredentials(), _http=APIKeySession(api_key))
            else:
                logger.debug("Using default credentials (GOOGLE_APPLICATION_CREDENTIALS)")
                self._client = translate.Client()
        except DefaultCredentialsError as err:
            logger.warning("Google Cloud credentials are not configured; the engine is disabled: %s", err)
            self._client = None

    @staticmethod
    def is_quota_rejection(err: Forbidden) -> bool:
        """Whether a 403 carries one of the rate limit reasons rather than an access problem."""
        reasons: set[str] = {
            str(item.get("reason", "")) for item in getattr(err, "errors", None) or [] if isinstance(item, dict)
        }
        if reason := getattr(err, "reason", None):
            reasons.add(str(reason))
        return not reasons.isdisjoint(RATE_LIMIT_REASONS)

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        if self._client is None:
            msg = "The Google Cloud client is not initialised"
            raise TranslateExceptionError(msg)

        logger.debug("'content': '%s', 'src_lang': '%s', 'tgt_lang': '%s'", content, src_lang, tgt_lang)
        try:
            response: dict[str, Any] = await asyncio.to_thread(
                self._client.translate,
                content,
                target_language=tgt_lang,
                source_language=src_lang,
                format_="text",
            )
        except BadRequest as err:
            msg: str = f"Unsupported language pair (src: '{src_lang}', tgt: '{tgt_lang}'): {err}"
            raise NotSupportedLanguagesError(msg) from err
        except TooManyRequests as err:
            msg = f"Translation rate limited: {err}"
            raise TranslationRateLimitError(msg) from err
        except Forbidden as err:
            # The v2 API reports daily and per-user limits as 403.
            if self.is_quota_rejection(err):
                msg = f"Translation quota rejected: {err}"
                raise TranslationRateLimitError(msg) from err
            msg = f"Translation request forbidden: {err}"
            raise TranslateExceptionError(msg) from err
        except GoogleAPIError as err:
            msg = f"Translation failed: {err}"
            raise TranslateExceptionError(msg) from err

        try:
            translated_text: str = response["translatedText"]
        except (KeyError, TypeError) as err:
            msg = "Google Cloud response does not contain 'translatedText'"
            raise MalformedResponseError(msg) from err

        detected: str | None = response.get("detectedSourceLanguage", src_lang)
        return Result(
            text=translated_text,
            detected_source_lang=detected.lower() if detected else None,
            metadata={"engine": self.fetch_engine_name()},
        )

    async def close(self) -> None:
        self._client = None
        logger.info("'%s' process termination", self.__class__.__name__)
