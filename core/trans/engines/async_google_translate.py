"""Minimal asynchronous client for the Google Translate web endpoint.

The endpoint answers the `batchexecute` RPC used by the translate.google.* web UI.
The response format is undocumented; any deviation is reported as `ResponseFormatError`.
"""

from __future__ import annotations

import json
import logging
from json import JSONDecodeError
from typing import Any, Final
from urllib.parse import quote

import aiohttp

from core.trans.engines.const_google import DEFAULT_SERVICE_URLS, LANGUAGES
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

__all__: list[str] = [
    "AsyncTranslator",
    "GoogleError",
    "HTTPConnectionError",
    "HTTPError",
    "HTTPTimeoutError",
    "HTTPTooManyRequests",
    "ResponseFormatError",
    "TextResult",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

URL_SUFFIX_DEFAULT: Final[str] = "com"
URL_SUFFIXES: Final[frozenset[str]] = frozenset(url.removeprefix("translate.google.") for url in DEFAULT_SERVICE_URLS)
RPC_ID: Final[str] = "MkEWBc"
MAX_TEXT_LENGTH: Final[int] = 5000


class GoogleError(Exception):
    """Base error of the Google web client."""


class ResponseFormatError(GoogleError):
    """The response did not have the expected batchexecute layout."""


class HTTPError(GoogleError):
    """The endpoint answered with a non-2xx status."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.status: int = status


class HTTPTooManyRequests(HTTPError):
    """HTTP 429 Too Many Requests."""


class HTTPConnectionError(GoogleError):
    pass


class HTTPTimeoutError(GoogleError):
    pass


class TextResult:
    def __init__(self, text: str, detected_source_lang: str | None, *, metadata: dict[str, str] | None = None) -> None:
        self.text: str = text
        self.detected_source_lang: str | None = detected_source_lang
        self.metadata: dict[str, str] | None = metadata

    def __repr__(self) -> str:
        return f"<TextResult text={self.text!r} detected_source_lang={self.detected_source_lang!r}>"


class AsyncTranslator:
    """Translate text through translate.google.<suffix>.

    The aiohttp session is created lazily on first use so that the client can be constructed
    outside a running event loop.
    """

    def __init__(self, url_suffix: str = URL_SUFFIX_DEFAULT, timeout: float = 10.0) -> None:
        self.url_suffix: str = url_suffix if url_suffix in URL_SUFFIXES else URL_SUFFIX_DEFAULT
        self.url: str = f"https://translate.google.{self.url_suffix}/_/TranslateWebserverUi/data/batchexecute"
        self.timeout: float = timeout
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
        logger.debug("'%s': session closed", self.__class__.__name__)

    @staticmethod
    def normalize_langcode(lang: str | None) -> str:
        """Map a language code to the form the endpoint accepts, or 'auto'.

        Full codes listed in LANGUAGES (e.g. 'zh-TW') are kept; others fall back to their
        primary subtag.
        """
        if not lang:
            return "auto"
        for code in LANGUAGES:
            if lang.lower() == code.lower():
                return code
        primary: str = StringUtils.primary_subtag(lang)
        return primary if primary in LANGUAGES else "auto"

    @staticmethod
    def _package_rpc(text: str, lang_src: str, lang_tgt: str) -> str:
        parameter: list[Any] = [[text.strip(), lang_src, lang_tgt, True], [1]]
        rpc: list[Any] = [[[RPC_ID, json.dumps(parameter, separators=(",", ":")), None, "generic"]]]
        return f"f.req={quote(json.dumps(rpc, separators=(',', ':')))}&"

    def _build_headers(self) -> dict[str, str]:
        return {
            "Referer": f"https://translate.google.{self.url_suffix}/",
            "User-Agent": (
                "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
            ),
            "Content-Type": "application/x-www-form-urlencoded;charset=utf-8",
        }

    async def _post(self, data: str) -> str:
        try:
            async with self._get_session().post(
                url=self.url,
                data=data,
                headers=self._build_headers(),
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                body: str = await response.text()
                if response.status == 429:
                    msg = f"HTTP 429 {response.reason} from {self.url}"
                    raise HTTPTooManyRequests(msg, response.status)
                if response.status >= 300:
                    msg = f"HTTP {response.status} {response.reason} from {self.url}"
                    raise HTTPError(msg, response.status)
                return body
        except TimeoutError:
            msg = "Timeout occurred while waiting for Google"
            raise HTTPTimeoutError(msg) from None
        except (aiohttp.ClientConnectionError, ConnectionResetError) as err:
            raise HTTPConnectionError(str(err)) from None

    async def translate(self, text: str, lang_tgt: str, lang_src: str | None = None) -> TextResult:
        if not text.strip():
            msg = "No characters to translate"
            raise GoogleError(msg)
        if len(text) >= MAX_TEXT_LENGTH:
            msg = f"Can only translate less than {MAX_TEXT_LENGTH} characters"
            raise GoogleError(msg)

        src: str = self.normalize_langcode(lang_src)
        tgt: str = self.normalize_langcode(lang_tgt)
        body: str = await self._post(self._package_rpc(text, src, tgt))
        return self._process_response(body)

    def _process_response(self, body: str) -> TextResult:
        for line in body.splitlines():
            if RPC_ID not in line:
                continue
            try:
                decoded: Any = json.loads(json.loads(line)[0][2])
                detected: str | None = decoded[1][3]
                translation_info: Any = decoded[1][0][0]
            except (JSONDecodeError, IndexError, TypeError) as err:
                msg = "invalid response format"
                raise ResponseFormatError(msg) from err

            if not isinstance(translation_info, list) or not translation_info:
                msg = "invalid translation block"
                raise ResponseFormatError(msg)

            if len(translation_info) <= 5 or not translation_info[5]:
                # URLs and similar input come back untranslated without sentence data.
                return TextResult(str(translation_info[0]), "und", metadata={"type": "passthrough"})

            sentences: Any = translation_info[5]

            try:
                text: str = " ".join(sentence[0].strip() for sentence in sentences).strip()
            except (IndexError, TypeError, AttributeError) as err:
                msg = "invalid sentence format"
                raise ResponseFormatError(msg) from err
            return TextResult(text, detected, metadata={"type": "translation"})

        msg = "response does not contain translation data"
        raise ResponseFormatError(msg)
