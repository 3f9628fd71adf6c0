"""Abstract base class for translation providers and the provider error taxonomy.

Every concrete engine subclasses `TransInterface` and is registered automatically under
the name returned by `fetch_engine_name()`. The cascade only relies on `translation()`
and the exception classes defined here.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from models.translation_models import CharacterQuota
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = [
    "EngineAttributes",
    "MalformedResponseError",
    "NotSupportedLanguagesError",
    "Result",
    "TransInterface",
    "TranslateExceptionError",
    "TranslationQuotaExceededError",
    "TranslationRateLimitError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class EngineAttributes:
    """Engine-specific capabilities and behavior flags.

    Attributes:
        name (str): Display name of the engine. Not used for identification.
        supports_quota_api (bool): Whether the engine provides an API to check character quota.
    """

    name: str
    supports_quota_api: bool = False


@dataclass
class Result:
    """Raw provider response.

    Attributes:
        text (str | None): Translated text. None if the provider returned nothing.
        detected_source_lang (str | None): Source language reported by the provider, if any.
        metadata (dict[str, str] | None): Engine-specific metadata.
    """

    text: str | None = None
    detected_source_lang: str | None = None
    metadata: dict[str, str] | None = None

    def __str__(self) -> str:
        if self.text is None:
            return ""
        return self.text


class TranslateExceptionError(Exception):
    """An error occurred during the translation process."""


class NotSupportedLanguagesError(TranslateExceptionError):
    """An unsupported language code was specified."""


class MalformedResponseError(TranslateExceptionError):
    """The provider answered with a payload that could not be interpreted."""


class TranslationQuotaExceededError(TranslateExceptionError):
    """The translatable character quota has been exceeded."""


class TranslationRateLimitError(TranslateExceptionError):
    """The translation request was rate-limited by the API."""


class TransInterface(ABC):
    """Abstract base class for translation providers.

    Attributes:
        registered (ClassVar[dict[str, type[TransInterface]]]): Registered engine classes keyed by
            their distinguished names.
    """

    registered: ClassVar[dict[str, type[TransInterface]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass under its distinguished name.

        Subclasses returning an empty name are not registered (test doubles, abstract helpers).

        Raises:
            TypeError: If `fetch_engine_name` is missing.
            ValueError: If another engine already uses the same name.
        """
        super().__init_subclass__(**kwargs)
        if not hasattr(cls, "fetch_engine_name") or not callable(cls.fetch_engine_name):
            msg = "Subclasses of TransInterface must implement the static method fetch_engine_name()."
            raise TypeError(msg)

        name = cls.fetch_engine_name()
        if not isinstance(name, str) or name == "":
            return

        if name in cls.registered:
            msg: str = f"A translation engine with the name '{name}' is already registered."
            raise ValueError(msg)

        cls.registered[name] = cls

    def __init__(self) -> None:
        self._engine_attributes: EngineAttributes | None = None

    @property
    def engine_attributes(self) -> EngineAttributes:
        if self._engine_attributes is None:
            msg = "Engine attributes have not been set."
            raise RuntimeError(msg)
        return self._engine_attributes

    @engine_attributes.setter
    def engine_attributes(self, attributes: EngineAttributes) -> None:
        if self._engine_attributes is not None:
            msg = "Engine attributes can only be set once during initialization."
            raise RuntimeError(msg)
        self._engine_attributes = attributes

    @property
    def engine_name(self) -> str:
        return self.engine_attributes.name

    @property
    def has_quota_api(self) -> bool:
        return self.engine_attributes.supports_quota_api

    def is_rate_limit_error(self, err: BaseException) -> bool:
        """Check whether an exception belongs to the rate-limit failure class.

        Quota exhaustion is grouped with rate limiting because both clear on a long timescale.

        Args:
            err (BaseException): Exception raised during translation.

        Returns:
            bool: True if the long cooldown applies.
        """
        return isinstance(err, (TranslationRateLimitError, TranslationQuotaExceededError))

    @property
    def limit_reached(self) -> bool:
        """Whether the provider reported its character quota as exhausted."""
        return False

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the engine was initialized successfully and can accept requests."""
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Fetch the distinguished name of the translation engine.

        Called during class registration in __init_subclass__, so the implementation must be
        available at subclass definition time.
        """
        raise NotImplementedError

    @abstractmethod
    def initialize(self, config: Config) -> None:
        """Initialize the engine with the given configuration.

        Engines that cannot start (missing credentials, missing library) log the reason and
        report `is_available == False` instead of raising.
        """
        raise NotImplementedError

    @abstractmethod
    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        """Translate input text to the target language.

        Args:
            content (str): Text to be translated.
            tgt_lang (str): Target language code.
            src_lang (str | None): Source language code. If None, auto-detect.

        Returns:
            Result: Translation result with translated text.

        Raises:
            NotSupportedLanguagesError: If the specified language is not supported.
            MalformedResponseError: If the response could not be interpreted.
            TranslationQuotaExceededError: If the character quota has been exceeded.
            TranslationRateLimitError: If the request is rate-limited by the API.
            TranslateExceptionError: If translation fails for any other reason.
        """
        raise NotImplementedError

    async def get_quota_status(self) -> CharacterQuota:
        """Retrieve the current character quota status.

        Engines without a quota API return an invalid quota.
        """
        return CharacterQuota(is_quota_valid=False)

    @abstractmethod
    async def close(self) -> None:
        """Release network sessions and other resources held by the engine."""
        raise NotImplementedError

    def get_authentication_key(self) -> str:
        """Retrieve the authentication key from environment variables.

        The variable is named after the engine's distinguished name with the suffix
        "_API_OAUTH", e.g. "DEEPL_API_OAUTH".

        Returns:
            str: The authentication key, or an empty string if the variable is not set.
        """
        return os.getenv(f"{self.fetch_engine_name().upper()}_API_OAUTH", "")
