from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING, Any, cast

import pytest
from google.api_core.exceptions import BadRequest, Forbidden, InternalServerError, TooManyRequests
from google.auth.exceptions import DefaultCredentialsError

from core.trans.engines import trans_google_cloud as trans_google_cloud_module
from core.trans.interface import (
    MalformedResponseError,
    NotSupportedLanguagesError,
    Result,
    TranslateExceptionError,
    TranslationRateLimitError,
)

if TYPE_CHECKING:
    from models.config_models import Config


class DummyClient:
    response: Any = {"translatedText": "hello", "detectedSourceLanguage": "ES"}
    error: Exception | None = None
    init_error: Exception | None = None

    def __init__(self, **kwargs: Any) -> None:
        if type(self).init_error is not None:
            raise type(self).init_error
        self.kwargs: dict[str, Any] = kwargs
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def translate(self, content: str, **kwargs: Any) -> Any:
        self.calls.append((content, kwargs))
        if type(self).error is not None:
            raise type(self).error
        return type(self).response


class DummyAPIKeySession:
    def __init__(self, api_key: str) -> None:
        self.api_key: str = api_key


async def fake_to_thread(func, *args, **kwargs):
    return func(*args, **kwargs)


@pytest.fixture(autouse=True)
def setup_module(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(trans_google_cloud_module, "translate", SimpleNamespace(Client=DummyClient))
    monkeypatch.setattr(trans_google_cloud_module, "APIKeySession", DummyAPIKeySession)
    monkeypatch.setattr(trans_google_cloud_module.asyncio, "to_thread", fake_to_thread)
    monkeypatch.delenv("GOOGLE_CLOUD_API_OAUTH", raising=False)
    DummyClient.response = {"translatedText": "hello", "detectedSourceLanguage": "ES"}
    DummyClient.error = None
    DummyClient.init_error = None


@pytest.fixture
def config() -> Config:
    return cast("Config", SimpleNamespace(TRANSLATION=SimpleNamespace()))


def test_initialize_uses_api_key_session(monkeypatch: pytest.MonkeyPatch, config: Config) -> None:
    monkeypatch.setenv("GOOGLE_CLOUD_API_OAUTH", "key-123")
    engine = trans_google_cloud_module.GoogleCloudTranslation()

    engine.initialize(config)

    client: DummyClient = cast("DummyClient", engine._client)
    assert engine.is_available is True
    assert client.kwargs["_http"].api_key == "key-123"


def test_initialize_without_credentials_disables_engine(config: Config) -> None:
    DummyClient.init_error = DefaultCredentialsError("no credentials")
    engine = trans_google_cloud_module.GoogleCloudTranslation()

    engine.initialize(config)

    assert engine.is_available is False


@pytest.mark.asyncio
async def test_translation_returns_result(config: Config) -> None:
    engine = trans_google_cloud_module.GoogleCloudTranslation()
    engine.initialize(config)

    result: Result = await engine.translation("hola", tgt_lang="en", src_lang="es")

    assert result.text == "hello"
    assert result.detected_source_lang == "es"
    assert result.metadata == {"engine": "google_cloud"}
    content, kwargs = cast("DummyClient", engine._client).calls[0]
    assert content == "hola"
    assert kwargs == {"target_language": "en", "source_language": "es", "format_": "text"}


@pytest.mark.asyncio
async def test_translation_rejects_response_without_text(config: Config) -> None:
    DummyClient.response = {"detectedSourceLanguage": "es"}
    engine = trans_google_cloud_module.GoogleCloudTranslation()
    engine.initialize(config)

    with pytest.raises(MalformedResponseError):
        await engine.translation("hola", tgt_lang="en", src_lang="es")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (BadRequest("bad language"), NotSupportedLanguagesError),
        (TooManyRequests("slow down"), TranslationRateLimitError),
        (Forbidden("daily limit", errors=[{"reason": "dailyLimitExceeded"}]), TranslationRateLimitError),
        (Forbidden("user limit", errors=[{"reason": "userRateLimitExceeded"}]), TranslationRateLimitError),
        (InternalServerError("boom"), TranslateExceptionError),
    ],
)
async def test_translation_maps_api_errors(config: Config, error: Exception, expected: type[Exception]) -> None:
    DummyClient.error = error
    engine = trans_google_cloud_module.GoogleCloudTranslation()
    engine.initialize(config)

    with pytest.raises(expected):
        await engine.translation("hola", tgt_lang="en", src_lang="es")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        Forbidden("API not enabled", errors=[{"reason": "accessNotConfigured"}]),
        Forbidden("key rejected"),
    ],
)
async def test_forbidden_without_limit_reason_is_not_rate_limited(config: Config, error: Forbidden) -> None:
    DummyClient.error = error
    engine = trans_google_cloud_module.GoogleCloudTranslation()
    engine.initialize(config)

    with pytest.raises(TranslateExceptionError) as exc_info:
        await engine.translation("hola", tgt_lang="en", src_lang="es")

    assert not isinstance(exc_info.value, TranslationRateLimitError)
    assert engine.is_rate_limit_error(exc_info.value) is False


@pytest.mark.asyncio
async def test_close_releases_client(config: Config) -> None:
    engine = trans_google_cloud_module.GoogleCloudTranslation()
    engine.initialize(config)

    await engine.close()

    assert engine.is_available is False
