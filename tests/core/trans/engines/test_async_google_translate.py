"""Unit tests for async_google_translate module."""

from __future__ import annotations

import json
from typing import Any

import pytest

from core.trans.engines import async_google_translate as agt


class DummyResponse:
    def __init__(self, status: int, body: str, reason: str = "OK") -> None:
        self.status: int = status
        self.reason: str = reason
        self._body: str = body

    async def text(self) -> str:
        return self._body

    async def __aenter__(self) -> DummyResponse:
        return self

    async def __aexit__(self, *args: object) -> None:
        _ = args


class DummySession:
    response: DummyResponse = DummyResponse(200, "")

    def __init__(self, *args, **kwargs) -> None:
        _ = args, kwargs
        self.closed = False
        self.posted: list[dict[str, Any]] = []

    def post(self, **kwargs: Any) -> DummyResponse:
        self.posted.append(kwargs)
        return type(self).response

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def patch_session(monkeypatch: pytest.MonkeyPatch) -> None:
    DummySession.response = DummyResponse(200, "")
    monkeypatch.setattr(agt.aiohttp, "ClientSession", DummySession)


def _make_response(decoded_data: list[Any]) -> str:
    line: str = json.dumps([["wrb.fr", "MkEWBc", json.dumps(decoded_data)]])
    return f")]}}'\n\n123\n{line}"


def _translation_payload(sentences: list[list[Any]], detected: str = "es") -> list[Any]:
    return [
        ["src", None],
        [[[None, None, None, None, None, sentences]], None, None, detected],
    ]


def test_normalize_langcode_keeps_known_full_code() -> None:
    assert agt.AsyncTranslator.normalize_langcode("ZH-tw") == "zh-TW"


def test_normalize_langcode_falls_back_to_primary_subtag() -> None:
    assert agt.AsyncTranslator.normalize_langcode("en-GB") == "en"


def test_normalize_langcode_unknown_or_empty_is_auto() -> None:
    assert agt.AsyncTranslator.normalize_langcode("zz") == "auto"
    assert agt.AsyncTranslator.normalize_langcode(None) == "auto"


def test_unknown_url_suffix_falls_back_to_default() -> None:
    translator = agt.AsyncTranslator(url_suffix="invalid")

    assert translator.url_suffix == "com"
    assert translator.url.startswith("https://translate.google.com/")


def test_process_response_joins_sentences() -> None:
    translator = agt.AsyncTranslator()
    decoded = _translation_payload([["Hello ", None], ["friends", None]])

    result: agt.TextResult = translator._process_response(_make_response(decoded))

    assert result.text == "Hello friends"
    assert result.detected_source_lang == "es"
    assert result.metadata == {"type": "translation"}


def test_process_response_without_sentences_is_passthrough() -> None:
    translator = agt.AsyncTranslator()
    decoded = [["src", None], [[["example.com"]], None, None, "en"]]

    result: agt.TextResult = translator._process_response(_make_response(decoded))

    assert result.text == "example.com"
    assert result.detected_source_lang == "und"


def test_process_response_raises_on_missing_marker() -> None:
    translator = agt.AsyncTranslator()

    with pytest.raises(agt.ResponseFormatError):
        translator._process_response("no marker here")


def test_process_response_raises_on_broken_payload() -> None:
    translator = agt.AsyncTranslator()
    line: str = json.dumps([["wrb.fr", "MkEWBc", "not json"]])

    with pytest.raises(agt.ResponseFormatError):
        translator._process_response(line)


@pytest.mark.asyncio
async def test_translate_rejects_empty_and_too_long_text() -> None:
    translator = agt.AsyncTranslator()

    with pytest.raises(agt.GoogleError):
        await translator.translate("   ", "en")
    with pytest.raises(agt.GoogleError):
        await translator.translate("a" * agt.MAX_TEXT_LENGTH, "en")


@pytest.mark.asyncio
async def test_translate_posts_rpc_and_parses_body() -> None:
    DummySession.response = DummyResponse(200, _make_response(_translation_payload([["Hello", None]])))
    translator = agt.AsyncTranslator()

    result: agt.TextResult = await translator.translate("hola", "en", "es")

    assert result.text == "Hello"
    session: DummySession = translator._get_session()  # type: ignore[assignment]
    assert session.posted[0]["data"].startswith("f.req=")


@pytest.mark.asyncio
async def test_translate_maps_http_429_to_too_many_requests() -> None:
    DummySession.response = DummyResponse(429, "", reason="Too Many Requests")
    translator = agt.AsyncTranslator()

    with pytest.raises(agt.HTTPTooManyRequests) as excinfo:
        await translator.translate("hola", "en", "es")

    assert excinfo.value.status == 429


@pytest.mark.asyncio
async def test_translate_maps_other_status_to_http_error() -> None:
    DummySession.response = DummyResponse(503, "", reason="Service Unavailable")
    translator = agt.AsyncTranslator()

    with pytest.raises(agt.HTTPError) as excinfo:
        await translator.translate("hola", "en", "es")

    assert not isinstance(excinfo.value, agt.HTTPTooManyRequests)
    assert excinfo.value.status == 503


@pytest.mark.asyncio
async def test_close_closes_session() -> None:
    translator = agt.AsyncTranslator()
    session: DummySession = translator._get_session()  # type: ignore[assignment]

    await translator.close()

    assert session.closed is True
    assert translator._session is None
