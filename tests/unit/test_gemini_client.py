"""
Unit tests for the Gemini client.
"""

import json

import httpx
import pytest

from pm_autopilot.core.config import GeminiSettings
from pm_autopilot.core.exceptions import ConfigurationError, GeminiError
from pm_autopilot.llm.gemini_client import GeminiClient


def make_client(handler, api_key: str = "test-key") -> GeminiClient:
    config = GeminiSettings(api_key=api_key, model="gemini-test", base_url="https://gemini.test/v1beta")
    return GeminiClient(config=config, transport=httpx.MockTransport(handler))


def candidate(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.mark.asyncio
async def test_generate_sends_single_turn_request() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=candidate("Hello back"))

    client = make_client(handler)
    text = await client.generate("Hello", max_output_tokens=2048)
    await client.close()

    assert text == "Hello back"
    assert len(captured) == 1

    request = captured[0]
    assert request.url.path == "/v1beta/models/gemini-test:generateContent"
    assert request.headers["X-goog-api-key"] == "test-key"

    body = json.loads(request.content)
    assert body["contents"] == [{"role": "user", "parts": [{"text": "Hello"}]}]
    assert body["generationConfig"] == {
        "temperature": 0.7,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 2048,
    }


@pytest.mark.asyncio
async def test_http_error_is_not_retried() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(500, text="boom")

    client = make_client(handler)
    with pytest.raises(GeminiError) as exc_info:
        await client.generate("Hello", max_output_tokens=100)

    assert calls == 1
    assert exc_info.value.status_code == 502
    assert exc_info.value.details["status_code"] == 500


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{}, {"candidates": []}, {"candidates": [{"content": {"parts": []}}]}, candidate("")],
)
async def test_missing_text_is_error(payload: dict) -> None:
    client = make_client(lambda request: httpx.Response(200, json=payload))
    with pytest.raises(GeminiError):
        await client.generate("Hello", max_output_tokens=100)


@pytest.mark.asyncio
async def test_invalid_json_is_error() -> None:
    client = make_client(lambda request: httpx.Response(200, text="not json"))
    with pytest.raises(GeminiError):
        await client.generate("Hello", max_output_tokens=100)


@pytest.mark.asyncio
async def test_network_error_is_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_client(handler)
    with pytest.raises(GeminiError):
        await client.generate("Hello", max_output_tokens=100)


@pytest.mark.asyncio
async def test_missing_api_key() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = make_client(handler, api_key="")
    with pytest.raises(ConfigurationError):
        await client.generate("Hello", max_output_tokens=100)
