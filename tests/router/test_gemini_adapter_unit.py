import asyncio
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from chatgate.adapters.gemini import GeminiClient, GeminiResponse
from chatgate.core.errors import ProviderError


def _resp(status: int, body) -> httpx.Response:
    return httpx.Response(status, json=body)


def test_gemini_adapter_builds_payload_and_parses_parts():
    fake_response = {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": "Hello "}, {"text": "from mock Gemini."}]}}
        ]
    }
    post = AsyncMock(return_value=_resp(200, fake_response))

    client = GeminiClient(base_url="https://fake/v1beta", timeout_s=7)
    with patch("chatgate.adapters.gemini._post", post):
        resp = asyncio.run(
            client.generate_content(
                "k-123",
                "models/gemini-pro",
                "hi",
                system_instruction="Be brief.",
                generation_config={"temperature": 0.2, "maxOutputTokens": 200, "topP": 0.8, "topK": 40},
            )
        )

    assert resp.text() == "Hello from mock Gemini."
    assert resp.model == "models/gemini-pro"

    url, payload, api_key, timeout, _transport = post.await_args.args
    assert url == "https://fake/v1beta/models/gemini-pro:generateContent"
    assert api_key == "k-123"
    assert timeout == 7
    assert payload == {
        "contents": [{"role": "user", "parts": [{"text": "hi"}]}],
        "systemInstruction": {"parts": [{"text": "Be brief."}]},
        "generationConfig": {"temperature": 0.2, "maxOutputTokens": 200, "topP": 0.8, "topK": 40},
    }


def test_probe_style_call_sends_bare_prompt():
    post = AsyncMock(return_value=_resp(200, {"candidates": []}))
    with patch("chatgate.adapters.gemini._post", post):
        asyncio.run(GeminiClient().generate_content("k", "gemini-pro", "Test"))

    payload = post.await_args.args[1]
    assert payload == {"contents": [{"role": "user", "parts": [{"text": "Test"}]}]}


def test_http_error_carries_provider_message():
    body = {"error": {"code": 400, "message": "API key not valid. Please pass a valid API key.", "status": "INVALID_ARGUMENT"}}
    with patch("chatgate.adapters.gemini._post", AsyncMock(return_value=_resp(400, body))):
        with pytest.raises(ProviderError) as ei:
            asyncio.run(GeminiClient().generate_content("bad", "gemini-pro", "Test"))

    assert ei.value.status == 400
    assert ei.value.model == "gemini-pro"
    assert "API key not valid" in ei.value.message
    assert ei.value.status_code == 500


def test_timeout_becomes_provider_error():
    post = AsyncMock(side_effect=httpx.ReadTimeout("read timed out"))
    with patch("chatgate.adapters.gemini._post", post):
        with pytest.raises(ProviderError) as ei:
            asyncio.run(GeminiClient(timeout_s=2.5).generate_content("k", "gemini-pro", "hi"))
    assert "timed out after 2.5s" in ei.value.message


def test_transport_error_becomes_provider_error():
    post = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
    with patch("chatgate.adapters.gemini._post", post):
        with pytest.raises(ProviderError) as ei:
            asyncio.run(GeminiClient().generate_content("k", "gemini-pro", "hi"))
    assert "connection refused" in ei.value.message


def test_non_json_body_becomes_provider_error():
    with patch("chatgate.adapters.gemini._post", AsyncMock(return_value=httpx.Response(200, text="<html>"))):
        with pytest.raises(ProviderError):
            asyncio.run(GeminiClient().generate_content("k", "gemini-pro", "hi"))


def test_blocked_prompt_has_no_text():
    resp = GeminiResponse("gemini-pro", {"promptFeedback": {"blockReason": "SAFETY"}})
    with pytest.raises(ProviderError) as ei:
        resp.text()
    assert "SAFETY" in ei.value.message


def test_candidate_without_parts_has_no_text():
    resp = GeminiResponse("gemini-pro", {"candidates": [{"finishReason": "MAX_TOKENS", "content": {}}]})
    with pytest.raises(ProviderError) as ei:
        resp.text()
    assert "MAX_TOKENS" in ei.value.message


def test_real_post_uses_api_key_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})

    client = GeminiClient(base_url="https://fake/v1beta", transport=httpx.MockTransport(handler))
    resp = asyncio.run(client.generate_content("secret", "gemini-1.5-flash", "hi"))

    assert resp.text() == "ok"
    assert seen["url"] == "https://fake/v1beta/models/gemini-1.5-flash:generateContent"
    assert seen["key"] == "secret"
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "hi"
