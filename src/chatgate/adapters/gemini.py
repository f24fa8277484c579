# src/chatgate/adapters/gemini.py
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from chatgate.core.errors import ProviderError

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def _normalize_model(model: str) -> str:
    # Accept both "gemini-pro" and "models/gemini-pro"
    if model.startswith("models/"):
        return model.split("/", 1)[1]
    return model


def _error_message(resp: httpx.Response) -> str:
    """Pull Gemini's {"error": {"message": ...}} out of a failed response."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:400]
    err = data.get("error") if isinstance(data, dict) else None
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    return resp.text[:400]


async def _post(
    url: str,
    payload: dict,
    api_key: str,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    headers = {"Content-Type": "application/json", "x-goog-api-key": api_key}
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        return await client.post(url, json=payload, headers=headers)


class GeminiResponse:
    """Raw generateContent JSON plus the model that produced it."""

    def __init__(self, model: str, data: Dict[str, Any]) -> None:
        self.model = model
        self.data = data

    def text(self) -> str:
        """
        Join the text parts of the first candidate.

        Raises ProviderError when the prompt was blocked or the candidate
        carries no text at all.
        """
        candidates = self.data.get("candidates") or []
        if not candidates:
            feedback = self.data.get("promptFeedback") or {}
            reason = feedback.get("blockReason")
            if reason:
                raise ProviderError(f"Response was blocked due to {reason}", model=self.model)
            raise ProviderError("Response contained no candidates", model=self.model)

        parts = (candidates[0].get("content") or {}).get("parts") or []
        texts = [p["text"] for p in parts if isinstance(p, dict) and "text" in p]
        if not texts:
            finish = candidates[0].get("finishReason", "UNKNOWN")
            raise ProviderError(
                f"Response contained no text (finishReason={finish})", model=self.model
            )
        return "".join(texts)


class GeminiClient:
    """
    Minimal async client for Gemini's REST generateContent call.

    One HTTP request per call, no retries. Every call carries a deadline
    (`timeout_s`); a timeout surfaces as ProviderError like any other
    provider failure.
    """

    def __init__(
        self,
        base_url: str = GEMINI_BASE_URL,
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.transport = transport

    def _url(self, model: str) -> str:
        return f"{self.base_url}/models/{_normalize_model(model)}:generateContent"

    async def generate_content(
        self,
        api_key: str,
        model: str,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> GeminiResponse:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}]
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if generation_config:
            payload["generationConfig"] = generation_config

        t0 = time.time()
        try:
            resp = await _post(self._url(model), payload, api_key, self.timeout_s, self.transport)
        except httpx.TimeoutException as ex:
            raise ProviderError(
                f"Request to {model} timed out after {self.timeout_s:g}s", model=model
            ) from ex
        except httpx.HTTPError as ex:
            raise ProviderError(f"Request to {model} failed: {ex}", model=model) from ex

        dur = int((time.time() - t0) * 1000)
        logger.debug("gemini: model=%s status=%s latency_ms=%s", model, resp.status_code, dur)

        if resp.status_code >= 300:
            raise ProviderError(
                f"[{resp.status_code} {resp.reason_phrase}] {_error_message(resp)}",
                model=model,
                status=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as ex:
            raise ProviderError(f"Unparseable response from {model}: {resp.text[:400]}", model=model) from ex

        return GeminiResponse(model, data)
