"""Google Gemini provider (``generateContent`` REST API)."""

from __future__ import annotations

import base64
import logging
import time

import httpx

from .base import BaseProvider, InlineImage, ProviderConfigError, ProviderResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-1.5-flash"


class GeminiProvider(BaseProvider):
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    async def generate(
        self,
        prompt: str,
        *,
        image: InlineImage | None = None,
        model: str = "",
        temperature: float = 0.4,
        max_tokens: int = 2048,
        timeout_seconds: float = 30.0,
    ) -> ProviderResult:
        if not self._api_key:
            raise ProviderConfigError("GEMINI_API_KEY is not configured")

        model = model or DEFAULT_MODEL
        t0 = time.monotonic()

        parts: list[dict] = [{"text": prompt}]
        if image is not None:
            parts.append(
                {
                    "inline_data": {
                        "mime_type": image.media_type or "image/jpeg",
                        "data": base64.b64encode(image.data).decode("ascii"),
                    }
                }
            )

        async with httpx.AsyncClient(timeout=timeout_seconds, transport=self._transport) as client:
            resp = await client.post(
                f"{self._base_url}/models/{model}:generateContent",
                headers={
                    "x-goog-api-key": self._api_key,
                    "Content-Type": "application/json",
                },
                json={
                    "contents": [{"role": "user", "parts": parts}],
                    "generationConfig": {
                        "temperature": temperature,
                        "maxOutputTokens": max_tokens,
                    },
                },
            )
            resp.raise_for_status()
            data = resp.json()

        elapsed = (time.monotonic() - t0) * 1000
        text = _response_text(data)
        if not text:
            logger.warning(
                "Gemini returned no text (finish_reason=%s, block_reason=%s)",
                _finish_reason(data),
                (data.get("promptFeedback") or {}).get("blockReason"),
            )
        usage = data.get("usageMetadata", {})

        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            prompt_tokens=usage.get("promptTokenCount", 0),
            completion_tokens=usage.get("candidatesTokenCount", 0),
            latency_ms=round(elapsed, 2),
        )


def _response_text(data: dict) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    content = candidates[0].get("content") or {}
    return "".join(part.get("text", "") for part in content.get("parts") or [])


def _finish_reason(data: dict) -> str | None:
    candidates = data.get("candidates") or []
    if not candidates:
        return None
    return candidates[0].get("finishReason")
