"""Mock provider: deterministic responses for tests and local development."""

from __future__ import annotations

import json
import time

from .base import BaseProvider, InlineImage, ProviderResult

DEFAULT_MOCK_REPORT = {
    "plantName": "Common Dandelion (Taraxacum officinale)",
    "isDangerous": False,
    "dangerLevel": "Safe",
    "toxicParts": [],
    "symptoms": [],
    "safetyTips": ["Wash leaves before eating", "Avoid plants from sprayed lawns"],
    "generalInfo": "A perennial herb with yellow composite flowers and toothed leaves.",
    "habitat": "Lawns, meadows and roadsides in temperate regions",
    "uses": "Edible leaves and flowers, herbal tea",
    "confidence": "mock",
}


class MockProvider(BaseProvider):
    name = "mock"

    def __init__(self, text: str | None = None) -> None:
        self._text = text if text is not None else json.dumps(DEFAULT_MOCK_REPORT)
        self.calls: list[tuple[str, InlineImage | None]] = []

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
        t0 = time.monotonic()
        self.calls.append((prompt, image))
        text = self._text
        elapsed = (time.monotonic() - t0) * 1000
        return ProviderResult(
            raw_text=text,
            model=model or "mock-v1",
            provider=self.name,
            prompt_tokens=len(prompt.split()),
            completion_tokens=len(text.split()),
            latency_ms=round(elapsed, 2),
        )
