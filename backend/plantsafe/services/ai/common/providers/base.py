"""Abstract base for all AI providers."""

from __future__ import annotations

import abc
from dataclasses import dataclass


class ProviderConfigError(RuntimeError):
    """Raised when a provider cannot be built from the current settings."""


@dataclass(frozen=True)
class InlineImage:
    """Image bytes sent inline with a prompt."""

    data: bytes
    media_type: str = "image/jpeg"


@dataclass(frozen=True)
class ProviderResult:
    """Immutable result returned by every provider."""

    raw_text: str
    model: str
    provider: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0


class BaseProvider(abc.ABC):
    """Contract that every AI provider must implement."""

    name: str = "base"

    @abc.abstractmethod
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
        """Send *prompt* (and optionally *image*) and return a ``ProviderResult``."""


class UnavailableProvider(BaseProvider):
    """Placeholder for a provider that could not be built; every call fails."""

    name = "unavailable"

    def __init__(self, reason: str) -> None:
        self.reason = reason

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
        raise ProviderConfigError(self.reason)
