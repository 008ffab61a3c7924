"""Provider factory: returns the configured provider instance."""

from __future__ import annotations

import logging

from plantsafe.core.config import Settings, get_settings

from .base import BaseProvider, InlineImage, ProviderConfigError, ProviderResult, UnavailableProvider
from .mock import MockProvider

logger = logging.getLogger(__name__)

__all__ = [
    "get_provider",
    "BaseProvider",
    "InlineImage",
    "ProviderConfigError",
    "ProviderResult",
    "MockProvider",
    "UnavailableProvider",
]


def get_provider(provider_name: str, settings: Settings | None = None) -> BaseProvider:
    """Return a provider instance for *provider_name*.

    Without ``GEMINI_API_KEY`` the Gemini provider is still returned but
    every ``generate`` call fails with ``ProviderConfigError``, unless
    ``AI_ALLOW_MOCK_FALLBACK`` is enabled, in which case ``MockProvider``
    is returned so the app stays usable in local development.
    """
    settings = settings or get_settings()
    name = provider_name.lower().strip()

    if name == "mock":
        return MockProvider()

    if name == "gemini":
        if not settings.gemini_api_key and settings.ai_allow_mock_fallback:
            logger.warning("GEMINI_API_KEY not set, falling back to mock")
            return MockProvider()
        from .gemini import GeminiProvider

        return GeminiProvider(
            api_key=settings.gemini_api_key,
            base_url=settings.gemini_api_base_url,
        )

    raise ProviderConfigError(f"Unknown AI provider {name!r}")
