"""AI run log: one structured log record per model call."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from plantsafe.core.config import get_settings

from .providers.base import ProviderResult

logger = logging.getLogger(__name__)


def build_run_metadata(
    *,
    scope: str,
    provider_result: ProviderResult,
    prompt_text: str,
    parsed_output: dict[str, Any] | None,
    extra_meta: dict[str, Any] | None = None,
    store_raw: bool | None = None,
) -> dict[str, Any]:
    """Collect the metadata logged for an AI run.

    PII: prompt and response are always hashed; raw text is only included
    when *store_raw* is set (defaults to ``AI_DEBUG_STORE_RAW``).
    """
    if store_raw is None:
        store_raw = get_settings().ai_debug_store_raw

    metadata: dict[str, Any] = {
        "scope": scope,
        "provider": provider_result.provider,
        "model": provider_result.model,
        "prompt_tokens": provider_result.prompt_tokens,
        "completion_tokens": provider_result.completion_tokens,
        "latency_ms": provider_result.latency_ms,
        "prompt_hash": hashlib.sha256(prompt_text.encode()).hexdigest(),
        "response_hash": hashlib.sha256(provider_result.raw_text.encode()).hexdigest(),
        "parsed": parsed_output is not None,
    }

    if store_raw:
        metadata["prompt_raw"] = prompt_text
        metadata["response_raw"] = provider_result.raw_text

    if extra_meta:
        metadata.update(extra_meta)

    return metadata


def log_ai_run(
    *,
    scope: str,
    provider_result: ProviderResult,
    prompt_text: str,
    parsed_output: dict[str, Any] | None,
    extra_meta: dict[str, Any] | None = None,
    store_raw: bool | None = None,
) -> dict[str, Any]:
    metadata = build_run_metadata(
        scope=scope,
        provider_result=provider_result,
        prompt_text=prompt_text,
        parsed_output=parsed_output,
        extra_meta=extra_meta,
        store_raw=store_raw,
    )
    logger.info("AI_RUN %s", metadata, extra={"ai_run": metadata})
    return metadata
