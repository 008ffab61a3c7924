"""Plant identification service: prompt, model call, JSON extraction, fallback."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from pydantic import ValidationError

from plantsafe.core.config import Settings

from ..common.audit import log_ai_run
from ..common.json_tools import extract_json_object
from ..common.providers import get_provider
from ..common.providers.base import BaseProvider, InlineImage
from .contracts import DANGER_LEVELS, REPORT_KEYS, PlantReport, fallback_report

logger = logging.getLogger(__name__)

PLANT_IDENTIFICATION_PROMPT = f"""Analyze this plant image and provide detailed information in the following JSON format:
{{
  "plantName": "Common and scientific name",
  "isDangerous": true/false,
  "dangerLevel": "{'/'.join(DANGER_LEVELS[:-1])}",
  "toxicParts": ["list of toxic parts if any"],
  "symptoms": ["symptoms if ingested/touched"],
  "safetyTips": ["safety recommendations"],
  "generalInfo": "Brief description of the plant",
  "habitat": "Where this plant typically grows",
  "uses": "Common uses if any",
  "confidence": "percentage of identification confidence"
}}

Focus particularly on safety information. If the plant is dangerous, provide detailed warnings. \
If you cannot identify the plant with reasonable confidence, indicate this clearly."""


@dataclass(frozen=True)
class IdentificationConfig:
    """Explicit per-process configuration for ``IdentificationService``."""

    model: str = ""
    temperature: float = 0.4
    max_tokens: int = 2048
    timeout_seconds: float = 30.0
    debug_store_raw: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> IdentificationConfig:
        return cls(
            model=settings.gemini_model if settings.ai_provider == "gemini" else "",
            temperature=settings.ai_temperature,
            max_tokens=settings.ai_max_tokens,
            timeout_seconds=settings.ai_timeout_seconds,
            debug_store_raw=settings.ai_debug_store_raw,
        )


def extract_report(raw_text: str) -> PlantReport:
    """Turn free model text into a ``PlantReport``; never raises.

    The first top-level JSON object carrying at least one report key wins.
    Anything unusable yields the fallback report with *raw_text* as
    ``generalInfo``.
    """
    report = _parse_report(raw_text)
    if report is None:
        return fallback_report(raw_text or "")
    return report


def _parse_report(raw_text: str) -> PlantReport | None:
    parsed = extract_json_object(raw_text, required_keys=REPORT_KEYS)
    if parsed is None:
        logger.info("No report JSON found in model reply (%d chars)", len(raw_text or ""))
        return None

    try:
        return PlantReport.model_validate(parsed)
    except ValidationError as exc:
        logger.warning("Report JSON failed validation (%d errors)", exc.error_count())
        return None


class IdentificationService:
    """Identify a plant from image bytes via an external multimodal model.

    Transport failures (HTTP errors, deadline overruns) propagate to the
    caller; malformed replies resolve to the fallback report.
    """

    scope = "plant_identification"

    def __init__(self, provider: BaseProvider, config: IdentificationConfig | None = None) -> None:
        self.provider = provider
        self.config = config or IdentificationConfig()

    @classmethod
    def from_settings(cls, settings: Settings) -> IdentificationService:
        return cls(
            provider=get_provider(settings.ai_provider, settings),
            config=IdentificationConfig.from_settings(settings),
        )

    async def identify(self, image_bytes: bytes, media_type: str = "image/jpeg") -> PlantReport:
        config = self.config
        t0 = time.monotonic()

        result = await asyncio.wait_for(
            self.provider.generate(
                PLANT_IDENTIFICATION_PROMPT,
                image=InlineImage(data=image_bytes, media_type=media_type or "image/jpeg"),
                model=config.model,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout_seconds=config.timeout_seconds,
            ),
            timeout=config.timeout_seconds,
        )

        report = _parse_report(result.raw_text)
        used_fallback = report is None
        if report is None:
            logger.warning("Model reply could not be parsed, returning fallback report")
            report = fallback_report(result.raw_text)

        log_ai_run(
            scope=self.scope,
            provider_result=result,
            prompt_text=PLANT_IDENTIFICATION_PROMPT,
            parsed_output=None if used_fallback else report.model_dump(by_alias=True),
            store_raw=config.debug_store_raw,
            extra_meta={
                "media_type": media_type,
                "image_bytes": len(image_bytes),
                "fallback": used_fallback,
                "total_latency_ms": round((time.monotonic() - t0) * 1000, 2),
            },
        )
        return report
