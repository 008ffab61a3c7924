import logging

from plantsafe.core.config import get_settings
from plantsafe.services.ai.common.providers import ProviderConfigError, UnavailableProvider
from plantsafe.services.ai.identification.service import IdentificationConfig, IdentificationService

logger = logging.getLogger(__name__)


def get_identification_service() -> IdentificationService:
    # Settings are cached; the service itself holds no per-request state.
    settings = get_settings()
    try:
        return IdentificationService.from_settings(settings)
    except ProviderConfigError as exc:
        # Fail on the model call so request validation still answers first.
        logger.error("AI provider unavailable: %s", exc)
        return IdentificationService(
            UnavailableProvider(str(exc)),
            IdentificationConfig.from_settings(settings),
        )
