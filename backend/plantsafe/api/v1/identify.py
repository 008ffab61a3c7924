"""Plant identification endpoint: image in, PlantReport out."""

from __future__ import annotations

import logging
from time import perf_counter

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from plantsafe.core.config import get_settings
from plantsafe.core.dependencies import get_identification_service
from plantsafe.core.image_payload import (
    EmptyImagePayload,
    ImageTooLarge,
    InvalidImagePayload,
    decode_image_data,
)
from plantsafe.schemas.identify import (
    ERROR_IDENTIFICATION_FAILED,
    ERROR_IMAGE_TOO_LARGE,
    ERROR_INVALID_IMAGE_DATA,
    ERROR_NO_IMAGE_DATA,
    ErrorResponse,
    IdentifyPlantRequest,
)
from plantsafe.services.ai.identification.contracts import PlantReport
from plantsafe.services.ai.identification.service import IdentificationService

logger = logging.getLogger(__name__)

router = APIRouter()

IDENTIFY_PATH = "/identify-plant"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    IDENTIFY_PATH,
    response_model=PlantReport,
    summary="Identify a plant and report its safety",
    responses={
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        411: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def identify_plant(
    body: IdentifyPlantRequest | None = None,
    service: IdentificationService = Depends(get_identification_service),
):
    started_at = perf_counter()
    image_data = body.image_data if body is not None else None
    if not image_data or not image_data.strip():
        return _error(status.HTTP_400_BAD_REQUEST, ERROR_NO_IMAGE_DATA)

    settings = get_settings()
    try:
        submission = decode_image_data(image_data, max_bytes=settings.max_image_bytes)
    except EmptyImagePayload:
        return _error(status.HTTP_400_BAD_REQUEST, ERROR_NO_IMAGE_DATA)
    except ImageTooLarge as exc:
        logger.info("Identify request rejected: %s", exc)
        return _error(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, ERROR_IMAGE_TOO_LARGE)
    except InvalidImagePayload as exc:
        logger.info("Identify request rejected: %s", exc)
        return _error(status.HTTP_400_BAD_REQUEST, ERROR_INVALID_IMAGE_DATA)

    logger.info(
        "Identify request accepted media_type=%s image_bytes=%s",
        submission.media_type,
        submission.size,
    )

    try:
        report = await service.identify(submission.data, submission.media_type)
    except Exception:
        logger.exception("Error identifying plant")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, ERROR_IDENTIFICATION_FAILED)

    logger.info(
        "Identify request finished plant=%r danger_level=%s total_ms=%s",
        report.plant_name,
        report.danger_level,
        round((perf_counter() - started_at) * 1000, 1),
    )
    return report
