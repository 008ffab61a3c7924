"""Plant identification request/response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ERROR_METHOD_NOT_ALLOWED = "Method not allowed"
ERROR_NO_IMAGE_DATA = "No image data provided"
ERROR_INVALID_IMAGE_DATA = "Invalid image data"
ERROR_IMAGE_TOO_LARGE = "Image too large"
ERROR_LENGTH_REQUIRED = "Length required"
ERROR_IDENTIFICATION_FAILED = "Failed to identify plant"
ERROR_INTERNAL = "Internal server error"


class IdentifyPlantRequest(BaseModel):
    model_config = ConfigDict(validate_by_name=True, populate_by_name=True)

    image_data: Optional[str] = Field(
        default=None,
        alias="imageData",
        description="Base64 image, optionally prefixed with data:image/<subtype>;base64,",
    )


class ErrorResponse(BaseModel):
    error: str
