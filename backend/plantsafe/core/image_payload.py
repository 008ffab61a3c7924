"""Inbound image payload decoding.

Clients send the photo as a base64 string, optionally wrapped in a data URI
(``data:image/png;base64,...``).  The prefix is stripped and its media type
kept; bare base64 is treated as JPEG.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

DEFAULT_MEDIA_TYPE = "image/jpeg"

_DATA_URI_RE = re.compile(r"^data:(image/[A-Za-z0-9.+-]+);base64,", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


class InvalidImagePayload(ValueError):
    """The payload is not decodable base64."""


class EmptyImagePayload(InvalidImagePayload):
    """The payload carries no image bytes."""


class ImageTooLarge(ValueError):
    """The decoded image exceeds the configured ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Image is {size} bytes, limit is {limit} bytes")
        self.size = size
        self.limit = limit


@dataclass(frozen=True)
class ImageSubmission:
    """Decoded image bytes plus the media type declared by the client."""

    data: bytes
    media_type: str = DEFAULT_MEDIA_TYPE

    @property
    def size(self) -> int:
        return len(self.data)


def split_data_uri(image_data: str) -> tuple[str, str]:
    """Return ``(media_type, base64_payload)`` for *image_data*."""
    match = _DATA_URI_RE.match(image_data)
    if match is None:
        return DEFAULT_MEDIA_TYPE, image_data
    return match.group(1).lower(), image_data[match.end() :]


def decode_image_data(image_data: str, *, max_bytes: int | None = None) -> ImageSubmission:
    """Decode an inbound ``imageData`` string into an ``ImageSubmission``.

    Raises ``InvalidImagePayload`` for undecodable or empty payloads and
    ``ImageTooLarge`` when the decoded size exceeds *max_bytes*.
    """
    media_type, payload = split_data_uri(image_data.strip())
    payload = _WHITESPACE_RE.sub("", payload)

    if max_bytes is not None:
        # base64 expands by 4/3; reject before decoding obviously oversize input
        estimated = (len(payload) * 3) // 4 - payload.count("=")
        if estimated > max_bytes:
            raise ImageTooLarge(estimated, max_bytes)

    if not payload:
        raise EmptyImagePayload("Image payload is empty")

    try:
        data = base64.b64decode(_pad(payload), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImagePayload("Image payload is not valid base64") from exc

    if not data:
        raise EmptyImagePayload("Image payload is empty")
    if max_bytes is not None and len(data) > max_bytes:
        raise ImageTooLarge(len(data), max_bytes)

    return ImageSubmission(data=data, media_type=media_type)


def _pad(payload: str) -> str:
    missing = -len(payload) % 4
    return payload + "=" * missing
