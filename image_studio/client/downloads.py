"""Saving generated images to disk."""

import base64
import binascii
import logging
from pathlib import Path

from ..domain.errors import ValidationError

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "pelv-ai-image"


def _mime_extension(mime_type: str) -> str:
    normalized = mime_type.strip().lower()
    mapping = {
        "image/png": ".png",
        "image/jpeg": ".jpeg",
        "image/jpg": ".jpeg",
        "image/webp": ".webp",
    }
    return mapping.get(normalized, ".bin")


def decode_data_url(url: str) -> tuple[str, bytes]:
    """
    Split a base64 data URL into its MIME type and bytes.

    Raises:
        ValidationError: If url is not a base64 data URL
    """
    header, sep, payload = url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValidationError("Only base64 data URLs can be saved")

    mime_type = header[len("data:"):-len(";base64")] or "application/octet-stream"
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Image data is not valid base64: {e}") from e


def save_data_url(url: str, directory: Path, timestamp_millis: int) -> Path:
    """
    Write a data URL image as pelv-ai-image-<millis>.<ext> in directory.

    A numeric suffix is added when several images share a timestamp.
    """
    mime_type, content = decode_data_url(url)
    extension = _mime_extension(mime_type)

    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{FILENAME_PREFIX}-{timestamp_millis}{extension}"
    suffix = 1
    while path.exists():
        path = directory / f"{FILENAME_PREFIX}-{timestamp_millis}-{suffix}{extension}"
        suffix += 1

    path.write_bytes(content)
    logger.info(f"Saved image to {path} ({len(content)} bytes)")
    return path
