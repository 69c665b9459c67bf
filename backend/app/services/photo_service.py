"""
services/photo_service.py — Image hosting passthrough (Cloudinary).

Both operations hand the work to the Cloudinary SDK and return its result
dict unmodified: upload → {"secure_url", "public_id", ...},
destroy → {"result": "ok" | "not found"}.

No retry and no local caching. SDK exceptions (cloudinary.exceptions.Error
and transport errors) propagate to the caller unchanged.

Credentials come from CLOUDINARY_CLOUD_NAME / CLOUDINARY_API_KEY /
CLOUDINARY_API_SECRET; a missing one raises ConfigurationError.
"""

from __future__ import annotations

import logging

import cloudinary
import cloudinary.uploader
from flask import current_app

from backend.app.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Square crop centred on a detected face, same as the album grid renders.
UPLOAD_TRANSFORMATION = [
    {"height": 500, "width": 500, "crop": "fill", "gravity": "face"},
]


def _configure() -> None:
    settings = {
        "cloud_name": current_app.config.get("CLOUDINARY_CLOUD_NAME"),
        "api_key":    current_app.config.get("CLOUDINARY_API_KEY"),
        "api_secret": current_app.config.get("CLOUDINARY_API_SECRET"),
    }
    missing = [name for name, value in settings.items() if not value]
    if missing:
        raise ConfigurationError(
            f"Cloudinary settings missing: {', '.join(missing)}."
        )
    cloudinary.config(secure=True, **settings)


def _is_empty(file) -> bool:
    """True for None or a werkzeug FileStorage with no filename / no bytes."""
    if file is None or not getattr(file, "filename", None):
        return True
    stream = getattr(file, "stream", None)
    if stream is None or not hasattr(stream, "seek"):
        return False
    position = stream.tell()
    stream.seek(0, 2)
    size = stream.tell()
    stream.seek(position)
    return size == 0


def add_photo(file) -> dict:
    """
    Uploads `file` (a werkzeug FileStorage) and returns the SDK result.

    An empty upload returns {} without contacting the provider.
    """
    if _is_empty(file):
        return {}

    _configure()
    result = cloudinary.uploader.upload(
        file.stream,
        filename=file.filename,
        transformation=UPLOAD_TRANSFORMATION,
    )
    logger.info("Uploaded photo public_id=%s", result.get("public_id"))
    return result


def delete_photo(public_id: str) -> dict:
    """Deletes the hosted image `public_id` and returns the SDK result."""
    _configure()
    result = cloudinary.uploader.destroy(public_id)
    logger.info("Deleted photo public_id=%s result=%s", public_id, result.get("result"))
    return result
