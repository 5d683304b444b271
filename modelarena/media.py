"""
media.py - Reference image attachments for image and multimodal prompts
"""

import re

from .config import ACCEPTED_IMAGE_TYPES, MAX_IMAGE_BYTES
from .runner import ArenaError


class MediaError(ArenaError):
    """Rejected image upload."""


def describe_image(filename: str | None) -> str | None:
    """Turn a file name into a short descriptor: drop the extension, - and _ become spaces.

    Returns None when nothing is left (no name, or a bare extension like ".png").
    """
    stem = re.sub(r"\.[^.]+$", "", filename or "")
    return re.sub(r"[-_]", " ", stem) or None


def validate_image(filename: str, size: int):
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in ACCEPTED_IMAGE_TYPES:
        raise MediaError(f"Unsupported image type: {filename}. Use PNG, JPG, or WebP.")
    if size > MAX_IMAGE_BYTES:
        raise MediaError(f"{filename} is {size / 1024 / 1024:.1f}MB; images must be 5MB or smaller.")


def attach_image(filename: str, data: bytes) -> dict:
    """
    Validate an upload and build the attachment record.

    Returns:
        Dict with name, size, data (raw bytes for the preview) and descriptor
    """
    validate_image(filename, len(data))
    return {
        "name": filename,
        "size": len(data),
        "data": data,
        "descriptor": describe_image(filename),
    }
