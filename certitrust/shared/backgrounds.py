from __future__ import annotations

import base64
import binascii
import io
import re
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from .errors import ImageDecodeError

ALLOWED_FORMATS = {"PNG": "image/png", "JPEG": "image/jpeg", "WEBP": "image/webp", "GIF": "image/gif"}
MAX_BYTES = 20 * 1024 * 1024
MAX_DIMENSION = 10000

_DATA_URI = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(?:;[\w=-]+)*;base64,(?P<data>.*)$", re.S)


@dataclass
class BackgroundImage:
    data: bytes
    mime: str
    width: int
    height: int


def decode_data_uri(value: str) -> bytes:
    match = _DATA_URI.match((value or "").strip())
    payload = match.group("data") if match else (value or "")
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError):
        raise ImageDecodeError("Background is not valid base64 data.")


def load_background(raw: bytes) -> BackgroundImage:
    """Validate an uploaded background and capture its intrinsic size."""
    if not raw:
        raise ImageDecodeError("Background image is empty.")
    if len(raw) > MAX_BYTES:
        raise ImageDecodeError("Background image is larger than 20 MB.")
    try:
        image = Image.open(io.BytesIO(raw))
        image.verify()
        image = Image.open(io.BytesIO(raw))
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ImageDecodeError("Upload must be a valid image.")
    mime = ALLOWED_FORMATS.get(image.format or "")
    if not mime:
        raise ImageDecodeError(f"Unsupported image format: {image.format!r}")
    width, height = image.size
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise ImageDecodeError("Image dimensions are too large.")
    return BackgroundImage(data=raw, mime=mime, width=width, height=height)
