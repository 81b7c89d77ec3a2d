from __future__ import annotations

from io import BytesIO

from PIL import Image
from reportlab.lib.pagesizes import landscape, portrait
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

DEFAULT_JPEG_QUALITY = 85


def encode_png(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def encode_jpeg(image: Image.Image, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    quality = max(1, min(int(quality), 95))
    buffer = BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def page_size(image: Image.Image) -> tuple[float, float]:
    width, height = image.size
    size = (float(width), float(height))
    return landscape(size) if width > height else portrait(size)


def build_pdf(
    image: Image.Image,
    quality: int = DEFAULT_JPEG_QUALITY,
    title: str | None = None,
) -> bytes:
    """Single page sized exactly to the raster, with the JPEG drawn full-bleed."""
    jpeg = encode_jpeg(image, quality=quality)
    width, height = page_size(image)
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=(width, height))
    if title:
        c.setTitle(title)
    c.drawImage(ImageReader(BytesIO(jpeg)), 0, 0, width=width, height=height)
    c.showPage()
    c.save()
    return buffer.getvalue()
