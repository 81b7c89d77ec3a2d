from __future__ import annotations

import logging
from dataclasses import dataclass, field as dc_field
from io import BytesIO

from PIL import Image, ImageDraw, UnidentifiedImageError

from ..constants import WRAPPED_FIELD_KEY
from .codes import CodeGenerator, embed
from .errors import CodeGenerationError, ImageDecodeError
from .export import encode_jpeg, encode_png
from .fields import ImageRequest, resolve
from .fonts import FontResolver
from .template_model import Field, RenderData, TemplateLayout
from .text_layout import Line, anchor_for, layout, line_height, wrap_width

logger = logging.getLogger("certitrust.render")


@dataclass(frozen=True)
class FieldPlacement:
    field_id: str
    key: str
    kind: str  # "text" or "code"
    lines: tuple[Line, ...] = ()
    box: tuple[float, float, float] | None = None  # x, y, edge


@dataclass
class RasterSurface:
    image: Image.Image
    scale: float
    placements: list[FieldPlacement] = dc_field(default_factory=list)
    warnings: list[str] = dc_field(default_factory=list)

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def pixels(self) -> bytes:
        return self.image.tobytes()

    def to_png(self) -> bytes:
        return encode_png(self.image)

    def to_jpeg(self, quality: int = 85) -> bytes:
        return encode_jpeg(self.image, quality=quality)


def surface_size(template: TemplateLayout, scale: float) -> tuple[int, int]:
    return (
        max(1, int(round(template.width * scale))),
        max(1, int(round(template.height * scale))),
    )


def _decode_background(raw: bytes, size: tuple[int, int]) -> Image.Image:
    try:
        with Image.open(BytesIO(raw)) as source:
            background = source.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"Background image could not be decoded: {exc}") from exc
    # stretched, not aspect-corrected: width/height were captured from this image
    return background.resize(size, Image.Resampling.LANCZOS)


def _draw_text_field(
    draw: ImageDraw.ImageDraw,
    field: Field,
    text: str,
    surface_px: tuple[int, int],
    scale: float,
    fonts: FontResolver,
) -> FieldPlacement:
    width, height = surface_px
    # glyphs and line spacing share one whole-pixel size
    font_px = max(1, int(round(field.font_size * scale)))
    font = fonts.load(field.font_family, field.font_weight, font_px)
    x = (field.x / 100) * width
    y = (field.y / 100) * height
    if field.key == WRAPPED_FIELD_KEY:
        lines = layout(
            text,
            x,
            y,
            wrap_width(width, field.align),
            line_height(font_px),
            field.align,
            measure=font.getlength,
        )
    else:
        lines = layout(text, x, y, None, line_height(font_px), field.align)
    anchor = anchor_for(field.align)
    for line in lines:
        draw.text((line.x, line.y), line.text, font=font, fill=field.color, anchor=anchor)
    return FieldPlacement(field.id, field.key, "text", lines=tuple(lines))


def render(
    template: TemplateLayout,
    data: RenderData,
    scale: float = 1.0,
    *,
    origin: str | None = None,
    locale: str | None = None,
    code_generator: CodeGenerator | None = None,
    font_dir: str | None = None,
) -> RasterSurface:
    """Compose ``template`` and ``data`` into a raster at ``scale``.

    The background must decode or :class:`ImageDecodeError` is raised and no
    surface is returned. Failures inside a single field are logged, recorded
    as a warning and skipped; the remaining fields still render.
    """
    if scale <= 0:
        raise ValueError("scale must be positive")
    size = surface_size(template, scale)
    image = _decode_background(template.background, size)
    draw = ImageDraw.Draw(image)
    warnings: list[str] = []
    fonts = FontResolver(font_dir, warnings)
    placements: list[FieldPlacement] = []

    for field in template.fields:
        try:
            value = resolve(field, data, locale, origin)
            if isinstance(value, ImageRequest):
                box = embed(image, value.url, field, scale, code_generator)
                placements.append(FieldPlacement(field.id, field.key, "code", box=box))
            else:
                placements.append(
                    _draw_text_field(draw, field, value, size, scale, fonts)
                )
        except CodeGenerationError as exc:
            logger.warning("[render] code skipped field=%s: %s", field.id, exc)
            warnings.append(f"[render-code-skipped] {field.key}")
        except (ValueError, OSError) as exc:
            logger.warning("[render] field skipped field=%s key=%s: %s", field.id, field.key, exc)
            warnings.append(f"[render-field-skipped] {field.key}")

    return RasterSurface(image=image, scale=scale, placements=placements, warnings=warnings)
