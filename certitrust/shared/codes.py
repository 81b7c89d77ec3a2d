from __future__ import annotations

from typing import Callable

import qrcode
from PIL import Image

from .errors import CodeGenerationError
from .template_model import Field

# ratio between the font-size slider and the printed code edge
CODE_SIZE_RATIO = 4
CODE_BORDER = 1
CODE_BOX_SIZE = 10

CodeGenerator = Callable[[str], Image.Image]


def generate_code(url: str) -> Image.Image:
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=CODE_BOX_SIZE,
        border=CODE_BORDER,
    )
    qr.add_data(url)
    qr.make(fit=True)
    return qr.make_image(fill_color="black", back_color="white").get_image()


def code_edge(field: Field, scale: float) -> float:
    return field.font_size * CODE_SIZE_RATIO * scale


def code_origin(field: Field, surface_size: tuple[int, int], edge: float) -> tuple[float, float]:
    width, height = surface_size
    x = (field.x / 100) * width
    y = (field.y / 100) * height
    if field.align == "center":
        x -= edge / 2
    elif field.align == "right":
        x -= edge
    return x, y


def embed(
    surface: Image.Image,
    url: str,
    field: Field,
    scale: float,
    generator: CodeGenerator | None = None,
) -> tuple[float, float, float]:
    """Composite the code for ``url`` onto ``surface``.

    Returns ``(x, y, edge)`` of the pasted square. Any failure to produce or
    decode the code image surfaces as :class:`CodeGenerationError` with the
    surface untouched.
    """
    edge = code_edge(field, scale)
    x, y = code_origin(field, surface.size, edge)
    edge_px = max(1, int(round(edge)))
    try:
        image = (generator or generate_code)(url)
        code = image.convert("RGB").resize((edge_px, edge_px), Image.Resampling.NEAREST)
    except CodeGenerationError:
        raise
    except Exception as exc:
        raise CodeGenerationError(f"Could not generate code for {url!r}: {exc}") from exc
    surface.paste(code, (int(round(x)), int(round(y))))
    return x, y, edge
