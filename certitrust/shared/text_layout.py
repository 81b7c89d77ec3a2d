from __future__ import annotations

from typing import Callable, NamedTuple

CENTER_WRAP_RATIO = 0.8
SIDE_WRAP_RATIO = 0.6
LINE_HEIGHT_RATIO = 1.2

_ANCHORS = {"left": "la", "center": "ma", "right": "ra"}


class Line(NamedTuple):
    text: str
    x: float
    y: float


def anchor_for(align: str) -> str:
    """Pillow anchor matching a canvas ``textBaseline = top`` draw."""
    return _ANCHORS.get(align, "la")


def wrap_width(surface_width: float, align: str) -> float:
    # left/right anchored text only has the far side of the canvas to use
    ratio = CENTER_WRAP_RATIO if align == "center" else SIDE_WRAP_RATIO
    return surface_width * ratio


def line_height(font_size_px: float) -> float:
    return font_size_px * LINE_HEIGHT_RATIO


def wrap_words(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        if not word:
            continue
        candidate = f"{current} {word}" if current else word
        if current and measure(candidate) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    lines.append(current)
    return lines


def layout(
    text: str,
    x: float,
    y: float,
    max_width: float | None,
    line_height: float,
    align: str,
    measure: Callable[[str], float] | None = None,
) -> list[Line]:
    """Position ``text`` at the anchor, wrapping only when ``max_width`` is set.

    The anchor is the top of the first line; further lines stack downwards.
    Horizontal alignment is left to the renderer's anchor, so every line
    shares the same ``x``.
    """
    if max_width is None or measure is None:
        return [Line(text, x, y)]
    wrapped = wrap_words(text, max_width, measure)
    return [Line(part, x, y + index * line_height) for index, part in enumerate(wrapped)]
