from __future__ import annotations

import logging
import os
import re

from PIL import ImageFont

logger = logging.getLogger("certitrust.render")

_DEJAVU = "/usr/share/fonts/truetype/dejavu"

_FONT_PATHS = {
    ("sans", "normal"): f"{_DEJAVU}/DejaVuSans.ttf",
    ("sans", "bold"): f"{_DEJAVU}/DejaVuSans-Bold.ttf",
    ("serif", "normal"): f"{_DEJAVU}/DejaVuSerif.ttf",
    ("serif", "bold"): f"{_DEJAVU}/DejaVuSerif-Bold.ttf",
    ("mono", "normal"): f"{_DEJAVU}/DejaVuSansMono.ttf",
    ("mono", "bold"): f"{_DEJAVU}/DejaVuSansMono-Bold.ttf",
}
_DEFAULT_FONT_PATH = f"{_DEJAVU}/DejaVuSans.ttf"

_FAMILY_CLASSES = {
    "inter": "sans",
    "roboto": "sans",
    "montserrat": "sans",
    "helvetica": "sans",
    "arial": "sans",
    "sans-serif": "sans",
    "playfair display": "serif",
    "merriweather": "serif",
    "great vibes": "serif",
    "times": "serif",
    "times new roman": "serif",
    "georgia": "serif",
    "serif": "serif",
    "courier": "mono",
    "courier new": "mono",
    "monospace": "mono",
}


def _family_class(family: str) -> str:
    return _FAMILY_CLASSES.get((family or "").strip().lower(), "sans")


def _font_dir_candidates(font_dir: str, family: str, weight: str) -> list[str]:
    compact = re.sub(r"[^A-Za-z0-9]+", "", family or "")
    if not compact:
        return []
    style = "Bold" if weight == "bold" else "Regular"
    names = [f"{compact}-{style}.ttf", f"{compact}-{style}.otf"]
    if weight != "bold":
        names += [f"{compact}.ttf", f"{compact}.otf"]
    return [os.path.join(font_dir, name) for name in names]


class FontResolver:
    """Loads TrueType fonts for one render, recording fallbacks as warnings."""

    def __init__(self, font_dir: str | None = None, warnings: list[str] | None = None):
        self.font_dir = font_dir
        self.warnings = warnings if warnings is not None else []
        self._loaded: dict[tuple[str, str, int], ImageFont.FreeTypeFont] = {}

    def candidates(self, family: str, weight: str) -> list[str]:
        paths: list[str] = []
        if self.font_dir:
            paths.extend(_font_dir_candidates(self.font_dir, family, weight))
        paths.append(_FONT_PATHS[(_family_class(family), weight)])
        return paths

    def _warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)
            logger.info(message)

    def load(self, family: str, weight: str, size_px: int) -> ImageFont.FreeTypeFont:
        size_px = max(int(size_px), 1)
        weight = "bold" if weight == "bold" else "normal"
        cache_key = (family, weight, size_px)
        if cache_key in self._loaded:
            return self._loaded[cache_key]
        font = None
        for path in self.candidates(family, weight):
            try:
                font = ImageFont.truetype(path, size_px)
                break
            except OSError:
                continue
        if font is None:
            try:
                font = ImageFont.truetype(_DEFAULT_FONT_PATH, size_px)
                self._warn(f"[render-font-fallback] {family} {weight} unavailable; using DejaVuSans")
            except OSError:
                font = ImageFont.load_default(size=size_px)
                self._warn("[render-font-fallback] using default font")
        self._loaded[cache_key] = font
        return font
