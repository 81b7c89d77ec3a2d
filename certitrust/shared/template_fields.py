from __future__ import annotations

import uuid
from copy import deepcopy
from typing import Any, Iterable, Mapping

from PIL import ImageColor

from ..constants import (
    ALIGNMENTS,
    FIELD_KEYS,
    FIELD_TYPES,
    FONT_WEIGHTS,
    QR_FIELD_KEY,
)

FONT_FAMILY_CHOICES: list[str] = [
    "Inter",
    "Playfair Display",
    "Roboto",
    "Merriweather",
    "Montserrat",
    "Great Vibes",
    "Courier",
]

DEFAULT_FONT_FAMILY = "Inter"
DEFAULT_COLOR = "#000000"
MIN_FONT_SIZE = 1.0
MAX_FONT_SIZE = 400.0

# Accepted spellings from older exported template files.
_ALIASES = {
    "fontSize": "font_size",
    "fontFamily": "font_family",
    "fontWeight": "font_weight",
}

DEFAULT_FIELDS: list[dict] = [
    {"id": "1", "key": "recipientName", "label": "Nama Penerima", "type": "text", "x": 50, "y": 40, "font_size": 48, "font_family": "Playfair Display", "color": "#1e293b", "align": "center", "font_weight": "bold"},
    {"id": "6", "key": "recipientRole", "label": "Peran (Role)", "type": "text", "x": 50, "y": 48, "font_size": 24, "font_family": "Inter", "color": "#334155", "align": "center", "font_weight": "normal"},
    {"id": "2", "key": "eventName", "label": "Nama Acara", "type": "text", "x": 50, "y": 56, "font_size": 24, "font_family": "Inter", "color": "#475569", "align": "center", "font_weight": "normal"},
    {"id": "3", "key": "issueDate", "label": "Tanggal", "type": "date", "x": 20, "y": 80, "font_size": 16, "font_family": "Inter", "color": "#64748b", "align": "left", "font_weight": "normal"},
    {"id": "4", "key": "certificateNumber", "label": "No. Sertifikat", "type": "text", "x": 80, "y": 80, "font_size": 14, "font_family": "Inter", "color": "#94a3b8", "align": "right", "font_weight": "normal"},
    {"id": "5", "key": "qr_verification", "label": "QR Code", "type": "qr", "x": 50, "y": 75, "font_size": 20, "font_family": "Inter", "color": "#000000", "align": "center", "font_weight": "normal"},
]


def get_default_fields() -> list[dict]:
    return deepcopy(DEFAULT_FIELDS)


def _clamp_percent(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Field {name} must be a number")
    return max(0.0, min(100.0, number))


def _default_type(key: str) -> str:
    if key == QR_FIELD_KEY:
        return "qr"
    if key == "issueDate":
        return "date"
    return "text"


def sanitize_field(raw: Mapping[str, Any]) -> dict:
    """Validate one field definition and return it in canonical form.

    Positions are clamped into [0, 100]; the key, size and style values must
    be valid or ``ValueError`` is raised.
    """
    if not isinstance(raw, Mapping):
        raise ValueError("Field definition must be an object")
    data = {_ALIASES.get(name, name): value for name, value in raw.items()}

    key = str(data.get("key") or "").strip()
    if key not in FIELD_KEYS:
        raise ValueError(f"Unknown field key: {key!r}")

    try:
        font_size = float(data.get("font_size"))
    except (TypeError, ValueError):
        raise ValueError("Field font_size must be a number")
    if font_size < MIN_FONT_SIZE or font_size > MAX_FONT_SIZE:
        raise ValueError(
            f"Field font_size must be between {MIN_FONT_SIZE:g} and {MAX_FONT_SIZE:g}"
        )

    align = str(data.get("align") or "left").strip().lower()
    if align not in ALIGNMENTS:
        raise ValueError(f"Unsupported alignment: {align!r}")

    weight = str(data.get("font_weight") or "normal").strip().lower()
    if weight not in FONT_WEIGHTS:
        raise ValueError(f"Unsupported font weight: {weight!r}")

    color = str(data.get("color") or DEFAULT_COLOR).strip()
    try:
        ImageColor.getrgb(color)
    except ValueError:
        raise ValueError(f"Unsupported color: {color!r}")

    field_type = str(data.get("type") or _default_type(key)).strip().lower()
    if field_type not in FIELD_TYPES:
        field_type = _default_type(key)

    return {
        "id": str(data.get("id") or uuid.uuid4()),
        "key": key,
        "label": str(data.get("label") or key),
        "x": _clamp_percent(data.get("x", 50), "x"),
        "y": _clamp_percent(data.get("y", 50), "y"),
        "font_size": font_size,
        "font_family": str(data.get("font_family") or DEFAULT_FONT_FAMILY).strip(),
        "color": color,
        "align": align,
        "font_weight": weight,
        "type": field_type,
    }


def sanitize_fields(values: Iterable[Mapping[str, Any]] | None) -> list[dict]:
    if values is None:
        return []
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise ValueError("Fields must be a list")
    cleaned: list[dict] = []
    seen: set[str] = set()
    for raw in values:
        field = sanitize_field(raw)
        if field["id"] in seen:
            field["id"] = str(uuid.uuid4())
        seen.add(field["id"])
        cleaned.append(field)
    return cleaned
