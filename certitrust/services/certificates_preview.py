from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Mapping

from flask import current_app

from ..constants import MAX_SCALE, MIN_SCALE
from ..models import Template
from ..shared.render import render
from ..shared.render_requests import RenderTracker
from ..shared.template_fields import sanitize_fields
from ..shared.template_model import Field, RenderData, TemplateLayout


@dataclass(frozen=True)
class PreviewResult:
    image_base64: str
    warnings: tuple[str, ...]
    size: tuple[int, int]


_tracker = RenderTracker()


def clamp_scale(value, default: float) -> float:
    try:
        scale = float(value)
    except (TypeError, ValueError):
        scale = default
    if scale <= 0:
        scale = default
    return max(MIN_SCALE, min(scale, MAX_SCALE))


def preview_layout(template: Template, fields_override=None) -> TemplateLayout:
    layout = TemplateLayout.from_model(template)
    if fields_override is None:
        return layout
    fields = tuple(Field(**raw) for raw in sanitize_fields(fields_override))
    return TemplateLayout(
        id=layout.id,
        name=layout.name,
        background=layout.background,
        width=layout.width,
        height=layout.height,
        fields=fields,
    )


def generate_preview(
    template: Template,
    *,
    data: Mapping | None = None,
    fields: list | None = None,
    scale: float | None = None,
    view: str | None = None,
    request_id: int | None = None,
    origin: str | None = None,
) -> PreviewResult | None:
    """Render a live preview; returns ``None`` when a newer request superseded it.

    Missing data values render as locale placeholders.
    """
    scale = clamp_scale(scale, current_app.config.get("PREVIEW_SCALE", 0.5))
    view_key = f"template:{template.id}:{view or 'default'}"
    token = _tracker.begin(view_key, request_id)

    surface = render(
        preview_layout(template, fields),
        RenderData.from_mapping(data),
        scale,
        origin=origin,
        font_dir=current_app.config.get("FONT_DIR"),
    )
    image_base64 = base64.b64encode(surface.to_png()).decode("ascii")
    result = PreviewResult(
        image_base64=image_base64,
        warnings=tuple(surface.warnings),
        size=surface.size,
    )
    if not _tracker.publish(view_key, token):
        current_app.logger.info(
            "[preview] discarded stale render view=%s token=%s", view_key, token
        )
        return None
    return result
