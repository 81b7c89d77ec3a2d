from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from .template_fields import sanitize_field


@dataclass(frozen=True)
class Field:
    id: str
    key: str
    label: str
    x: float
    y: float
    font_size: float
    font_family: str = "Inter"
    color: str = "#000000"
    align: str = "left"
    font_weight: str = "normal"
    type: str = "text"

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Field":
        clean = sanitize_field(raw)
        return cls(**clean)


@dataclass(frozen=True)
class TemplateLayout:
    id: str
    name: str
    background: bytes
    width: int
    height: int
    fields: tuple[Field, ...]

    @classmethod
    def from_model(cls, template) -> "TemplateLayout":
        return cls(
            id=template.id,
            name=template.name,
            background=template.background_image,
            width=int(template.width),
            height=int(template.height),
            fields=tuple(Field.from_dict(raw) for raw in (template.fields or [])),
        )


@dataclass(frozen=True)
class RenderData:
    """Values bound into a template; missing values render as placeholders."""

    recipient_name: str | None = None
    recipient_role: str | None = None
    event_name: str | None = None
    issue_date: date | str | None = None
    certificate_number: str | None = None
    custom_text: str | None = None
    language: str | None = None

    @classmethod
    def from_record(cls, record) -> "RenderData":
        return cls(
            recipient_name=record.recipient_name,
            recipient_role=record.recipient_role,
            event_name=record.event_name,
            issue_date=record.issue_date,
            certificate_number=record.certificate_number,
            custom_text=record.custom_text,
            language=record.language,
        )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "RenderData":
        raw = raw or {}
        values = {}
        for name in cls.__dataclass_fields__:
            value = raw.get(name)
            if isinstance(value, str):
                value = value.strip() or None
            values[name] = value
        return cls(**values)
