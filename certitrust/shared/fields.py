from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..constants import DEMO_ORIGIN, LANG_EN, LANG_ID, LANGUAGES, QR_FIELD_KEY, VERIFY_PATH
from .template_model import Field, RenderData
from .time import fmt_long_date, parse_date

PLACEHOLDERS: dict[str, dict[str, str]] = {
    LANG_EN: {
        "recipientName": "Recipient Name",
        "recipientRole": "Participant",
        "eventName": "Event Name",
        "certificateNumber": "NO-000000",
        "customText": "For outstanding contribution",
    },
    LANG_ID: {
        "recipientName": "Nama Penerima",
        "recipientRole": "Peserta",
        "eventName": "Nama Acara",
        "certificateNumber": "NO-000000",
        "customText": "Atas kontribusi yang luar biasa",
    },
}

_DATA_ATTRS = {
    "recipientName": "recipient_name",
    "recipientRole": "recipient_role",
    "eventName": "event_name",
    "certificateNumber": "certificate_number",
    "customText": "custom_text",
}

DEMO_NUMBER = "demo"


@dataclass(frozen=True)
class ImageRequest:
    """A field that resolves to a generated code image rather than text."""

    url: str


def normalize_origin(origin: str | None) -> str:
    cleaned = (origin or "").strip().rstrip("/")
    if not cleaned or cleaned == "null":
        return DEMO_ORIGIN
    return cleaned


def verification_url(certificate_number: str | None, origin: str | None = None) -> str:
    number = (certificate_number or "").strip() or DEMO_NUMBER
    return f"{normalize_origin(origin)}{VERIFY_PATH}{number}"


def resolve_locale(data: RenderData, default: str | None = None) -> str:
    for candidate in (data.language, default):
        value = (candidate or "").upper()
        if value in LANGUAGES:
            return value
    return LANG_EN


def resolve(
    field: Field,
    data: RenderData,
    locale: str | None = None,
    origin: str | None = None,
    today: date | None = None,
) -> str | ImageRequest:
    locale = resolve_locale(data, locale)
    key = field.key

    if key == QR_FIELD_KEY:
        return ImageRequest(verification_url(data.certificate_number, origin))

    if key == "issueDate":
        raw = data.issue_date
        parsed = parse_date(raw)
        if parsed is None:
            if raw not in (None, ""):
                return str(raw)
            parsed = today or date.today()
        return fmt_long_date(parsed, locale)

    attr = _DATA_ATTRS.get(key)
    if attr is None:
        return field.label
    value = getattr(data, attr)
    if value is not None and str(value).strip():
        return str(value)
    return PLACEHOLDERS[locale][key]
