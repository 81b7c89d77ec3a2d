from datetime import date

import pytest

from certitrust.shared.fields import ImageRequest, normalize_origin, resolve, verification_url
from certitrust.shared.template_fields import get_default_fields, sanitize_field, sanitize_fields
from certitrust.shared.template_model import Field, RenderData
from certitrust.shared.time import fmt_long_date


def _field(key, **overrides):
    values = dict(id="f", key=key, label="Label", x=50, y=50, font_size=20)
    values.update(overrides)
    return Field(**values)


def test_record_values_win_over_placeholders():
    data = RenderData(recipient_name="Siti Rahma", event_name="Workshop AI", language="ID")
    assert resolve(_field("recipientName"), data) == "Siti Rahma"
    assert resolve(_field("eventName"), data) == "Workshop AI"


@pytest.mark.parametrize(
    "language,key,expected",
    [
        ("EN", "recipientName", "Recipient Name"),
        ("ID", "recipientName", "Nama Penerima"),
        ("EN", "recipientRole", "Participant"),
        ("ID", "recipientRole", "Peserta"),
        ("ID", "eventName", "Nama Acara"),
        ("EN", "certificateNumber", "NO-000000"),
        ("EN", "customText", "For outstanding contribution"),
        ("ID", "customText", "Atas kontribusi yang luar biasa"),
    ],
)
def test_placeholders_per_locale(language, key, expected):
    assert resolve(_field(key), RenderData(language=language)) == expected


def test_locale_falls_back_to_caller_then_english():
    assert resolve(_field("recipientName"), RenderData(), locale="ID") == "Nama Penerima"
    assert resolve(_field("recipientName"), RenderData()) == "Recipient Name"


def test_issue_date_formats():
    field = _field("issueDate")
    assert resolve(field, RenderData(issue_date="2024-01-05", language="EN")) == "January 5, 2024"
    assert resolve(field, RenderData(issue_date=date(2024, 8, 17), language="ID")) == "17 Agustus 2024"


def test_issue_date_missing_uses_today_and_garbage_is_verbatim():
    field = _field("issueDate")
    today = date(2023, 3, 9)
    assert resolve(field, RenderData(language="EN"), today=today) == fmt_long_date(today, "EN")
    assert resolve(field, RenderData(issue_date="sometime", language="EN")) == "sometime"


def test_code_field_builds_verification_url():
    result = resolve(
        _field("qr_verification"),
        RenderData(certificate_number="SRT-PST/2024/0001-123"),
        origin="https://certs.example.org/",
    )
    assert result == ImageRequest("https://certs.example.org/#/verify/SRT-PST/2024/0001-123")


def test_verification_url_fallbacks():
    assert normalize_origin("null") == "https://certitrust.demo"
    assert normalize_origin(None) == "https://certitrust.demo"
    assert verification_url(None) == "https://certitrust.demo/#/verify/demo"


def test_unknown_key_resolves_to_label():
    assert resolve(_field("organizationName", label="Politeknik"), RenderData()) == "Politeknik"


def test_sanitize_field_accepts_aliases_and_clamps():
    clean = sanitize_field(
        {"id": "9", "key": "eventName", "x": 140, "y": -3, "fontSize": "24", "fontWeight": "bold"}
    )
    assert clean["x"] == 100.0
    assert clean["y"] == 0.0
    assert clean["font_size"] == 24.0
    assert clean["font_weight"] == "bold"
    assert clean["type"] == "text"


@pytest.mark.parametrize(
    "overrides",
    [
        {"key": "nope"},
        {"font_size": 0},
        {"align": "justify"},
        {"color": "not-a-colour"},
    ],
)
def test_sanitize_field_rejects_invalid(overrides):
    raw = {"key": "recipientName", "font_size": 20}
    raw.update(overrides)
    with pytest.raises(ValueError):
        sanitize_field(raw)


def test_default_fields_survive_sanitizing():
    cleaned = sanitize_fields(get_default_fields())
    assert [f["key"] for f in cleaned] == [
        "recipientName",
        "recipientRole",
        "eventName",
        "issueDate",
        "certificateNumber",
        "qr_verification",
    ]
    assert cleaned[-1]["type"] == "qr"
