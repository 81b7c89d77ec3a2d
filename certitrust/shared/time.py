from datetime import date, datetime

from ..constants import LANG_ID

EN_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

ID_MONTHS = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)


def parse_date(value: date | datetime | str | None) -> date | None:
    """Coerce a date, datetime or ISO ``YYYY-MM-DD`` string to a date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def fmt_long_date(value: date, language: str) -> str:
    """Long calendar date: ``January 5, 2024`` (EN) or ``5 Januari 2024`` (ID)."""
    if (language or "").upper() == LANG_ID:
        return f"{value.day} {ID_MONTHS[value.month - 1]} {value.year}"
    return f"{EN_MONTHS[value.month - 1]} {value.day}, {value.year}"
