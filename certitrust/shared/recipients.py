from __future__ import annotations

import csv
import io
from typing import NamedTuple

from ..constants import LANG_ID


class Recipient(NamedTuple):
    name: str
    role: str
    email: str


def default_role(language: str | None) -> str:
    return "Peserta" if (language or "").upper() == LANG_ID else "Participant"


def parse_manual(text: str, language: str | None = None) -> list[Recipient]:
    """Parse ``Name, Role, Email`` lines; email is optional.

    Lines typed as ``Name, Email, Role`` are detected by the ``@`` and
    swapped back.
    """
    fallback = default_role(language)
    recipients: list[Recipient] = []
    for raw in (text or "").splitlines():
        if not raw.strip():
            continue
        parts = [part.strip() for part in raw.split(",")]
        name = parts[0]
        role = parts[1] if len(parts) > 1 and parts[1] else fallback
        email = parts[2] if len(parts) > 2 else ""
        if "@" in role and "@" not in email:
            role, email = (email or fallback), role
        if name:
            recipients.append(Recipient(name, role, email))
    return recipients


def _detect_columns(headers: list[str]) -> tuple[int, int, int]:
    name_idx, email_idx, role_idx = 0, -1, 1
    for index, header in enumerate(headers):
        if "nam" in header:
            name_idx = index
        if "mail" in header or "surel" in header:
            email_idx = index
        if "role" in header or "peran" in header or "jabatan" in header:
            role_idx = index
    return name_idx, email_idx, role_idx


def parse_csv(text: str, language: str | None = None) -> list[Recipient]:
    rows = [row for row in csv.reader(io.StringIO(text or "")) if any(c.strip() for c in row)]
    if not rows:
        return []
    fallback = default_role(language)
    headers = [cell.strip().lower() for cell in rows[0]]
    name_idx, email_idx, role_idx = _detect_columns(headers)
    first_line = ",".join(headers)
    start = 1 if ("name" in first_line or "nama" in first_line) else 0

    def cell(row: list[str], index: int) -> str:
        if index < 0 or index >= len(row):
            return ""
        return row[index].strip()

    recipients: list[Recipient] = []
    for row in rows[start:]:
        name = cell(row, name_idx)
        if not name:
            continue
        recipients.append(
            Recipient(
                name=name,
                role=cell(row, role_idx) or fallback,
                email=cell(row, email_idx),
            )
        )
    return recipients


def coerce_recipients(values, language: str | None = None) -> list[Recipient]:
    """Accept a JSON list of ``{name, role, email}`` objects."""
    fallback = default_role(language)
    recipients: list[Recipient] = []
    for raw in values or []:
        if not isinstance(raw, dict):
            raise ValueError("Each recipient must be an object")
        name = str(raw.get("name") or "").strip()
        if not name:
            continue
        recipients.append(
            Recipient(
                name=name,
                role=str(raw.get("role") or "").strip() or fallback,
                email=str(raw.get("email") or "").strip(),
            )
        )
    return recipients
