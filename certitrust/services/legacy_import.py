from __future__ import annotations

import csv
import io
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping

from ..constants import LANG_ID, STATUS_PUBLISHED
from ..models import CertificateRecord
from ..shared.errors import MissingTemplateError
from ..shared.time import parse_date

logger = logging.getLogger("certitrust.legacy_import")

LEGACY_CUSTOM_TEXT = "Arsip Sertifikat Lama"
MAPPING_KEYS = (
    "certificate_number",
    "recipient_name",
    "recipient_email",
    "recipient_role",
    "event_name",
    "issue_date",
)

# First matching rule wins for each header; later headers may overwrite.
_GUESS_RULES = (
    ("certificate_number", ("nomor", "number", "no")),
    ("recipient_name", ("nama", "name")),
    ("recipient_email", ("email", "surel", "mail")),
    ("recipient_role", ("peran", "role", "status")),
    ("event_name", ("acara", "event", "kegiatan")),
    ("issue_date", ("tanggal", "date")),
)


@dataclass
class ImportResult:
    imported: list[CertificateRecord] = field(default_factory=list)
    skipped: list[dict] = field(default_factory=list)


def read_rows(text: str) -> tuple[list[str], list[dict[str, str]]]:
    """Parse a CSV export into headers and rows keyed by header.

    Rows whose column count differs from the header are dropped.
    """
    lines = [row for row in csv.reader(io.StringIO(text or "")) if any(c.strip() for c in row)]
    if len(lines) < 2:
        raise ValueError("CSV file is empty or malformed.")
    headers = [cell.strip().replace('"', "") for cell in lines[0]]
    rows = []
    for values in lines[1:]:
        if len(values) != len(headers):
            continue
        rows.append({h: v.strip() for h, v in zip(headers, values)})
    return headers, rows


def guess_mapping(headers: list[str]) -> dict[str, str]:
    mapping = {key: "" for key in MAPPING_KEYS}
    for header in headers:
        lower = header.lower()
        for key, needles in _GUESS_RULES:
            if any(needle in lower for needle in needles):
                mapping[key] = header
                break
    return mapping


def _legacy_number() -> str:
    return f"MIG-{uuid.uuid4().hex[:8]}"


def import_legacy(
    store,
    *,
    template_id: str,
    csv_text: str,
    mapping: Mapping[str, str] | None = None,
) -> ImportResult:
    if not store.get_template(template_id):
        raise MissingTemplateError(template_id)
    headers, rows = read_rows(csv_text)
    resolved = guess_mapping(headers)
    for key, header in (mapping or {}).items():
        if key not in MAPPING_KEYS:
            raise ValueError(f"Unknown mapping field: {key!r}")
        if header and header not in headers:
            raise ValueError(f"Column {header!r} is not in the CSV header.")
        resolved[key] = header or ""

    def value(row: dict, key: str) -> str:
        column = resolved.get(key)
        return (row.get(column) or "").strip() if column else ""

    result = ImportResult()
    seen: set[str] = set()
    for line_no, row in enumerate(rows, start=2):
        number = value(row, "certificate_number") or _legacy_number()
        if number in seen or store.number_exists(number):
            result.skipped.append({"line": line_no, "certificate_number": number, "reason": "duplicate"})
            continue
        seen.add(number)
        issued_on = parse_date(value(row, "issue_date")) or date.today()
        result.imported.append(
            CertificateRecord(
                template_id=template_id,
                certificate_number=number,
                recipient_name=value(row, "recipient_name") or "Unknown",
                recipient_email=value(row, "recipient_email") or None,
                recipient_role=value(row, "recipient_role") or "Peserta",
                event_name=value(row, "event_name") or "Kegiatan Lama",
                issue_date=issued_on,
                language=LANG_ID,
                custom_text=LEGACY_CUSTOM_TEXT,
                status=STATUS_PUBLISHED,
                email_sent=False,
            )
        )

    if result.imported:
        store.save_certificates(result.imported)
    logger.info(
        "[legacy-import] template=%s imported=%s skipped=%s",
        template_id,
        len(result.imported),
        len(result.skipped),
    )
    return result
