from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Sequence

from ..constants import LANG_ID, LANGUAGES, STATUS_PUBLISHED
from ..models import CertificateRecord
from ..shared.errors import MissingTemplateError
from ..shared.numbering import allocate_number, classify, prefix_for
from ..shared.recipients import Recipient
from ..shared.time import parse_date

logger = logging.getLogger("certitrust.issue")


def default_custom_text(name: str, language: str) -> str:
    if language == LANG_ID:
        return f"Diberikan kepada {name}"
    return f"Awarded to {name}"


def issue_batch(
    store,
    *,
    template_id: str,
    recipients: Sequence[Recipient],
    event_name: str,
    issue_date: date | str | None = None,
    language: str | None = None,
    custom_text: str | None = None,
    year: int | None = None,
    suffix_source: Callable[[], int] | None = None,
) -> list[CertificateRecord]:
    """Number and persist one certificate per recipient.

    Sequence indices follow the recipients' order, starting at 1. Every
    number is checked against the store and the batch before it is used.
    """
    if not store.get_template(template_id):
        raise MissingTemplateError(template_id)
    event_name = (event_name or "").strip()
    if not event_name:
        raise ValueError("Event name is required.")
    if not recipients:
        raise ValueError("No recipients to issue certificates for.")

    config = store.get_config()
    language = (language or config.default_language or LANG_ID).upper()
    if language not in LANGUAGES:
        raise ValueError(f"Unsupported language: {language!r}")
    parsed_date = parse_date(issue_date)
    if issue_date not in (None, "") and parsed_date is None:
        raise ValueError(f"Invalid issue date: {issue_date!r}")
    issued_on = parsed_date or date.today()
    number_year = year or date.today().year
    wording = (custom_text or "").strip()

    reserved: set[str] = set()
    records: list[CertificateRecord] = []
    for index, recipient in enumerate(recipients, start=1):
        category = classify(recipient.role)
        number = allocate_number(
            category,
            index,
            prefix_for(category, config),
            number_year,
            exists=store.number_exists,
            reserved=reserved,
            suffix_source=suffix_source,
        )
        records.append(
            CertificateRecord(
                template_id=template_id,
                certificate_number=number,
                recipient_name=recipient.name,
                recipient_email=recipient.email or None,
                recipient_role=recipient.role,
                event_name=event_name,
                issue_date=issued_on,
                language=language,
                custom_text=wording or default_custom_text(recipient.name, language),
                status=STATUS_PUBLISHED,
                email_sent=False,
            )
        )

    store.save_certificates(records)
    logger.info(
        "[issue] template=%s event=%r count=%s first=%s last=%s",
        template_id,
        event_name,
        len(records),
        records[0].certificate_number,
        records[-1].certificate_number,
    )
    return records
