from datetime import date

import pytest
from PIL import Image

from certitrust.app import db
from certitrust.models import CertificateRecord
from certitrust.services.verification import (
    STATUS_FOUND,
    STATUS_NOT_FOUND,
    STATUS_TEMPLATE_MISSING,
    download_filename,
    record_pdf,
    render_record,
    verify_certificate,
)
from certitrust.shared.errors import MissingTemplateError
from certitrust.shared.store import SqlStore


@pytest.fixture
def record(template):
    rec = CertificateRecord(
        template_id=template.id,
        certificate_number="SRT-NRS/2024/0002-314",
        recipient_name="Dr. Wulan",
        recipient_role="Narasumber",
        event_name="Seminar Nasional",
        issue_date=date(2024, 5, 20),
        language="ID",
    )
    SqlStore(db.session).save_certificate(rec)
    return rec


def test_found(app, record):
    result = verify_certificate(SqlStore(db.session), "SRT-NRS%2F2024%2F0002-314")
    assert result.status == STATUS_FOUND
    assert result.ok
    assert result.record.id == record.id


def test_not_found_and_blank(app):
    store = SqlStore(db.session)
    assert verify_certificate(store, "NOPE").status == STATUS_NOT_FOUND
    assert verify_certificate(store, "   ").status == STATUS_NOT_FOUND


def test_template_missing_is_distinct(app, record, template):
    store = SqlStore(db.session)
    store.delete_template(template.id)
    result = verify_certificate(store, record.certificate_number)
    assert result.status == STATUS_TEMPLATE_MISSING
    assert not result.ok
    with pytest.raises(MissingTemplateError):
        render_record(store, record, 1.0)


def test_render_record_uses_record_number_in_code(app, record):
    seen = []

    def capture(url):
        seen.append(url)
        return Image.new("RGB", (8, 8), "black")

    surface = render_record(
        SqlStore(db.session), record, 0.5, origin="https://verify.example.ac.id", code_generator=capture
    )
    assert surface.size == (500, 350)
    assert seen == ["https://verify.example.ac.id/#/verify/SRT-NRS/2024/0002-314"]


def test_pdf_and_filename(app, record):
    pdf = record_pdf(SqlStore(db.session), record, 0.25)
    assert pdf.startswith(b"%PDF")
    assert download_filename(record) == "SRT-NRS-2024-0002-314.pdf"
