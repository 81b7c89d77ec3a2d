from datetime import date

import pytest

from certitrust.app import db
from certitrust.models import CertificateRecord
from certitrust.shared.errors import DuplicateNumberError
from certitrust.shared.store import SqlStore


def _record(template, number, name="Rina", event="Seminar"):
    return CertificateRecord(
        template_id=template.id,
        certificate_number=number,
        recipient_name=name,
        recipient_role="Peserta",
        event_name=event,
        issue_date=date(2024, 5, 20),
        language="ID",
    )


def test_lookup_by_id_number_and_encoded_number(app, template):
    store = SqlStore(db.session)
    record = _record(template, "SRT-PST/2024/0001-123")
    store.save_certificate(record)
    assert store.get_certificate(record.id) is record
    assert store.get_certificate("SRT-PST/2024/0001-123") is record
    assert store.get_certificate("SRT-PST%2F2024%2F0001-123") is record
    assert store.get_certificate("  ") is None
    assert store.get_certificate("SRT-PST/2024/0001-999") is None


def test_unique_index_reports_duplicate(app, template):
    store = SqlStore(db.session)
    store.save_certificate(_record(template, "DUP-1"))
    with pytest.raises(DuplicateNumberError):
        store.save_certificate(_record(template, "DUP-1", name="Other"))
    assert store.number_exists("DUP-1")
    assert len(store.list_certificates()) == 1


def test_filters_and_events(app, template):
    store = SqlStore(db.session)
    store.save_certificates(
        [
            _record(template, "A-1", name="Ahmad", event="Seminar"),
            _record(template, "A-2", name="Dewi", event="Workshop"),
            _record(template, "B-3", name="Eko", event="Workshop"),
        ]
    )
    assert store.unique_events() == ["Seminar", "Workshop"]
    assert {r.certificate_number for r in store.list_certificates(event="Workshop")} == {"A-2", "B-3"}
    assert [r.recipient_name for r in store.list_certificates(search="dew")] == ["Dewi"]
    assert [r.recipient_name for r in store.list_certificates(search="b-3")] == ["Eko"]
    assert len(store.list_certificates(event="All")) == 3


def test_config_singleton_defaults(app):
    store = SqlStore(db.session)
    config = store.get_config()
    assert config.id == 1
    assert config.organization_name == "Politeknik ATI Padang"
    assert config.prefix_speaker == "SRT-NRS/{YEAR}/"
    store.save_config(organization_name="Politeknik Baru")
    assert store.get_config().organization_name == "Politeknik Baru"


def test_delete_template_leaves_records(app, template):
    store = SqlStore(db.session)
    record = _record(template, "ORPHAN-1")
    store.save_certificate(record)
    assert store.delete_template(template.id)
    assert store.get_certificate("ORPHAN-1") is not None
    assert store.get_template(record.template_id) is None


def test_clear_all_restores_defaults(app, template):
    store = SqlStore(db.session)
    store.save_certificates([_record(template, "C-1"), _record(template, "C-2", name="Dodi")])
    store.save_config(organization_name="Politeknik Baru")
    removed = store.clear_all()
    assert removed == {"certificates": 2, "templates": 1}
    assert store.list_certificates() == []
    assert store.list_templates() == []
    assert store.get_config().organization_name == "Politeknik ATI Padang"
