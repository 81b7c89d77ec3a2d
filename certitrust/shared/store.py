from __future__ import annotations

from typing import Iterable
from urllib.parse import unquote

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from ..models import CertificateRecord, SystemConfig, Template
from .errors import DuplicateNumberError


def _is_number_conflict(error: IntegrityError) -> bool:
    details = str(getattr(error, "orig", None) or error).lower()
    return "certificate_number" in details


class SqlStore:
    """Record store over a SQLAlchemy session.

    Engines depend on these methods only; they never reach for the session
    themselves.
    """

    def __init__(self, session):
        self.session = session

    # templates
    def get_template(self, template_id: str | None) -> Template | None:
        if not template_id:
            return None
        return self.session.get(Template, template_id)

    def list_templates(self) -> list[Template]:
        return (
            self.session.query(Template)
            .order_by(Template.created_at.desc(), Template.name)
            .all()
        )

    def save_template(self, template: Template) -> Template:
        self.session.add(template)
        self.session.commit()
        return template

    def delete_template(self, template_id: str) -> bool:
        template = self.get_template(template_id)
        if not template:
            return False
        self.session.delete(template)
        self.session.commit()
        return True

    # certificates
    def get_certificate(self, id_or_number: str | None) -> CertificateRecord | None:
        cleaned = (id_or_number or "").strip()
        if not cleaned:
            return None
        record = self.session.get(CertificateRecord, cleaned)
        if record:
            return record
        candidates = [cleaned]
        decoded = unquote(cleaned)
        if decoded != cleaned:
            candidates.append(decoded)
        for candidate in candidates:
            record = (
                self.session.query(CertificateRecord)
                .filter(CertificateRecord.certificate_number == candidate)
                .one_or_none()
            )
            if record:
                return record
        return None

    def number_exists(self, number: str) -> bool:
        return (
            self.session.query(CertificateRecord.id)
            .filter(CertificateRecord.certificate_number == number)
            .first()
            is not None
        )

    def save_certificate(self, record: CertificateRecord) -> CertificateRecord:
        self.save_certificates([record])
        return record

    def save_certificates(self, records: Iterable[CertificateRecord]) -> list[CertificateRecord]:
        records = list(records)
        self.session.add_all(records)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if _is_number_conflict(exc):
                numbers = ", ".join(r.certificate_number for r in records)
                raise DuplicateNumberError(numbers) from exc
            raise
        return records

    def delete_certificate(self, record_id: str) -> bool:
        record = self.session.get(CertificateRecord, record_id)
        if not record:
            return False
        self.session.delete(record)
        self.session.commit()
        return True

    def list_certificates(
        self, event: str | None = None, search: str | None = None
    ) -> list[CertificateRecord]:
        query = self.session.query(CertificateRecord)
        if event and event != "All":
            query = query.filter(CertificateRecord.event_name == event)
        term = (search or "").strip().lower()
        if term:
            like = f"%{term}%"
            query = query.filter(
                or_(
                    func.lower(CertificateRecord.recipient_name).like(like),
                    func.lower(CertificateRecord.certificate_number).like(like),
                )
            )
        return query.order_by(
            CertificateRecord.created_at.desc(), CertificateRecord.certificate_number
        ).all()

    def unique_events(self) -> list[str]:
        rows = (
            self.session.query(CertificateRecord.event_name)
            .filter(CertificateRecord.event_name.isnot(None))
            .filter(CertificateRecord.event_name != "")
            .distinct()
            .order_by(CertificateRecord.event_name)
            .all()
        )
        return [row[0] for row in rows]

    # configuration
    def get_config(self) -> SystemConfig:
        config = self.session.get(SystemConfig, 1)
        if config is None:
            config = SystemConfig(id=1)
            self.session.add(config)
            self.session.commit()
        return config

    def save_config(self, **changes) -> SystemConfig:
        config = self.get_config()
        for name, value in changes.items():
            setattr(config, name, value)
        self.session.commit()
        return config

    def clear_all(self) -> dict[str, int]:
        """Delete every certificate and template and restore default settings."""
        removed = {
            "certificates": self.session.query(CertificateRecord).delete(),
            "templates": self.session.query(Template).delete(),
        }
        self.session.query(SystemConfig).delete()
        self.session.commit()
        return removed
