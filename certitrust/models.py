from __future__ import annotations

import base64
import uuid
from datetime import date

from sqlalchemy.orm import validates

from .app import db
from .constants import (
    DEFAULT_LANGUAGE,
    DEFAULT_ORGANIZATION_NAME,
    DEFAULT_PREFIXES,
    LANGUAGES,
    STATUS_PUBLISHED,
    STATUSES,
)


def _new_id() -> str:
    return str(uuid.uuid4())


class Template(db.Model):
    __tablename__ = "templates"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(255), nullable=False)
    background_image = db.Column(db.LargeBinary, nullable=False)
    background_mime = db.Column(db.String(64), nullable=False, default="image/png")
    width = db.Column(db.Integer, nullable=False)
    height = db.Column(db.Integer, nullable=False)
    fields = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    def to_dict(self, include_background: bool = False) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "fields": list(self.fields or []),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_background:
            encoded = base64.b64encode(self.background_image or b"").decode("ascii")
            data["background"] = f"data:{self.background_mime};base64,{encoded}"
        return data


class CertificateRecord(db.Model):
    __tablename__ = "certificates"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    # plain column: deleting a template leaves records pointing at nothing
    template_id = db.Column(db.String(36), nullable=False, index=True)
    certificate_number = db.Column(db.String(128), nullable=False)
    recipient_name = db.Column(db.String(255), nullable=False)
    recipient_email = db.Column(db.String(255))
    recipient_role = db.Column(db.String(255))
    event_name = db.Column(db.String(500), nullable=False)
    issue_date = db.Column(db.Date, nullable=False, default=date.today)
    language = db.Column(db.String(2), nullable=False, default=DEFAULT_LANGUAGE)
    custom_text = db.Column(db.Text)
    status = db.Column(db.String(16), nullable=False, default=STATUS_PUBLISHED)
    email_sent = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    __table_args__ = (
        db.Index(
            "uix_certificates_certificate_number",
            "certificate_number",
            unique=True,
        ),
    )

    @validates("language")
    def upper_language(self, key, value):
        value = (value or DEFAULT_LANGUAGE).upper()
        if value not in LANGUAGES:
            raise ValueError(f"Unsupported language: {value!r}")
        return value

    @validates("status")
    def check_status(self, key, value):
        value = (value or STATUS_PUBLISHED).lower()
        if value not in STATUSES:
            raise ValueError(f"Unsupported status: {value!r}")
        return value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "template_id": self.template_id,
            "certificate_number": self.certificate_number,
            "recipient_name": self.recipient_name,
            "recipient_email": self.recipient_email,
            "recipient_role": self.recipient_role,
            "event_name": self.event_name,
            "issue_date": self.issue_date.isoformat() if self.issue_date else None,
            "language": self.language,
            "custom_text": self.custom_text,
            "status": self.status,
            "email_sent": bool(self.email_sent),
        }


class SystemConfig(db.Model):
    __tablename__ = "system_config"

    id = db.Column(db.Integer, primary_key=True, default=1)
    organization_name = db.Column(
        db.String(255), nullable=False, default=DEFAULT_ORGANIZATION_NAME
    )
    default_language = db.Column(db.String(2), nullable=False, default=DEFAULT_LANGUAGE)
    prefix_participant = db.Column(
        db.String(64), nullable=False, default=DEFAULT_PREFIXES["participant"]
    )
    prefix_speaker = db.Column(
        db.String(64), nullable=False, default=DEFAULT_PREFIXES["speaker"]
    )
    prefix_instructor = db.Column(
        db.String(64), nullable=False, default=DEFAULT_PREFIXES["instructor"]
    )
    updated_at = db.Column(
        db.DateTime, server_default=db.func.now(), onupdate=db.func.now()
    )

    @validates("default_language")
    def upper_language(self, key, value):
        value = (value or DEFAULT_LANGUAGE).upper()
        if value not in LANGUAGES:
            raise ValueError(f"Unsupported language: {value!r}")
        return value

    def to_dict(self) -> dict:
        return {
            "organization_name": self.organization_name,
            "default_language": self.default_language,
            "prefix_participant": self.prefix_participant,
            "prefix_speaker": self.prefix_speaker,
            "prefix_instructor": self.prefix_instructor,
        }
