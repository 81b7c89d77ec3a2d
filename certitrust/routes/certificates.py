from __future__ import annotations

import csv
import io

from flask import Blueprint, Response, abort, current_app, jsonify, request

from ..services.issuance import issue_batch
from ..services.legacy_import import import_legacy
from ..shared.errors import DuplicateNumberError, MissingTemplateError
from ..shared.recipients import coerce_recipients, parse_csv, parse_manual
from ..shared.time import parse_date
from ..shared.web import error, get_store, json_payload

bp = Blueprint("certificates", __name__, url_prefix="/admin/certificates")

EDITABLE_TEXT = (
    "recipient_name",
    "recipient_email",
    "recipient_role",
    "event_name",
    "custom_text",
)


def _recipients_from(payload: dict, language: str | None):
    if payload.get("recipients") is not None:
        return coerce_recipients(payload.get("recipients"), language)
    if payload.get("csv_text"):
        return parse_csv(str(payload["csv_text"]), language)
    return parse_manual(str(payload.get("manual_text") or ""), language)


@bp.get("")
def list_certificates():
    records = get_store().list_certificates(
        event=request.args.get("event"),
        search=request.args.get("q"),
    )
    return jsonify([record.to_dict() for record in records])


@bp.get("/events")
def list_events():
    return jsonify(get_store().unique_events())


@bp.post("/issue")
def issue():
    payload = json_payload()
    if payload is None:
        return error("Invalid request payload.")
    template_id = str(payload.get("template_id") or "").strip()
    if not template_id:
        return error("Please select a template.")
    if not str(payload.get("event_name") or "").strip():
        return error("Event name is required.")
    language = payload.get("language")
    try:
        recipients = _recipients_from(payload, language)
        if not recipients:
            return error("At least one recipient is required.")
        records = issue_batch(
            get_store(),
            template_id=template_id,
            recipients=recipients,
            event_name=payload.get("event_name"),
            issue_date=payload.get("issue_date"),
            language=language,
            custom_text=payload.get("custom_text"),
        )
    except MissingTemplateError as exc:
        return error(str(exc), 404)
    except DuplicateNumberError as exc:
        current_app.logger.warning("[issue] number conflict: %s", exc)
        return error(str(exc), 409)
    except ValueError as exc:
        return error(str(exc))
    return jsonify([record.to_dict() for record in records]), 201


@bp.post("/legacy-import")
def legacy_import():
    payload = json_payload()
    if payload is None:
        return error("Invalid request payload.")
    template_id = str(payload.get("template_id") or "").strip()
    if not template_id:
        return error("Please select a template for this data.")
    mapping = payload.get("mapping")
    if mapping is not None and not isinstance(mapping, dict):
        return error("Mapping must be an object.")
    try:
        result = import_legacy(
            get_store(),
            template_id=template_id,
            csv_text=str(payload.get("csv_text") or ""),
            mapping=mapping,
        )
    except MissingTemplateError as exc:
        return error(str(exc), 404)
    except DuplicateNumberError as exc:
        return error(str(exc), 409)
    except ValueError as exc:
        return error(str(exc))
    return (
        jsonify(
            {
                "imported": [record.to_dict() for record in result.imported],
                "skipped": result.skipped,
            }
        ),
        201,
    )


@bp.get("/export.csv")
def export_csv():
    records = get_store().list_certificates(
        event=request.args.get("event"),
        search=request.args.get("q"),
    )
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(
        [
            "certificate_number",
            "recipient_name",
            "recipient_email",
            "recipient_role",
            "event_name",
            "issue_date",
            "language",
            "status",
            "template_id",
        ]
    )
    for record in records:
        writer.writerow(
            [
                record.certificate_number,
                record.recipient_name,
                record.recipient_email or "",
                record.recipient_role or "",
                record.event_name,
                record.issue_date.isoformat() if record.issue_date else "",
                record.language,
                record.status,
                record.template_id,
            ]
        )

    resp = Response(output.getvalue(), mimetype="text/csv")
    resp.headers["Content-Disposition"] = "attachment; filename=certificates.csv"
    return resp


@bp.get("/<record_id>")
def get_certificate(record_id: str):
    record = get_store().get_certificate(record_id)
    if not record:
        abort(404)
    return jsonify(record.to_dict())


@bp.put("/<record_id>")
def update_certificate(record_id: str):
    store = get_store()
    record = store.get_certificate(record_id)
    if not record:
        abort(404)
    payload = json_payload()
    if payload is None:
        return error("Invalid request payload.")
    try:
        for name in EDITABLE_TEXT:
            if name in payload:
                value = str(payload.get(name) or "").strip()
                if name in ("recipient_name", "event_name") and not value:
                    raise ValueError(f"{name.replace('_', ' ').capitalize()} is required.")
                setattr(record, name, value or None)
        if "issue_date" in payload:
            issued_on = parse_date(payload.get("issue_date"))
            if issued_on is None:
                raise ValueError("Invalid issue date.")
            record.issue_date = issued_on
        if "template_id" in payload:
            template_id = str(payload.get("template_id") or "")
            if not store.get_template(template_id):
                raise ValueError("Unknown template.")
            record.template_id = template_id
        if "language" in payload:
            record.language = payload.get("language")
        if "status" in payload:
            record.status = payload.get("status")
        if "email_sent" in payload:
            record.email_sent = bool(payload.get("email_sent"))
    except ValueError as exc:
        store.session.rollback()
        return error(str(exc))
    store.save_certificate(record)
    current_app.logger.info("[certificate] updated number=%s", record.certificate_number)
    return jsonify(record.to_dict())


@bp.delete("/<record_id>")
def delete_certificate(record_id: str):
    if not get_store().delete_certificate(record_id):
        abort(404)
    return jsonify({"ok": True})
