from __future__ import annotations

import json

from flask import Blueprint, abort, current_app, jsonify, request

from ..models import Template
from ..services.certificates_preview import generate_preview
from ..shared.backgrounds import decode_data_uri, load_background
from ..shared.errors import ImageDecodeError
from ..shared.template_fields import get_default_fields, sanitize_fields
from ..shared.web import error, get_store, json_payload, public_origin

bp = Blueprint("templates", __name__, url_prefix="/admin/templates")


def _read_submission() -> tuple[dict, bytes | None]:
    """Collect name/fields/background from multipart or JSON bodies."""
    if request.files or request.form:
        values = dict(request.form)
        raw_fields = values.pop("fields", None)
        if raw_fields:
            try:
                values["fields"] = json.loads(raw_fields)
            except ValueError:
                raise ValueError("Fields must be valid JSON.")
        upload = request.files.get("background")
        background = upload.read() if upload and upload.filename else None
        return values, background
    payload = json_payload()
    if payload is None:
        raise ValueError("Invalid request payload.")
    background = payload.get("background")
    return payload, decode_data_uri(background) if background else None


def _get_or_404(template_id: str) -> Template:
    template = get_store().get_template(template_id)
    if not template:
        abort(404)
    return template


@bp.get("")
def list_templates():
    templates = get_store().list_templates()
    return jsonify([template.to_dict() for template in templates])


@bp.post("")
def create_template():
    try:
        values, raw = _read_submission()
        name = str(values.get("name") or "").strip()
        if not name:
            return error("Template name is required.")
        if raw is None:
            return error("Background image is required.")
        background = load_background(raw)
        fields = sanitize_fields(values.get("fields")) or get_default_fields()
    except (ImageDecodeError, ValueError) as exc:
        return error(str(exc))

    template = Template(
        name=name,
        background_image=background.data,
        background_mime=background.mime,
        width=background.width,
        height=background.height,
        fields=fields,
    )
    get_store().save_template(template)
    current_app.logger.info(
        "[template] created id=%s name=%r size=%sx%s fields=%s",
        template.id,
        template.name,
        template.width,
        template.height,
        len(fields),
    )
    return jsonify(template.to_dict()), 201


@bp.get("/<template_id>")
def get_template(template_id: str):
    template = _get_or_404(template_id)
    return jsonify(template.to_dict(include_background=True))


@bp.put("/<template_id>")
def update_template(template_id: str):
    template = _get_or_404(template_id)
    try:
        values, raw = _read_submission()
        if "name" in values:
            name = str(values.get("name") or "").strip()
            if not name:
                return error("Template name is required.")
            template.name = name
        if "fields" in values:
            template.fields = sanitize_fields(values.get("fields"))
        if raw is not None:
            background = load_background(raw)
            template.background_image = background.data
            template.background_mime = background.mime
            template.width = background.width
            template.height = background.height
    except (ImageDecodeError, ValueError) as exc:
        return error(str(exc))
    get_store().save_template(template)
    current_app.logger.info("[template] updated id=%s", template.id)
    return jsonify(template.to_dict())


@bp.delete("/<template_id>")
def delete_template(template_id: str):
    if not get_store().delete_template(template_id):
        abort(404)
    current_app.logger.info("[template] deleted id=%s", template_id)
    return jsonify({"ok": True})


@bp.post("/<template_id>/preview")
def preview_template(template_id: str):
    template = _get_or_404(template_id)
    payload = json_payload()
    if payload is None:
        return error("Invalid request payload.")
    data = payload.get("data")
    if data is not None and not isinstance(data, dict):
        return error("Preview data must be an object.")
    request_id = payload.get("request_id")
    try:
        request_id = int(request_id) if request_id is not None else None
        preview = generate_preview(
            template,
            data=data,
            fields=payload.get("fields"),
            scale=payload.get("scale"),
            view=str(payload.get("view") or "") or None,
            request_id=request_id,
            origin=public_origin(),
        )
    except (ImageDecodeError, ValueError, TypeError) as exc:
        return error(str(exc))
    except Exception:
        current_app.logger.exception("Certificate preview failed")
        return error("Failed to generate preview.", 500)
    if preview is None:
        return jsonify({"image": None, "warnings": [], "stale": True})
    return jsonify(
        {
            "image": f"data:image/png;base64,{preview.image_base64}",
            "warnings": list(preview.warnings),
            "width": preview.size[0],
            "height": preview.size[1],
            "stale": False,
        }
    )
