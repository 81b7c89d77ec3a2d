from __future__ import annotations

from io import BytesIO

from flask import Blueprint, current_app, jsonify, request, send_file

from ..services.certificates_preview import clamp_scale
from ..services.verification import (
    STATUS_NOT_FOUND,
    download_filename,
    record_pdf,
    render_record,
    verify_certificate,
)
from ..shared.errors import ImageDecodeError, MissingTemplateError
from ..shared.web import get_store, public_origin

bp = Blueprint("verify", __name__, url_prefix="/verify")


def _failure(result):
    status = 404 if result.status == STATUS_NOT_FOUND else 422
    body = {"ok": False, "reason": result.status}
    if result.record is not None:
        body["certificate_number"] = result.record.certificate_number
    return jsonify(body), status


@bp.get("/<path:number>/image.png")
def certificate_image(number: str):
    store = get_store()
    result = verify_certificate(store, number)
    if not result.ok:
        return _failure(result)
    scale = clamp_scale(
        request.args.get("scale"), current_app.config.get("PREVIEW_SCALE", 0.5)
    )
    try:
        surface = render_record(
            store,
            result.record,
            scale,
            origin=public_origin(),
            font_dir=current_app.config.get("FONT_DIR"),
        )
    except MissingTemplateError:
        return jsonify({"ok": False, "reason": "template_missing"}), 422
    except ImageDecodeError as exc:
        current_app.logger.error("[verify] background decode failed: %s", exc)
        return jsonify({"ok": False, "reason": "render_failed"}), 500
    return send_file(BytesIO(surface.to_png()), mimetype="image/png")


@bp.get("/<path:number>/certificate.pdf")
def certificate_pdf(number: str):
    store = get_store()
    result = verify_certificate(store, number)
    if not result.ok:
        return _failure(result)
    scale = clamp_scale(None, current_app.config.get("EXPORT_SCALE", 2.0))
    try:
        pdf = record_pdf(
            store,
            result.record,
            scale,
            quality=current_app.config.get("EXPORT_JPEG_QUALITY", 85),
            origin=public_origin(),
            font_dir=current_app.config.get("FONT_DIR"),
        )
    except MissingTemplateError:
        return jsonify({"ok": False, "reason": "template_missing"}), 422
    except ImageDecodeError as exc:
        current_app.logger.error("[verify] background decode failed: %s", exc)
        return jsonify({"ok": False, "reason": "render_failed"}), 500
    current_app.logger.info("[verify] pdf download number=%s", result.record.certificate_number)
    return send_file(
        BytesIO(pdf),
        as_attachment=True,
        download_name=download_filename(result.record, "pdf"),
        mimetype="application/pdf",
    )


@bp.get("/<path:number>")
def verify(number: str):
    result = verify_certificate(get_store(), number)
    if not result.ok:
        return _failure(result)
    return jsonify(
        {
            "ok": True,
            "status": result.status,
            "certificate": result.record.to_dict(),
            "template": result.template.to_dict(),
        }
    )
