from __future__ import annotations

from flask import current_app, jsonify, request

from ..app import db
from .fields import normalize_origin
from .store import SqlStore


def get_store() -> SqlStore:
    return SqlStore(db.session)


def public_origin() -> str:
    """Origin used inside verification codes.

    ``PUBLIC_ORIGIN`` wins, then the requesting host, then the demo origin.
    """
    configured = current_app.config.get("PUBLIC_ORIGIN")
    if configured:
        return normalize_origin(configured)
    try:
        host = request.host_url
    except RuntimeError:
        host = None
    return normalize_origin(host)


def json_payload() -> dict | None:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else None


def error(message: str, status: int = 400):
    return jsonify({"error": message}), status
