from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ..constants import YEAR_PLACEHOLDER
from ..shared.web import error, get_store, json_payload

bp = Blueprint("settings", __name__, url_prefix="/admin/settings")

SETTING_FIELDS = (
    "organization_name",
    "default_language",
    "prefix_participant",
    "prefix_speaker",
    "prefix_instructor",
)


@bp.get("")
def get_settings():
    config = get_store().get_config()
    data = config.to_dict()
    data["year_placeholder"] = YEAR_PLACEHOLDER
    return jsonify(data)


@bp.post("")
def save_settings():
    payload = json_payload()
    if payload is None:
        return error("Invalid request payload.")
    changes = {}
    for name in SETTING_FIELDS:
        if name not in payload:
            continue
        value = str(payload.get(name) or "").strip()
        if not value:
            return error(f"{name.replace('_', ' ').capitalize()} cannot be empty.")
        changes[name] = value
    store = get_store()
    try:
        config = store.save_config(**changes)
    except ValueError as exc:
        store.session.rollback()
        return error(str(exc))
    current_app.logger.info("[settings] updated %s", ", ".join(sorted(changes)) or "nothing")
    return jsonify(config.to_dict())
