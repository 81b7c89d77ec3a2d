import logging
import os

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logging.getLogger("certitrust.config").warning(
            "[config] ignoring invalid %s=%r", name, raw
        )
        return default


def create_app():
    app = Flask(__name__)
    app.secret_key = os.getenv("SECRET_KEY", "dev")
    app.config["PREFERRED_URL_SCHEME"] = "https"

    DB_USER = os.getenv("DB_USER", "certitrust")
    DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
    DB_HOST = os.getenv("DB_HOST", "db")
    DB_NAME = os.getenv("DB_NAME", "certitrust")
    DATABASE_URL = os.getenv(
        "DATABASE_URL",
        f"postgresql+psycopg2://{DB_USER}:{DB_PASSWORD}@{DB_HOST}/{DB_NAME}",
    )

    app.config["SQLALCHEMY_DATABASE_URI"] = DATABASE_URL
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["MAX_CONTENT_LENGTH"] = 25 * 1024 * 1024

    app.config["PUBLIC_ORIGIN"] = os.getenv("PUBLIC_ORIGIN") or None
    app.config["PREVIEW_SCALE"] = _float_env("PREVIEW_SCALE", 0.5)
    app.config["EXPORT_SCALE"] = _float_env("EXPORT_SCALE", 2.0)
    app.config["EXPORT_JPEG_QUALITY"] = int(_float_env("EXPORT_JPEG_QUALITY", 85))
    app.config["FONT_DIR"] = os.getenv("FONT_DIR") or None

    app.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    db.init_app(app)
    from . import models  # noqa: F401

    @app.get("/health")
    def health():  # pragma: no cover - simple healthcheck
        return "OK", 200

    from .routes.templates import bp as templates_bp
    from .routes.certificates import bp as certificates_bp
    from .routes.settings import bp as settings_bp
    from .routes.verify import bp as verify_bp

    app.register_blueprint(templates_bp)
    app.register_blueprint(certificates_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(verify_bp)

    @app.errorhandler(413)
    def too_large(_error):
        return jsonify({"error": "Upload is too large."}), 413

    return app
