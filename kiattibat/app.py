import logging
import os

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from . import models  # noqa: E402,F401  registers tables on db.metadata


def _configure_logging(app: Flask) -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger("kiattibat").setLevel(level)


def create_app():
    app = Flask(__name__, template_folder="templates")
    app.secret_key = os.getenv("SECRET_KEY", "dev")

    DB_USER = os.getenv("DB_USER", "kiattibat")
    DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
    DB_HOST = os.getenv("DB_HOST", "db")
    DB_NAME = os.getenv("DB_NAME", "kiattibat")
    DATABASE_URL = os.getenv(
        "DATABASE_URL",
        f"postgresql+psycopg2://{DB_USER}:{DB_PASSWORD}@{DB_HOST}/{DB_NAME}",
    )

    app.config["SQLALCHEMY_DATABASE_URI"] = DATABASE_URL
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["MAX_CONTENT_LENGTH"] = 25 * 1024 * 1024
    app.config["SITE_ROOT"] = os.getenv("SITE_ROOT", "/srv")
    app.config["CERT_VERIFY_BASE_URL"] = os.getenv(
        "CERT_VERIFY_BASE_URL", "http://localhost:5000"
    )

    _configure_logging(app)
    db.init_app(app)

    from .routes.certificate_templates import bp as certificate_templates_bp

    app.register_blueprint(certificate_templates_bp)

    @app.get("/health")
    def health():  # pragma: no cover - simple healthcheck
        return jsonify({"status": "ok"})

    return app
