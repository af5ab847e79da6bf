# tenant_billing/__init__.py
from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional

from flask import Flask, jsonify

from .errors import register_error_handlers
from .extensions import db, migrate


# --- Logging -----------------------------------------------------------------
class JsonFormatter(logging.Formatter):
    """One JSON object per line; the message is escaped so quotes in errors survive."""

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "msg": record.getMessage(),
            "name": record.name,
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _configure_logging(app: Flask) -> None:
    """JSON logs to stdout (the scheduler/host collects stdout)."""
    level = app.config.get("LOG_LEVEL", "INFO")
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        root.addHandler(handler)


def _load_config(app: Flask, config_object: Optional[str | Any]) -> None:
    if config_object is None:
        config_object = os.getenv("CONFIG_CLASS", "tenant_billing.config.Config")

    if isinstance(config_object, str):
        # load "package.ClassName"
        module, _, cls = config_object.rpartition(".")
        if module:
            config_object = getattr(__import__(module, fromlist=[cls]), cls)
    app.config.from_object(config_object)


def _check_required(app: Flask) -> None:
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise ValueError("DATABASE_URL environment variable must be set")
    if not app.config.get("STRIPE_SECRET_KEY"):
        raise ValueError("STRIPE_SECRET_KEY environment variable must be set")
    from .billing.eligibility import validate_billing_rules

    validate_billing_rules(app.config.get("BILLING_CLOCK"), app.config.get("BILLING_CYCLE_DAYS"))


def _register_blueprints(app: Flask) -> None:
    from .routes.billing import bp as billing_bp
    from .routes.health import bp as health_bp

    prefix = app.config["API_PREFIX"]
    app.register_blueprint(health_bp, url_prefix=prefix)
    app.register_blueprint(billing_bp, url_prefix=prefix)


def _register_cli(app: Flask) -> None:
    from .cli import billing_cli

    app.cli.add_command(billing_cli)


# --- Application Factory ------------------------------------------------------
def create_app(config_object: Optional[str | Any] = None) -> Flask:
    """
    Standard Flask application factory.

    `config_object` may be:
      - a config object
      - dotted path to a config class (e.g., "tenant_billing.config.TestingConfig")
      - None (then we'll try CONFIG_CLASS env or default to tenant_billing.config.Config)
    """
    app = Flask(__name__)

    _load_config(app, config_object)
    _check_required(app)
    app.config.setdefault("API_PREFIX", "/api")

    _configure_logging(app)

    # models must be imported before migrate/create_all see the metadata
    from . import models  # noqa: F401

    db.init_app(app)
    migrate.init_app(app, db)

    _register_blueprints(app)
    _register_cli(app)
    register_error_handlers(app)

    @app.get("/")
    def root():
        return jsonify({"service": "tenant-billing", "message": "See /api/health"}), 200

    return app
