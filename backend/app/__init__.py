"""
app/__init__.py — Flask application factory.

Pattern: create_app(config_name) creates and returns a configured Flask app.
         Nothing is initialised at import time, so tests can build isolated
         app instances.

Responsibilities:
  1. Load configuration from config_by_name[config_name]
  2. Configure logging from LOG_LEVEL
  3. Initialise extensions (SQLAlchemy, Marshmallow) via init_app()
  4. Register the route blueprints
  5. Register global error handlers (AppError, ValidationError,
     HTTPException, ConfigurationError, Exception → envelope)
  6. Register CORS headers for the browser client (credentials allowed so the
     refresh cookie is sent)
  7. Register the `flask init-db` command

Note on model imports:
  All model modules are imported inside create_app() so that SQLAlchemy's
  metadata is complete before db.create_all() runs.
"""

from __future__ import annotations

import logging
import traceback

import click
from flask import Flask, jsonify, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from backend.config import config_by_name, validate_production_config

PACKAGE_LOGGER = "backend"


# ── Application factory ────────────────────────────────────────────────────

def create_app(config_name: str = "development") -> Flask:
    """
    Creates and returns a configured Flask application instance.

    Args:
        config_name: One of "development", "testing", "production".
                     Defaults to "development".
    """
    app = Flask(__name__)

    # ── Configuration ──────────────────────────────────────────────────────
    config_class = config_by_name.get(config_name, config_by_name["development"])
    app.config.from_object(config_class)

    if config_name == "production":
        validate_production_config(app)  # raises ValueError if misconfigured

    _configure_logging(app)

    # ── Extensions ─────────────────────────────────────────────────────────
    # Import here (not at module top) to avoid circular imports.
    from backend.app.extensions import db, ma
    db.init_app(app)
    ma.init_app(app)

    # ── Model registration ─────────────────────────────────────────────────
    with app.app_context():
        from backend.app.models import (  # noqa: F401
            album,
            album_like,
            user,
            user_following,
        )

    _register_blueprints(app)
    _register_error_handlers(app)
    _register_cors(app)
    _register_commands(app)

    return app


def _configure_logging(app: Flask) -> None:
    """
    Module loggers (logging.getLogger(__name__)) live under the "backend"
    package logger; one stderr handler is attached there at LOG_LEVEL.
    The root logger is left alone. Building a second app reuses the handler.
    """
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s"
        ))
        package_logger.addHandler(handler)
    app.logger.setLevel(level)


def _register_blueprints(app: Flask) -> None:
    """
    Paths keep the casing the browser client already calls
    (Auth/Login, api/Album/GetAll, ...).
    """
    from backend.app.routes.albums import albums_bp
    from backend.app.routes.auth import auth_bp
    from backend.app.routes.profiles import profiles_bp

    app.register_blueprint(auth_bp,     url_prefix="/Auth")
    app.register_blueprint(albums_bp,   url_prefix="/api/Album")
    app.register_blueprint(profiles_bp, url_prefix="/api/Profile")


def _failure(code: str, message: str, field: str | None = None) -> dict:
    body = {
        "success":       False,
        "returnMessage": message,
        "data":          None,
        "code":          code,
    }
    if field is not None:
        body["field"] = field
    return body


def _register_error_handlers(app: Flask) -> None:
    """
    Registers global error handlers. Every error leaves as the envelope
    {"success": false, "returnMessage": ..., "data": null, "code": ...}.

    Handlers:
      AppError           → its own code and HTTP status
      ValidationError    → first marshmallow error as MISSING_FIELD /
                           INVALID_FIELD (400)
      HTTPException      → werkzeug status (404 unknown route, 405, ...)
      ConfigurationError → CONFIGURATION_ERROR (500), logged
      Exception          → INTERNAL_ERROR (500), traceback logged

    Stack traces never leave the server.
    """
    from backend.app.errors import AppError, ConfigurationError, ErrorCode

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """
        Returns the FIRST field error only. Marshmallow's messages dict looks
        like {"email": ["Not a valid email address."]}.
        """
        messages = error.messages

        field = None
        message = "Invalid input."
        code = ErrorCode.INVALID_FIELD

        if isinstance(messages, dict):
            for field_name, field_errors in messages.items():
                field = field_name if field_name != "_schema" else None
                if isinstance(field_errors, list):
                    message = field_errors[0] if field_errors else "Invalid value."
                else:
                    message = str(field_errors)
                break
        elif isinstance(messages, list) and messages:
            message = messages[0]

        if str(message).startswith("Missing data for required field"):
            code = ErrorCode.MISSING_FIELD

        return jsonify(_failure(code, str(message), field)), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        return jsonify(_failure(error.name.upper().replace(" ", "_"), error.description)), error.code

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(error: ConfigurationError):
        app.logger.error("Configuration error: %s", error)
        return jsonify(_failure(
            ErrorCode.CONFIGURATION_ERROR,
            "The server is misconfigured. Please contact the administrator.",
        )), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        app.logger.error(
            "Unhandled exception: %s\n%s",
            str(error),
            traceback.format_exc(),
        )
        return jsonify(_failure(
            ErrorCode.INTERNAL_ERROR,
            "An unexpected error occurred. Please try again later.",
        )), 500


def _register_cors(app: Flask) -> None:
    """
    Adds CORS headers for the browser client.

    Origins listed in CORS_ORIGINS are allowed; in DEBUG/TESTING any origin
    is reflected. Credentials are allowed so the refresh cookie is sent with
    POST /Auth/RefreshToken.
    """
    allowed = {
        origin.strip()
        for origin in str(app.config.get("CORS_ORIGINS", "")).split(",")
        if origin.strip()
    }

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allow_any = bool(app.config.get("DEBUG") or app.config.get("TESTING"))

        if origin and (allow_any or origin in allowed):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"

        return response


def _register_commands(app: Flask) -> None:
    from backend.app.extensions import db

    @app.cli.command("init-db")
    def init_db():
        """Create all tables from model metadata."""
        db.create_all()
        click.echo("Database tables created.")
