# backend/lottodesk/__init__.py
import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import LottoDeskError
from .extensions import db, migrate


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(LottoDeskError)
    def handle_lottodesk_error(exc: LottoDeskError):
        if exc.status_code >= 500:
            app.logger.error("%s: %s", type(exc).__name__, exc)
        else:
            app.logger.info("%s %s rejected: %s", request.method, request.path, exc)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description, "kind": "http"}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        db.session.rollback()
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error", "kind": "internal"}), 500


def create_app(config_class=Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.boxes import boxes_bp
    from .routes.activated_books import activated_books_bp
    from .routes.daily_entries import daily_entries_bp
    from .routes.lottery_reports import lottery_reports_bp
    from .routes.pos_reports import pos_reports_bp
    from .routes.players import players_bp
    from .routes.summaries import summaries_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(boxes_bp)
    app.register_blueprint(activated_books_bp)
    app.register_blueprint(daily_entries_bp)
    app.register_blueprint(lottery_reports_bp)
    app.register_blueprint(pos_reports_bp)
    app.register_blueprint(players_bp)
    app.register_blueprint(summaries_bp)

    register_error_handlers(app)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:4173",
            "http://127.0.0.1:4173",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
