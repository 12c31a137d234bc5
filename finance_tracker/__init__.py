"""Finance Tracker Flask Application Factory."""

import logging
from typing import Any

from flask import Flask, current_app, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from finance_tracker.config import get_global_settings
from finance_tracker.database.base import create_tables, get_session_factory
from finance_tracker.repository import FinanceRepository, RecordNotFoundError, RepositoryError
from finance_tracker.storage.base import StorageError, StorageNotFoundError


def create_app() -> Flask:
    """Create and configure the Flask application.

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["DATABASE_URL"] = settings.db_url
    app.config["ENV"] = settings.app_env
    app.config["DEBUG"] = settings.app_env == "development"

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(settings.log_level)

    # Entity store
    create_tables()
    app.extensions["finance_repository"] = FinanceRepository(get_session_factory())

    _register_error_handlers(app)

    # Register blueprints
    from finance_tracker.blueprints.health import health_bp
    from finance_tracker.blueprints.mortgage import mortgage_bp
    from finance_tracker.blueprints.retirement import retirement_bp
    from finance_tracker.blueprints.snapshots import snapshots_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(mortgage_bp)
    app.register_blueprint(retirement_bp)
    app.register_blueprint(snapshots_bp)

    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError) -> Any:
        return (
            jsonify(
                {
                    "error": "Invalid input",
                    "details": e.errors(include_url=False, include_context=False),
                }
            ),
            400,
        )

    @app.errorhandler(RecordNotFoundError)
    @app.errorhandler(StorageNotFoundError)
    def handle_not_found(e: Exception) -> Any:
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(RepositoryError)
    @app.errorhandler(StorageError)
    def handle_conflict(e: Exception) -> Any:
        current_app.logger.error(f"Request failed: {str(e)}")
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException) -> Any:
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception) -> Any:
        current_app.logger.error(f"Unhandled error: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500
