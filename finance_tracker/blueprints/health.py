"""Health check blueprint."""

from typing import Any

from flask import Blueprint, jsonify

from finance_tracker.blueprints.common import get_repository

health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def health_check() -> Any:
    """Health check endpoint.

    Returns:
        JSON status with entity store reachability; 503 when the store is down
    """
    if not get_repository().is_available():
        return jsonify({"status": "unavailable", "database": "unreachable"}), 503
    return jsonify({"status": "ok", "database": "ok"})
