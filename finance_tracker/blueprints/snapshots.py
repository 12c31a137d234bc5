"""
Snapshot blueprint.

This module provides API endpoints for exporting the stored records to
snapshot storage and restoring them from it.
"""

from typing import Any

from flask import Blueprint, jsonify

from finance_tracker.blueprints.common import get_repository
from finance_tracker.services.snapshot_service import SnapshotService
from finance_tracker.storage.factory import get_snapshot_storage

snapshots_bp = Blueprint("snapshots", __name__, url_prefix="/api/snapshots")


def _service() -> SnapshotService:
    return SnapshotService(get_repository(), get_snapshot_storage())


@snapshots_bp.route("", methods=["GET"])
def list_snapshots() -> Any:
    """List stored snapshots."""
    return jsonify({"snapshots": _service().list_snapshots()})


@snapshots_bp.route("/<name>", methods=["POST"])
def export_snapshot(name: str) -> Any:
    """Export all records under a snapshot name."""
    snapshot = _service().export_snapshot(name)
    return (
        jsonify(
            {
                "name": name,
                "has_mortgage": snapshot.mortgage is not None,
                "accounts": len(snapshot.accounts),
                "contributions": len(snapshot.contributions),
            }
        ),
        201,
    )


@snapshots_bp.route("/<name>/restore", methods=["POST"])
def import_snapshot(name: str) -> Any:
    """Replace all records with a stored snapshot."""
    snapshot = _service().import_snapshot(name)
    return jsonify(
        {
            "name": name,
            "has_mortgage": snapshot.mortgage is not None,
            "accounts": len(snapshot.accounts),
            "contributions": len(snapshot.contributions),
        }
    )


@snapshots_bp.route("/<name>", methods=["DELETE"])
def delete_snapshot(name: str) -> Any:
    """Delete a stored snapshot."""
    if not _service().delete_snapshot(name):
        return jsonify({"error": f"Snapshot not found: {name}"}), 404
    return "", 204
