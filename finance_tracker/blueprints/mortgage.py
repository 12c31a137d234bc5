"""
Mortgage blueprint.

This module provides API endpoints for managing the user's mortgage and
reading its amortization schedule, summary and extra-payment impact.
"""

from typing import Any

from flask import Blueprint, jsonify

from finance_tracker.blueprints.common import (
    dump,
    dump_all,
    get_json_body,
    get_repository,
    query_float,
)
from finance_tracker.models.forms import MortgageForm, MortgageUpdate
from finance_tracker.services.projection_service import ProjectionService

mortgage_bp = Blueprint("mortgage", __name__, url_prefix="/api/mortgage")

# Preset used when no extra amount is requested
DEFAULT_EXTRA_MONTHLY = 100.0


def _no_mortgage() -> Any:
    return jsonify({"error": "No mortgage found"}), 404


@mortgage_bp.route("", methods=["GET"])
def get_mortgage() -> Any:
    """Get the user's mortgage."""
    mortgage = get_repository().get_mortgage()
    if mortgage is None:
        return _no_mortgage()
    return jsonify(dump(mortgage))


@mortgage_bp.route("", methods=["PUT"])
def set_mortgage() -> Any:
    """Create the user's mortgage, replacing any existing one.

    Rates are given as percentages (6.5 for 6.5%).
    """
    form = MortgageForm.model_validate(get_json_body())
    mortgage = get_repository().set_mortgage(form)
    return jsonify(dump(mortgage)), 201


@mortgage_bp.route("", methods=["PATCH"])
def update_mortgage() -> Any:
    """Update fields of the user's mortgage."""
    update = MortgageUpdate.model_validate(get_json_body())
    mortgage = get_repository().update_mortgage(update)
    return jsonify(dump(mortgage))


@mortgage_bp.route("", methods=["DELETE"])
def delete_mortgage() -> Any:
    """Delete the user's mortgage."""
    if not get_repository().delete_mortgage():
        return _no_mortgage()
    return "", 204


@mortgage_bp.route("/schedule", methods=["GET"])
def get_schedule() -> Any:
    """Get the amortization schedule.

    Query Args:
        extra_payment: Extra principal paid every month (default 0)

    Returns:
        JSON with the schedule entries and whether the loan fails to amortize
    """
    result = ProjectionService(get_repository()).mortgage_schedule(
        query_float("extra_payment")
    )
    if result is None:
        return _no_mortgage()

    schedule, non_convergent = result
    return jsonify({"entries": dump_all(schedule), "non_convergent": non_convergent})


@mortgage_bp.route("/summary", methods=["GET"])
def get_summary() -> Any:
    """Get the mortgage summary."""
    summary = ProjectionService(get_repository()).mortgage_summary()
    if summary is None:
        return _no_mortgage()
    return jsonify(dump(summary))


@mortgage_bp.route("/extra-payment-impact", methods=["GET"])
def get_extra_payment_impact() -> Any:
    """Compare the mortgage with and without an extra monthly payment.

    Query Args:
        extra_monthly: Extra principal paid every month (default 100)
    """
    scenario = ProjectionService(get_repository()).extra_payment_impact(
        query_float("extra_monthly", DEFAULT_EXTRA_MONTHLY)
    )
    if scenario is None:
        return _no_mortgage()
    return jsonify(dump(scenario))
