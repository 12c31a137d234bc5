"""
Retirement blueprint.

This module provides API endpoints for retirement accounts, the contribution
ledger, growth projections and the portfolio summary.
"""

from typing import Any, Optional

from flask import Blueprint, jsonify

from finance_tracker.blueprints.common import (
    dump,
    dump_all,
    get_json_body,
    get_repository,
    query_int,
)
from finance_tracker.config import MAX_AGE, MAX_PROJECTION_YEARS, get_global_settings
from finance_tracker.models.forms import (
    ContributionForm,
    ContributionUpdate,
    RetirementAccountForm,
    RetirementAccountUpdate,
)
from finance_tracker.repository import RecordNotFoundError
from finance_tracker.services.projection_service import ProjectionService

retirement_bp = Blueprint("retirement", __name__, url_prefix="/api/retirement")


def _projection_years(current_age: Optional[int]) -> int:
    """Horizon from the query, else years to retirement, else the configured default."""
    settings = get_global_settings()
    years = query_int("years", maximum=MAX_PROJECTION_YEARS)
    if years is not None:
        return years
    retirement_age = query_int(
        "retirement_age", settings.default_retirement_age, maximum=MAX_AGE
    )
    if current_age is not None and retirement_age > current_age:
        return retirement_age - current_age
    return settings.default_projection_years


# Accounts


@retirement_bp.route("/accounts", methods=["GET"])
def list_accounts() -> Any:
    """List all retirement accounts."""
    return jsonify(dump_all(get_repository().list_accounts()))


@retirement_bp.route("/accounts", methods=["POST"])
def add_account() -> Any:
    """Add a retirement account.

    The expected return is given as a percentage (7 for 7%).
    """
    form = RetirementAccountForm.model_validate(get_json_body())
    account = get_repository().add_account(form)
    return jsonify(dump(account)), 201


@retirement_bp.route("/accounts/<account_id>", methods=["GET"])
def get_account(account_id: str) -> Any:
    """Get a retirement account."""
    account = get_repository().get_account(account_id)
    if account is None:
        raise RecordNotFoundError(f"Account {account_id} not found")
    return jsonify(dump(account))


@retirement_bp.route("/accounts/<account_id>", methods=["PATCH"])
def update_account(account_id: str) -> Any:
    """Update fields of a retirement account."""
    update = RetirementAccountUpdate.model_validate(get_json_body())
    account = get_repository().update_account(account_id, update)
    return jsonify(dump(account))


@retirement_bp.route("/accounts/<account_id>", methods=["DELETE"])
def delete_account(account_id: str) -> Any:
    """Delete a retirement account and its contributions."""
    get_repository().delete_account(account_id)
    return "", 204


# Contributions


@retirement_bp.route("/accounts/<account_id>/contributions", methods=["GET"])
def list_account_contributions(account_id: str) -> Any:
    """List an account's contributions, newest first."""
    repository = get_repository()
    if repository.get_account(account_id) is None:
        raise RecordNotFoundError(f"Account {account_id} not found")
    return jsonify(dump_all(repository.contributions_for_account(account_id)))


@retirement_bp.route("/contributions", methods=["POST"])
def add_contribution() -> Any:
    """Record a contribution; the account balance becomes balance_after."""
    form = ContributionForm.model_validate(get_json_body())
    contribution = get_repository().add_contribution(form)
    return jsonify(dump(contribution)), 201


@retirement_bp.route("/contributions/<contribution_id>", methods=["PATCH"])
def update_contribution(contribution_id: str) -> Any:
    """Update fields of a contribution."""
    update = ContributionUpdate.model_validate(get_json_body())
    contribution = get_repository().update_contribution(contribution_id, update)
    return jsonify(dump(contribution))


@retirement_bp.route("/contributions/<contribution_id>", methods=["DELETE"])
def delete_contribution(contribution_id: str) -> Any:
    """Delete a contribution."""
    get_repository().delete_contribution(contribution_id)
    return "", 204


# Projections


@retirement_bp.route("/accounts/<account_id>/projections", methods=["GET"])
def get_account_projections(account_id: str) -> Any:
    """Project a single account.

    Query Args:
        years: Projection horizon
        current_age: Age today
        retirement_age: Used for the horizon when years is omitted
    """
    current_age = query_int("current_age", maximum=MAX_AGE)
    projections = ProjectionService(get_repository()).account_projections(
        account_id, _projection_years(current_age), current_age
    )
    return jsonify(dump_all(projections))


@retirement_bp.route("/projections", methods=["GET"])
def get_combined_projections() -> Any:
    """Project all active accounts combined."""
    current_age = query_int("current_age", maximum=MAX_AGE)
    projections = ProjectionService(get_repository()).combined_projections(
        _projection_years(current_age), current_age
    )
    return jsonify(dump_all(projections))


@retirement_bp.route("/summary", methods=["GET"])
def get_summary() -> Any:
    """Summarize all retirement accounts.

    Query Args:
        retirement_age: Target retirement age (defaults to the configured age)
        current_age: Age today; without it no retirement projection is made
    """
    settings = get_global_settings()
    summary = ProjectionService(get_repository()).retirement_summary(
        retirement_age=query_int(
            "retirement_age", settings.default_retirement_age, maximum=MAX_AGE
        ),
        current_age=query_int("current_age", maximum=MAX_AGE),
    )
    return jsonify(dump(summary))
