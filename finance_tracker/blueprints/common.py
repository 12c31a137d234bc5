"""Helpers shared by the API blueprints."""

import math
from typing import Any, Optional, Sequence

from flask import current_app, request
from pydantic import BaseModel
from werkzeug.exceptions import BadRequest

from finance_tracker.repository import FinanceRepository


def get_repository() -> FinanceRepository:
    """Repository attached to the running application."""
    return current_app.extensions["finance_repository"]


def get_json_body() -> Any:
    """Request JSON body, or an empty object if none was sent."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def query_int(
    name: str,
    default: Optional[int] = None,
    minimum: int = 0,
    maximum: Optional[int] = None,
) -> Optional[int]:
    """Parse a bounded integer query parameter."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise BadRequest(f"{name} must be an integer")
    if value < minimum:
        raise BadRequest(f"{name} must be at least {minimum}")
    if maximum is not None and value > maximum:
        raise BadRequest(f"{name} must be at most {maximum}")
    return value


def query_float(name: str, default: float = 0.0) -> float:
    """Parse a non-negative float query parameter."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise BadRequest(f"{name} must be a number")
    if not math.isfinite(value) or value < 0:
        raise BadRequest(f"{name} must be a finite, non-negative number")
    return value


def dump(model: BaseModel) -> Any:
    return model.model_dump(mode="json")


def dump_all(models: Sequence[BaseModel]) -> Any:
    return [model.model_dump(mode="json") for model in models]
