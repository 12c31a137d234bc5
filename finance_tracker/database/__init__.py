"""Database models and configuration for the finance tracker."""

from .base import (
    Base,
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
    reset_engine,
)
from .models import ContributionRow, MortgageRow, RetirementAccountRow

__all__ = [
    "Base",
    "create_tables",
    "drop_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    "reset_engine",
    "MortgageRow",
    "RetirementAccountRow",
    "ContributionRow",
]
