"""
Portfolio aggregation across retirement accounts.

This module combines per-account projections into a single time series and
builds the present-state retirement summary, including the estimated monthly
income at retirement.
"""

from typing import List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, Field

from .records import Contribution, RetirementAccount
from .retirement_projection import RetirementProjection, project_account

# 4% withdrawal rule
WITHDRAWAL_RATE = 0.04

# Share of withdrawals kept after a flat 22% tax
AFTER_TAX_SHARE = 0.78

PROJECTION_FIELDS = (
    "starting_balance",
    "contributions",
    "employer_match",
    "growth",
    "ending_balance",
)


class RetirementSummary(BaseModel):
    """Present-state summary of all retirement accounts."""

    total_balance: float = Field(..., description="Sum of active account balances")
    total_contributed: float = Field(..., description="Employee contributions to date")
    total_employer_match: float = Field(..., description="Employer contributions to date")
    total_growth: float = Field(..., description="Balance not explained by contributions")
    account_count: int = Field(..., ge=0, description="Number of active accounts")
    projected_balance_at_retirement: Optional[float] = Field(
        None, description="Combined ending balance at retirement age"
    )
    years_to_retirement: Optional[int] = Field(None, description="Years until retirement")
    monthly_income_at_retirement: Optional[float] = Field(
        None, description="After-tax monthly income under the withdrawal rule"
    )


def estimate_monthly_income(balance: float) -> float:
    """Monthly after-tax income from a balance under the 4% withdrawal rule."""
    return balance * WITHDRAWAL_RATE * AFTER_TAX_SHARE / 12


def combine_projections(
    accounts: Sequence[RetirementAccount], years: int, current_age: Optional[int] = None
) -> List[RetirementProjection]:
    """
    Combine the projections of all active accounts year by year.

    Args:
        accounts: Retirement account records
        years: Projection horizon in years
        current_age: Age today, used to label each year

    Returns:
        ``years + 1`` summed projections, or an empty list when no account
        is active. Inactive-only portfolios therefore give no rows rather
        than ``years + 1`` rows of zeros, and the retirement summary reports
        no projected balance for them instead of zero.
    """
    active_accounts = [account for account in accounts if account.is_active]
    if not active_accounts:
        return []

    per_account = [
        project_account(account, years, current_age) for account in active_accounts
    ]

    # Shape: (accounts, years + 1, fields)
    values = np.array(
        [
            [[getattr(row, name) for name in PROJECTION_FIELDS] for row in projections]
            for projections in per_account
        ],
        dtype=float,
    )
    totals = values.sum(axis=0)

    return [
        RetirementProjection(
            year=year,
            age=current_age + year if current_age is not None else None,
            **{name: float(totals[year, i]) for i, name in enumerate(PROJECTION_FIELDS)},
        )
        for year in range(years + 1)
    ]


def summarize_portfolio(
    accounts: Sequence[RetirementAccount],
    contributions: Sequence[Contribution],
    retirement_age: Optional[int] = None,
    current_age: Optional[int] = None,
) -> RetirementSummary:
    """
    Summarize balances to date and the projection at retirement.

    Args:
        accounts: Retirement account records
        contributions: Contribution ledger across all accounts
        retirement_age: Target retirement age
        current_age: Age today

    Returns:
        Retirement summary; projection fields are None unless both ages are
        given and retirement is in the future
    """
    active_accounts = [account for account in accounts if account.is_active]

    total_balance = sum(account.current_balance for account in active_accounts)
    total_contributed = sum(c.employee_amount for c in contributions)
    total_employer_match = sum(c.employer_amount for c in contributions)

    projected_balance = None
    years_to_retirement = None
    monthly_income = None

    if (
        current_age is not None
        and retirement_age is not None
        and retirement_age > current_age
    ):
        years_to_retirement = retirement_age - current_age
        projections = combine_projections(accounts, years_to_retirement, current_age)
        if projections:
            projected_balance = projections[-1].ending_balance
            monthly_income = estimate_monthly_income(projected_balance)

    return RetirementSummary(
        total_balance=total_balance,
        total_contributed=total_contributed,
        total_employer_match=total_employer_match,
        total_growth=total_balance - total_contributed - total_employer_match,
        account_count=len(active_accounts),
        projected_balance_at_retirement=projected_balance,
        years_to_retirement=years_to_retirement,
        monthly_income_at_retirement=monthly_income,
    )
