"""
Retirement account growth projection.

This module simulates year-by-year balance growth for a single retirement
account. Contributions and employer match are held constant every year and
land before growth accrues, so each year's growth is earned on the starting
balance plus that year's deposits.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .records import ContributionFrequency, RetirementAccount, percent_to_fraction

# Bi-weekly pay schedule
PAY_PERIODS_PER_YEAR = 26

CONTRIBUTIONS_PER_YEAR: Dict[str, int] = {
    "per-paycheck": PAY_PERIODS_PER_YEAR,
    "monthly": 12,
    "yearly": 1,
}


class RetirementProjection(BaseModel):
    """Projected balance flows for one year."""

    year: int = Field(..., ge=0, description="Years from now (0 is the current state)")
    age: Optional[int] = Field(None, description="Age during this year")
    starting_balance: float = Field(..., description="Balance at start of year")
    contributions: float = Field(default=0, description="Employee contributions")
    employer_match: float = Field(default=0, description="Employer match")
    growth: float = Field(default=0, description="Investment growth")
    ending_balance: float = Field(..., description="Balance at end of year")


def annualize_contribution(amount: float, frequency: ContributionFrequency) -> float:
    """
    Convert a contribution amount to its annual total.

    Args:
        amount: Contribution per period
        frequency: Contribution frequency

    Returns:
        Annual contribution
    """
    return amount * CONTRIBUTIONS_PER_YEAR[frequency]


def calculate_annual_employer_match(account: RetirementAccount) -> float:
    """Annual employer match implied by the account's contribution settings."""
    annual_contribution = annualize_contribution(
        account.contribution_amount, account.contribution_frequency
    )
    return annual_contribution * percent_to_fraction(account.employer_match_percentage or 0)


def project_account(
    account: RetirementAccount, years: int, current_age: Optional[int] = None
) -> List[RetirementProjection]:
    """
    Project an account's balance over a number of years.

    Args:
        account: Retirement account record
        years: Projection horizon in years
        current_age: Age today, used to label each year

    Returns:
        ``years + 1`` projections; year 0 is the current balance with no flows
    """
    annual_contribution = annualize_contribution(
        account.contribution_amount, account.contribution_frequency
    )
    annual_match = calculate_annual_employer_match(account)

    projections = []
    balance = account.current_balance

    for year in range(years + 1):
        starting_balance = balance
        if year == 0:
            contributions = 0.0
            employer_match = 0.0
            growth = 0.0
        else:
            contributions = annual_contribution
            employer_match = annual_match
            growth = (
                starting_balance + contributions + employer_match
            ) * account.expected_return_rate

        balance = starting_balance + contributions + employer_match + growth

        projections.append(
            RetirementProjection(
                year=year,
                age=current_age + year if current_age is not None else None,
                starting_balance=starting_balance,
                contributions=contributions,
                employer_match=employer_match,
                growth=growth,
                ending_balance=balance,
            )
        )

    return projections
