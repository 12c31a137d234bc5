"""Extra-payment impact analysis for mortgages."""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from .mortgage_amortization import MortgageCalculator
from .records import Mortgage


class ExtraPaymentScenario(BaseModel):
    """Comparison of a mortgage with and without a monthly extra payment."""

    extra_amount: float = Field(..., description="Extra monthly principal payment")
    original_payoff_date: dt.date = Field(..., description="Payoff date without extra payments")
    new_payoff_date: dt.date = Field(..., description="Payoff date with extra payments")
    months_saved: int = Field(..., description="Payments avoided by paying extra")
    interest_saved: float = Field(..., description="Interest avoided by paying extra")


def calculate_extra_payment_impact(
    mortgage: Optional[Mortgage], extra_monthly: float
) -> Optional[ExtraPaymentScenario]:
    """
    Compare the baseline schedule against one with an extra monthly payment.

    Args:
        mortgage: Mortgage record, or None if the user has none
        extra_monthly: Extra principal paid every month

    Returns:
        The scenario comparison, or None when there is nothing to compare
    """
    if mortgage is None:
        return None

    baseline = MortgageCalculator.generate_amortization_schedule(mortgage, 0)
    scenario = MortgageCalculator.generate_amortization_schedule(mortgage, extra_monthly)
    if not baseline or not scenario:
        return None

    baseline_last = baseline[-1]
    scenario_last = scenario[-1]

    return ExtraPaymentScenario(
        extra_amount=extra_monthly,
        original_payoff_date=baseline_last.date,
        new_payoff_date=scenario_last.date,
        months_saved=len(baseline) - len(scenario),
        interest_saved=baseline_last.cumulative_interest - scenario_last.cumulative_interest,
    )
