"""
Point-in-time mortgage summary.

The summary combines the mortgage record's current state with aggregates from
its amortization schedule. The two use different bases: schedule figures
(total paid, payoff date, remaining payments) describe the loan from its
original principal, while the monthly breakdown splits today's payment using
the current balance.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from .mortgage_amortization import MortgageCalculator
from .records import Mortgage


class MonthlyBreakdown(BaseModel):
    """Split of the current monthly housing cost."""

    principal: float = Field(..., description="Principal portion at today's balance")
    interest: float = Field(..., description="Interest portion at today's balance")
    escrow: float = Field(default=0, description="Monthly escrow amount")
    pmi: float = Field(default=0, description="Monthly PMI amount")
    total: float = Field(..., description="Payment plus escrow and PMI")


class MortgageSummary(BaseModel):
    """Summary metrics for a mortgage."""

    original_principal: float = Field(..., description="Loan amount at origination")
    current_balance: float = Field(..., description="Outstanding balance")
    equity_amount: float = Field(..., description="Original principal minus current balance")
    equity_percentage: float = Field(..., description="Equity as a percentage (0-100)")
    total_paid: float = Field(..., description="Principal plus interest over the schedule")
    total_interest_paid: float = Field(..., description="Interest over the schedule")
    remaining_payments: int = Field(..., ge=0, description="Number of scheduled payments")
    estimated_payoff_date: dt.date = Field(..., description="Date of the last payment")
    monthly_breakdown: MonthlyBreakdown = Field(..., description="Current monthly cost split")


def build_mortgage_summary(mortgage: Optional[Mortgage]) -> Optional[MortgageSummary]:
    """
    Build a summary for a mortgage.

    Args:
        mortgage: Mortgage record, or None if the user has none

    Returns:
        The summary, or None when there is no mortgage or no schedule
    """
    if mortgage is None:
        return None

    schedule = MortgageCalculator.generate_amortization_schedule(
        mortgage, mortgage.extra_payment_amount or 0
    )
    if not schedule:
        return None

    last_entry = schedule[-1]
    monthly_rate = mortgage.interest_rate / 12
    current_interest = mortgage.current_balance * monthly_rate
    current_principal = mortgage.monthly_payment - current_interest
    escrow = mortgage.escrow_amount or 0
    pmi = mortgage.pmi_amount or 0

    equity_amount = mortgage.original_principal - mortgage.current_balance

    return MortgageSummary(
        original_principal=mortgage.original_principal,
        current_balance=mortgage.current_balance,
        equity_amount=equity_amount,
        equity_percentage=equity_amount / mortgage.original_principal * 100,
        total_paid=last_entry.cumulative_principal + last_entry.cumulative_interest,
        total_interest_paid=last_entry.cumulative_interest,
        remaining_payments=len(schedule),
        estimated_payoff_date=last_entry.date,
        monthly_breakdown=MonthlyBreakdown(
            principal=current_principal,
            interest=current_interest,
            escrow=escrow,
            pmi=pmi,
            total=mortgage.monthly_payment + escrow + pmi,
        ),
    )
