"""
Mortgage amortization calculations.

This module provides the fixed-rate payment formula and payment-by-payment
amortization schedules, optionally with a constant extra principal payment.
"""

import datetime as dt
from typing import List, Sequence

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field

from .records import Mortgage

# Balance at or below this amount counts as paid off
PAYOFF_EPSILON = 0.01

# Schedules stop after this many multiples of the original term
ITERATION_CAP_MULTIPLIER = 2


class AmortizationEntry(BaseModel):
    """A single simulated mortgage payment."""

    payment_number: int = Field(..., ge=1, description="Payment number (1-based)")
    date: dt.date = Field(..., description="Payment date")
    payment: float = Field(..., description="Total payment amount")
    principal: float = Field(..., description="Principal portion of payment")
    interest: float = Field(..., description="Interest portion of payment")
    extra_payment: float = Field(default=0, description="Extra principal payment")
    remaining_balance: float = Field(..., ge=0, description="Balance after payment")
    cumulative_principal: float = Field(..., description="Cumulative principal paid")
    cumulative_interest: float = Field(..., description="Cumulative interest paid")
    equity: float = Field(..., description="Equity built so far")


class MortgageCalculator:
    """Calculator for mortgage payments and amortization schedules."""

    @staticmethod
    def calculate_monthly_payment(
        principal: float, annual_rate: float, term_months: int
    ) -> float:
        """
        Calculate the monthly mortgage payment using the standard formula.

        Args:
            principal: Loan principal amount
            annual_rate: Annual interest rate (as decimal, e.g., 0.055 for 5.5%)
            term_months: Loan term in months

        Returns:
            Monthly payment amount, unrounded
        """
        monthly_rate = annual_rate / 12
        if monthly_rate == 0:
            return principal / term_months

        growth = (1 + monthly_rate) ** term_months
        return principal * (monthly_rate * growth) / (growth - 1)

    @staticmethod
    def schedule_iteration_cap(term_months: int) -> int:
        """Maximum number of entries a schedule may contain."""
        return term_months * ITERATION_CAP_MULTIPLIER

    @staticmethod
    def generate_amortization_schedule(
        mortgage: Mortgage, extra_payment: float = 0
    ) -> List[AmortizationEntry]:
        """
        Generate the full amortization schedule for a mortgage.

        The schedule always starts from the original principal, so it models
        the whole loan life with the extra payment applied from the first
        month, regardless of the mortgage's current balance.

        Args:
            mortgage: Mortgage record
            extra_payment: Constant extra principal paid every month

        Returns:
            Chronological list of payments. When the monthly payment cannot
            amortize the loan the list stops at the iteration cap without
            reaching a zero balance.
        """
        monthly_rate = mortgage.interest_rate / 12
        cap = MortgageCalculator.schedule_iteration_cap(mortgage.term_months)

        schedule = []
        balance = mortgage.original_principal
        cumulative_principal = 0.0
        cumulative_interest = 0.0
        payment_number = 1

        while balance > PAYOFF_EPSILON and payment_number <= cap:
            interest = balance * monthly_rate
            principal = mortgage.monthly_payment - interest + extra_payment
            payment = mortgage.monthly_payment + extra_payment

            # Final payment pays off exactly
            if principal > balance:
                principal = balance
                payment = interest + principal

            balance -= principal
            cumulative_principal += principal
            cumulative_interest += interest

            schedule.append(
                AmortizationEntry(
                    payment_number=payment_number,
                    date=mortgage.start_date + relativedelta(months=payment_number),
                    payment=payment,
                    principal=principal,
                    interest=interest,
                    extra_payment=extra_payment,
                    remaining_balance=max(0.0, balance),
                    cumulative_principal=cumulative_principal,
                    cumulative_interest=cumulative_interest,
                    equity=cumulative_principal,
                )
            )
            payment_number += 1

        return schedule

    @staticmethod
    def is_non_convergent(
        schedule: Sequence[AmortizationEntry], mortgage: Mortgage
    ) -> bool:
        """
        Check whether a schedule was cut off by the iteration cap.

        Args:
            schedule: Schedule produced for the mortgage
            mortgage: Mortgage the schedule was generated from

        Returns:
            True if the schedule hit the cap with a balance still outstanding
        """
        if not schedule:
            return False
        cap = MortgageCalculator.schedule_iteration_cap(mortgage.term_months)
        return len(schedule) >= cap and schedule[-1].remaining_balance > PAYOFF_EPSILON
