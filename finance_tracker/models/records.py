"""
Pydantic models for the persisted finance records.

This module defines the mortgage, retirement account and contribution records
handed to the projection engines, along with the unit types that keep
fractional rates (0-1) apart from user-facing percentages (0-100).
"""

import datetime as dt
import uuid
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# Decimal fraction, e.g. 0.065 for 6.5%
FractionalRate = Annotated[float, Field(ge=0, le=1)]

# User-facing percentage, e.g. 50 for 50%
Percentage = Annotated[float, Field(ge=0, le=100)]

RetirementAccountType = Literal["401k", "roth-401k", "ira", "roth-ira", "403b", "pension"]

ContributionFrequency = Literal["per-paycheck", "monthly", "yearly"]


def percent_to_fraction(value: float) -> float:
    """Convert a 0-100 percentage to a 0-1 fraction."""
    return value / 100


def fraction_to_percent(value: float) -> float:
    """Convert a 0-1 fraction to a 0-100 percentage."""
    return value * 100


def generate_id() -> str:
    """Generate a new record identifier."""
    return str(uuid.uuid4())


class Record(BaseModel):
    """Base class for persisted records."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=generate_id, description="Record identifier")
    created_at: dt.datetime = Field(
        default_factory=dt.datetime.utcnow, description="Creation timestamp"
    )
    updated_at: dt.datetime = Field(
        default_factory=dt.datetime.utcnow, description="Last update timestamp"
    )


class Mortgage(Record):
    """Fixed-rate mortgage loan."""

    name: str = Field(default="Mortgage", min_length=1, description="Mortgage name")
    property_address: Optional[str] = Field(None, description="Property address")
    original_principal: float = Field(..., gt=0, description="Loan amount at origination")
    current_balance: float = Field(..., ge=0, description="Outstanding balance")
    interest_rate: FractionalRate = Field(..., description="Nominal annual rate (0-1)")
    term_months: int = Field(..., gt=0, description="Original loan term in months")
    start_date: dt.date = Field(..., description="First day of the loan term")
    payment_day: int = Field(default=1, ge=1, le=31, description="Day of month payment is due")
    monthly_payment: float = Field(
        ..., ge=0, description="Fixed monthly payment derived from principal, rate and term"
    )
    extra_payment_amount: Optional[float] = Field(
        None, ge=0, description="Extra monthly principal payment"
    )
    escrow_amount: Optional[float] = Field(None, ge=0, description="Monthly escrow amount")
    pmi_amount: Optional[float] = Field(None, ge=0, description="Monthly PMI amount")
    is_active: bool = Field(default=True, description="Whether the mortgage is active")


class RetirementAccount(Record):
    """Retirement savings account."""

    name: str = Field(..., min_length=1, description="Account name")
    account_type: RetirementAccountType = Field(..., description="Type of account")
    provider: str = Field(..., min_length=1, description="Account provider")
    current_balance: float = Field(..., ge=0, description="Current account balance")
    employer_name: Optional[str] = Field(None, description="Employer sponsoring the plan")
    contribution_amount: float = Field(..., ge=0, description="Employee contribution amount")
    contribution_frequency: ContributionFrequency = Field(
        ..., description="How often the contribution amount is deposited"
    )
    employer_match_percentage: Optional[Percentage] = Field(
        None, description="Employer match as a percentage of employee contributions (0-100)"
    )
    employer_match_limit: Optional[Percentage] = Field(
        None, description="Salary percentage the employer matches up to (0-100)"
    )
    vesting_percentage: Percentage = Field(
        default=100, description="Vested share of employer contributions (0-100)"
    )
    expected_return_rate: FractionalRate = Field(
        ..., description="Expected annual return (0-1)"
    )
    is_active: bool = Field(default=True, description="Whether the account is active")
    notes: Optional[str] = Field(None, description="Free-form notes")


class Contribution(Record):
    """Historical deposit into a retirement account."""

    account_id: str = Field(..., description="Account the contribution belongs to")
    date: dt.date = Field(..., description="Contribution date")
    employee_amount: float = Field(..., ge=0, description="Employee contribution")
    employer_amount: float = Field(default=0, ge=0, description="Employer contribution")
    total_amount: float = Field(..., ge=0, description="Employee plus employer amount")
    balance_after: float = Field(..., ge=0, description="Account balance after the deposit")
    notes: Optional[str] = Field(None, description="Free-form notes")


class FinanceSnapshot(BaseModel):
    """Read-only view of all records handed to the projection engines."""

    mortgage: Optional[Mortgage] = Field(None, description="The user's mortgage, if any")
    accounts: List[RetirementAccount] = Field(
        default_factory=list, description="Retirement accounts"
    )
    contributions: List[Contribution] = Field(
        default_factory=list, description="Contribution ledger"
    )

    @property
    def active_accounts(self) -> List[RetirementAccount]:
        return [account for account in self.accounts if account.is_active]
