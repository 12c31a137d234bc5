"""
User-facing input models.

Forms accept rates the way users type them (6.5 for 6.5%) and convert them to
the fractional rates stored on records. Interest and expected return rates are
only converted here. Match, limit and vesting fields stay percentages on the
records and the retirement projection scales the match itself.
"""

import datetime as dt
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .records import (
    ContributionFrequency,
    Percentage,
    RetirementAccountType,
    percent_to_fraction,
)


class Form(BaseModel):
    """Base class for input forms."""

    model_config = ConfigDict(extra="forbid")

    def _set_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class MortgageForm(Form):
    """Input for creating a mortgage."""

    name: str = Field(default="Mortgage", min_length=1, description="Mortgage name")
    property_address: Optional[str] = Field(None, description="Property address")
    original_principal: float = Field(..., gt=0, description="Loan amount")
    current_balance: Optional[float] = Field(
        None, ge=0, description="Outstanding balance (defaults to the loan amount)"
    )
    interest_rate_percent: Percentage = Field(..., description="Annual rate (0-100)")
    term_years: Optional[int] = Field(None, ge=1, le=50, description="Loan term in years")
    term_months: Optional[int] = Field(None, gt=0, description="Loan term in months")
    start_date: dt.date = Field(..., description="First day of the loan term")
    payment_day: int = Field(default=1, ge=1, le=31, description="Payment due day")
    extra_payment_amount: Optional[float] = Field(None, ge=0, description="Extra monthly principal")
    escrow_amount: Optional[float] = Field(None, ge=0, description="Monthly escrow")
    pmi_amount: Optional[float] = Field(None, ge=0, description="Monthly PMI")

    @model_validator(mode="after")
    def validate_term(self):
        if self.term_years is None and self.term_months is None:
            raise ValueError("Either term_years or term_months is required")
        if self.term_years is not None and self.term_months is not None:
            if self.term_years * 12 != self.term_months:
                raise ValueError("term_years and term_months disagree")
        return self

    def to_record_fields(self) -> Dict[str, Any]:
        """Record fields with the rate as a fraction and the term in months."""
        fields = self.model_dump(exclude={"interest_rate_percent", "term_years"})
        fields["interest_rate"] = percent_to_fraction(self.interest_rate_percent)
        if self.term_months is None:
            fields["term_months"] = self.term_years * 12
        # A zero balance means "not entered"
        if not self.current_balance:
            fields["current_balance"] = self.original_principal
        return fields


class MortgageUpdate(Form):
    """Partial update of a mortgage."""

    name: Optional[str] = Field(None, min_length=1)
    property_address: Optional[str] = None
    original_principal: Optional[float] = Field(None, gt=0)
    current_balance: Optional[float] = Field(None, ge=0)
    interest_rate_percent: Optional[Percentage] = None
    term_years: Optional[int] = Field(None, ge=1, le=50)
    term_months: Optional[int] = Field(None, gt=0)
    start_date: Optional[dt.date] = None
    payment_day: Optional[int] = Field(None, ge=1, le=31)
    extra_payment_amount: Optional[float] = Field(None, ge=0)
    escrow_amount: Optional[float] = Field(None, ge=0)
    pmi_amount: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None

    def to_record_fields(self) -> Dict[str, Any]:
        """Only the fields that were supplied, converted to record units."""
        fields = self._set_fields()
        if "interest_rate_percent" in fields:
            rate = fields.pop("interest_rate_percent")
            if rate is not None:
                fields["interest_rate"] = percent_to_fraction(rate)
        if "term_years" in fields:
            term_years = fields.pop("term_years")
            if term_years is not None and fields.get("term_months") is None:
                fields["term_months"] = term_years * 12
        return fields

    def changes_payment_terms(self) -> bool:
        """Whether the update touches principal, rate or term."""
        fields = self.to_record_fields()
        return any(
            name in fields for name in ("original_principal", "interest_rate", "term_months")
        )


class RetirementAccountForm(Form):
    """Input for creating a retirement account."""

    name: str = Field(..., min_length=1, description="Account name")
    account_type: RetirementAccountType = Field(..., description="Type of account")
    provider: str = Field(..., min_length=1, description="Account provider")
    current_balance: float = Field(..., ge=0, description="Current balance")
    employer_name: Optional[str] = Field(None, description="Employer")
    contribution_amount: float = Field(..., ge=0, description="Contribution per period")
    contribution_frequency: ContributionFrequency = Field(..., description="Contribution frequency")
    employer_match_percentage: Optional[Percentage] = Field(None, description="Match (0-100)")
    employer_match_limit: Optional[Percentage] = Field(None, description="Match limit (0-100)")
    vesting_percentage: Percentage = Field(default=100, description="Vesting (0-100)")
    expected_return_percent: Percentage = Field(..., description="Expected annual return (0-100)")
    is_active: bool = Field(default=True, description="Whether the account is active")
    notes: Optional[str] = Field(None, description="Free-form notes")

    def to_record_fields(self) -> Dict[str, Any]:
        """Record fields with the expected return as a fraction."""
        fields = self.model_dump(exclude={"expected_return_percent"})
        fields["expected_return_rate"] = percent_to_fraction(self.expected_return_percent)
        return fields


class RetirementAccountUpdate(Form):
    """Partial update of a retirement account."""

    name: Optional[str] = Field(None, min_length=1)
    account_type: Optional[RetirementAccountType] = None
    provider: Optional[str] = Field(None, min_length=1)
    current_balance: Optional[float] = Field(None, ge=0)
    employer_name: Optional[str] = None
    contribution_amount: Optional[float] = Field(None, ge=0)
    contribution_frequency: Optional[ContributionFrequency] = None
    employer_match_percentage: Optional[Percentage] = None
    employer_match_limit: Optional[Percentage] = None
    vesting_percentage: Optional[Percentage] = None
    expected_return_percent: Optional[Percentage] = None
    is_active: Optional[bool] = None
    notes: Optional[str] = None

    def to_record_fields(self) -> Dict[str, Any]:
        """Only the fields that were supplied, converted to record units."""
        fields = self._set_fields()
        if "expected_return_percent" in fields:
            rate = fields.pop("expected_return_percent")
            if rate is not None:
                fields["expected_return_rate"] = percent_to_fraction(rate)
        return fields


class ContributionForm(Form):
    """Input for recording a contribution."""

    account_id: str = Field(..., min_length=1, description="Target account")
    date: dt.date = Field(..., description="Contribution date")
    employee_amount: float = Field(..., ge=0, description="Employee contribution")
    employer_amount: float = Field(default=0, ge=0, description="Employer contribution")
    total_amount: Optional[float] = Field(None, ge=0, description="Total (defaults to the sum)")
    balance_after: float = Field(..., ge=0, description="Account balance after the deposit")
    notes: Optional[str] = Field(None, description="Free-form notes")

    def to_record_fields(self) -> Dict[str, Any]:
        fields = self.model_dump()
        if self.total_amount is None:
            fields["total_amount"] = self.employee_amount + self.employer_amount
        return fields


class ContributionUpdate(Form):
    """Partial update of a contribution."""

    date: Optional[dt.date] = None
    employee_amount: Optional[float] = Field(None, ge=0)
    employer_amount: Optional[float] = Field(None, ge=0)
    total_amount: Optional[float] = Field(None, ge=0)
    balance_after: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

    def to_record_fields(self) -> Dict[str, Any]:
        return self._set_fields()
