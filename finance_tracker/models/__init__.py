"""Records, forms and projection engines for the finance tracker."""

from .records import (
    Contribution,
    FinanceSnapshot,
    FractionalRate,
    Mortgage,
    Percentage,
    RetirementAccount,
    fraction_to_percent,
    percent_to_fraction,
)
from .forms import (
    ContributionForm,
    ContributionUpdate,
    MortgageForm,
    MortgageUpdate,
    RetirementAccountForm,
    RetirementAccountUpdate,
)
from .mortgage_amortization import (
    ITERATION_CAP_MULTIPLIER,
    PAYOFF_EPSILON,
    AmortizationEntry,
    MortgageCalculator,
)
from .mortgage_summary import MonthlyBreakdown, MortgageSummary, build_mortgage_summary
from .extra_payments import ExtraPaymentScenario, calculate_extra_payment_impact
from .retirement_projection import (
    PAY_PERIODS_PER_YEAR,
    RetirementProjection,
    annualize_contribution,
    calculate_annual_employer_match,
    project_account,
)
from .portfolio import (
    AFTER_TAX_SHARE,
    WITHDRAWAL_RATE,
    RetirementSummary,
    combine_projections,
    estimate_monthly_income,
    summarize_portfolio,
)

__all__ = [
    "Mortgage",
    "RetirementAccount",
    "Contribution",
    "FinanceSnapshot",
    "FractionalRate",
    "Percentage",
    "percent_to_fraction",
    "fraction_to_percent",
    "MortgageForm",
    "MortgageUpdate",
    "RetirementAccountForm",
    "RetirementAccountUpdate",
    "ContributionForm",
    "ContributionUpdate",
    "AmortizationEntry",
    "MortgageCalculator",
    "PAYOFF_EPSILON",
    "ITERATION_CAP_MULTIPLIER",
    "MortgageSummary",
    "MonthlyBreakdown",
    "build_mortgage_summary",
    "ExtraPaymentScenario",
    "calculate_extra_payment_impact",
    "RetirementProjection",
    "PAY_PERIODS_PER_YEAR",
    "annualize_contribution",
    "calculate_annual_employer_match",
    "project_account",
    "RetirementSummary",
    "WITHDRAWAL_RATE",
    "AFTER_TAX_SHARE",
    "combine_projections",
    "estimate_monthly_income",
    "summarize_portfolio",
]
