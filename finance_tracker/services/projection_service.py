"""
Projection service connecting stored records to the projection engines.

The service loads a snapshot from the repository and runs the pure engine
functions over it. Callers get back the engine's value objects unchanged.
"""

import logging
from typing import List, Optional, Tuple

from finance_tracker.models.extra_payments import (
    ExtraPaymentScenario,
    calculate_extra_payment_impact,
)
from finance_tracker.models.mortgage_amortization import AmortizationEntry, MortgageCalculator
from finance_tracker.models.mortgage_summary import MortgageSummary, build_mortgage_summary
from finance_tracker.models.portfolio import (
    RetirementSummary,
    combine_projections,
    summarize_portfolio,
)
from finance_tracker.models.retirement_projection import RetirementProjection, project_account
from finance_tracker.repository import FinanceRepository, RecordNotFoundError

logger = logging.getLogger(__name__)


class ProjectionService:
    """Service for running projections over stored records."""

    def __init__(self, repository: FinanceRepository) -> None:
        """Initialize the projection service."""
        self.repository = repository
        self.logger = logging.getLogger(__name__)

    def mortgage_schedule(
        self, extra_payment: float = 0
    ) -> Optional[Tuple[List[AmortizationEntry], bool]]:
        """
        Generate the amortization schedule for the stored mortgage.

        Args:
            extra_payment: Extra principal paid every month

        Returns:
            Tuple of (schedule, non_convergent), or None if there is no mortgage
        """
        mortgage = self.repository.get_mortgage()
        if mortgage is None:
            return None

        schedule = MortgageCalculator.generate_amortization_schedule(mortgage, extra_payment)
        non_convergent = MortgageCalculator.is_non_convergent(schedule, mortgage)
        if non_convergent:
            self.logger.warning(
                f"Mortgage {mortgage.id} does not amortize within {len(schedule)} payments"
            )
        return schedule, non_convergent

    def mortgage_summary(self) -> Optional[MortgageSummary]:
        """Summarize the stored mortgage."""
        return build_mortgage_summary(self.repository.get_mortgage())

    def extra_payment_impact(self, extra_monthly: float) -> Optional[ExtraPaymentScenario]:
        """Compare the stored mortgage with and without an extra monthly payment."""
        return calculate_extra_payment_impact(self.repository.get_mortgage(), extra_monthly)

    def account_projections(
        self, account_id: str, years: int, current_age: Optional[int] = None
    ) -> List[RetirementProjection]:
        """
        Project a single account.

        Raises:
            RecordNotFoundError: If the account does not exist
        """
        account = self.repository.get_account(account_id)
        if account is None:
            raise RecordNotFoundError(f"Account {account_id} not found")
        return project_account(account, years, current_age)

    def combined_projections(
        self, years: int, current_age: Optional[int] = None
    ) -> List[RetirementProjection]:
        """Project all active accounts combined."""
        snapshot = self.repository.load_snapshot()
        return combine_projections(snapshot.accounts, years, current_age)

    def retirement_summary(
        self, retirement_age: Optional[int] = None, current_age: Optional[int] = None
    ) -> RetirementSummary:
        """Summarize all retirement accounts."""
        snapshot = self.repository.load_snapshot()
        summary = summarize_portfolio(
            snapshot.accounts, snapshot.contributions, retirement_age, current_age
        )
        self.logger.debug(
            f"Summarized {summary.account_count} accounts, total balance {summary.total_balance:.2f}"
        )
        return summary
