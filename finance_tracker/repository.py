"""
Entity repository for mortgages, retirement accounts and contributions.

The repository is the only component that reads or writes the entity store.
It hands the projection engines immutable snapshots and notifies subscribers
after every committed change so views can refresh.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Literal, Optional

from pydantic import BaseModel, Field
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from finance_tracker.database.models import ContributionRow, MortgageRow, RetirementAccountRow
from finance_tracker.models.forms import (
    ContributionForm,
    ContributionUpdate,
    MortgageForm,
    MortgageUpdate,
    RetirementAccountForm,
    RetirementAccountUpdate,
)
from finance_tracker.models.mortgage_amortization import MortgageCalculator
from finance_tracker.models.records import (
    Contribution,
    FinanceSnapshot,
    Mortgage,
    Record,
    RetirementAccount,
)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository errors."""


class RecordNotFoundError(RepositoryError):
    """Raised when a requested record does not exist."""


class ChangeEvent(BaseModel):
    """Notification sent to subscribers after a committed change."""

    topic: Literal["mortgage", "accounts", "contributions", "snapshot"] = Field(
        ..., description="Kind of record that changed"
    )
    action: Literal["created", "updated", "deleted", "replaced"] = Field(
        ..., description="What happened to it"
    )
    record_id: Optional[str] = Field(None, description="Identifier of the changed record")


Listener = Callable[[ChangeEvent], None]


def _copy_to_row(record: Record, row: Any) -> None:
    for name, value in record.model_dump().items():
        setattr(row, name, value)


def _merge(record: Record, fields: Dict[str, Any]) -> Dict[str, Any]:
    merged = record.model_dump()
    merged.update(fields)
    merged["updated_at"] = datetime.utcnow()
    return merged


class FinanceRepository:
    """Repository over the SQLAlchemy entity store."""

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize the repository.

        Args:
            session_factory: Factory producing sessions bound to the entity store
        """
        self._session_factory = session_factory
        self._listeners: List[Listener] = []

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def is_available(self) -> bool:
        """Check that the entity store answers a trivial query."""
        try:
            with self._session() as session:
                session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Entity store unavailable: {e}")
            return False
        return True

    # Notifications

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for change events.

        Args:
            listener: Callable receiving each ChangeEvent

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, topic: str, action: str, record_id: Optional[str] = None) -> None:
        event = ChangeEvent(topic=topic, action=action, record_id=record_id)
        logger.info(f"{topic} {action}" + (f" ({record_id})" if record_id else ""))
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                # Change is already committed
                logger.error(f"Change listener failed for {topic} {action}: {e}")

    # Mortgage

    def get_mortgage(self) -> Optional[Mortgage]:
        """Get the user's mortgage, if any."""
        with self._session() as session:
            row = session.query(MortgageRow).first()
            return Mortgage.model_validate(row) if row is not None else None

    def set_mortgage(self, form: MortgageForm) -> Mortgage:
        """
        Create the user's mortgage, replacing any existing one.

        Args:
            form: Validated mortgage input

        Returns:
            The stored mortgage with its monthly payment computed
        """
        fields = form.to_record_fields()
        fields["monthly_payment"] = MortgageCalculator.calculate_monthly_payment(
            fields["original_principal"], fields["interest_rate"], fields["term_months"]
        )
        mortgage = Mortgage.model_validate(fields)

        with self._session() as session:
            session.query(MortgageRow).delete()
            row = MortgageRow()
            _copy_to_row(mortgage, row)
            session.add(row)

        self._notify("mortgage", "created", mortgage.id)
        return mortgage

    def update_mortgage(self, update: MortgageUpdate) -> Mortgage:
        """
        Update the user's mortgage.

        The monthly payment is recomputed when principal, rate or term change.

        Args:
            update: Fields to change

        Returns:
            The updated mortgage

        Raises:
            RecordNotFoundError: If there is no mortgage
        """
        with self._session() as session:
            row = session.query(MortgageRow).first()
            if row is None:
                raise RecordNotFoundError("No mortgage to update")

            merged = _merge(Mortgage.model_validate(row), update.to_record_fields())
            if update.changes_payment_terms():
                merged["monthly_payment"] = MortgageCalculator.calculate_monthly_payment(
                    merged["original_principal"],
                    merged["interest_rate"],
                    merged["term_months"],
                )
            mortgage = Mortgage.model_validate(merged)
            _copy_to_row(mortgage, row)

        self._notify("mortgage", "updated", mortgage.id)
        return mortgage

    def delete_mortgage(self) -> bool:
        """
        Delete the user's mortgage.

        Returns:
            True if a mortgage was deleted, False if there was none
        """
        with self._session() as session:
            deleted = session.query(MortgageRow).delete()

        if deleted:
            self._notify("mortgage", "deleted")
        return bool(deleted)

    # Retirement accounts

    def list_accounts(self) -> List[RetirementAccount]:
        """List all retirement accounts, oldest first."""
        with self._session() as session:
            rows = session.query(RetirementAccountRow).order_by(
                RetirementAccountRow.created_at
            )
            return [RetirementAccount.model_validate(row) for row in rows]

    def get_account(self, account_id: str) -> Optional[RetirementAccount]:
        """Get a retirement account by id."""
        with self._session() as session:
            row = session.get(RetirementAccountRow, account_id)
            return RetirementAccount.model_validate(row) if row is not None else None

    def add_account(self, form: RetirementAccountForm) -> RetirementAccount:
        """Add a retirement account."""
        account = RetirementAccount.model_validate(form.to_record_fields())

        with self._session() as session:
            row = RetirementAccountRow()
            _copy_to_row(account, row)
            session.add(row)

        self._notify("accounts", "created", account.id)
        return account

    def update_account(
        self, account_id: str, update: RetirementAccountUpdate
    ) -> RetirementAccount:
        """
        Update a retirement account.

        Raises:
            RecordNotFoundError: If the account does not exist
        """
        with self._session() as session:
            row = session.get(RetirementAccountRow, account_id)
            if row is None:
                raise RecordNotFoundError(f"Account {account_id} not found")

            merged = _merge(RetirementAccount.model_validate(row), update.to_record_fields())
            account = RetirementAccount.model_validate(merged)
            _copy_to_row(account, row)

        self._notify("accounts", "updated", account_id)
        return account

    def delete_account(self, account_id: str) -> None:
        """
        Delete a retirement account and its contributions.

        Raises:
            RecordNotFoundError: If the account does not exist
        """
        with self._session() as session:
            row = session.get(RetirementAccountRow, account_id)
            if row is None:
                raise RecordNotFoundError(f"Account {account_id} not found")
            session.delete(row)

        self._notify("accounts", "deleted", account_id)

    def total_balance(self) -> float:
        """Sum of the balances of all active accounts."""
        return sum(
            account.current_balance for account in self.list_accounts() if account.is_active
        )

    # Contributions

    def list_contributions(self) -> List[Contribution]:
        """List the whole contribution ledger in date order."""
        with self._session() as session:
            rows = session.query(ContributionRow).order_by(
                ContributionRow.date, ContributionRow.created_at
            )
            return [Contribution.model_validate(row) for row in rows]

    def contributions_for_account(self, account_id: str) -> List[Contribution]:
        """List an account's contributions, newest first."""
        with self._session() as session:
            rows = (
                session.query(ContributionRow)
                .filter(ContributionRow.account_id == account_id)
                .order_by(ContributionRow.date.desc())
            )
            return [Contribution.model_validate(row) for row in rows]

    def add_contribution(self, form: ContributionForm) -> Contribution:
        """
        Record a contribution and move the account balance to ``balance_after``.

        Raises:
            RecordNotFoundError: If the target account does not exist
        """
        contribution = Contribution.model_validate(form.to_record_fields())

        with self._session() as session:
            account_row = session.get(RetirementAccountRow, contribution.account_id)
            if account_row is None:
                raise RecordNotFoundError(f"Account {contribution.account_id} not found")

            row = ContributionRow()
            _copy_to_row(contribution, row)
            session.add(row)

            account_row.current_balance = contribution.balance_after
            account_row.updated_at = datetime.utcnow()

        self._notify("contributions", "created", contribution.id)
        self._notify("accounts", "updated", contribution.account_id)
        return contribution

    def update_contribution(
        self, contribution_id: str, update: ContributionUpdate
    ) -> Contribution:
        """
        Update a contribution. The account balance is left unchanged.

        Raises:
            RecordNotFoundError: If the contribution does not exist
        """
        with self._session() as session:
            row = session.get(ContributionRow, contribution_id)
            if row is None:
                raise RecordNotFoundError(f"Contribution {contribution_id} not found")

            merged = _merge(Contribution.model_validate(row), update.to_record_fields())
            contribution = Contribution.model_validate(merged)
            _copy_to_row(contribution, row)

        self._notify("contributions", "updated", contribution_id)
        return contribution

    def delete_contribution(self, contribution_id: str) -> None:
        """
        Delete a contribution.

        Raises:
            RecordNotFoundError: If the contribution does not exist
        """
        with self._session() as session:
            row = session.get(ContributionRow, contribution_id)
            if row is None:
                raise RecordNotFoundError(f"Contribution {contribution_id} not found")
            session.delete(row)

        self._notify("contributions", "deleted", contribution_id)

    # Snapshots

    def load_snapshot(self) -> FinanceSnapshot:
        """Load every record into an in-memory snapshot."""
        with self._session() as session:
            mortgage_row = session.query(MortgageRow).first()
            account_rows = session.query(RetirementAccountRow).order_by(
                RetirementAccountRow.created_at
            )
            contribution_rows = session.query(ContributionRow).order_by(
                ContributionRow.date, ContributionRow.created_at
            )
            return FinanceSnapshot(
                mortgage=(
                    Mortgage.model_validate(mortgage_row) if mortgage_row is not None else None
                ),
                accounts=[RetirementAccount.model_validate(row) for row in account_rows],
                contributions=[Contribution.model_validate(row) for row in contribution_rows],
            )

    def replace_snapshot(self, snapshot: FinanceSnapshot) -> None:
        """
        Replace every stored record with the contents of a snapshot.

        Raises:
            RepositoryError: If a contribution references an account missing
                from the snapshot
        """
        account_ids = {account.id for account in snapshot.accounts}
        orphans = [c.id for c in snapshot.contributions if c.account_id not in account_ids]
        if orphans:
            raise RepositoryError(
                f"Snapshot has contributions for unknown accounts: {', '.join(orphans)}"
            )

        with self._session() as session:
            session.query(ContributionRow).delete()
            session.query(RetirementAccountRow).delete()
            session.query(MortgageRow).delete()

            if snapshot.mortgage is not None:
                row = MortgageRow()
                _copy_to_row(snapshot.mortgage, row)
                session.add(row)
            for account in snapshot.accounts:
                row = RetirementAccountRow()
                _copy_to_row(account, row)
                session.add(row)
            session.flush()
            for contribution in snapshot.contributions:
                row = ContributionRow()
                _copy_to_row(contribution, row)
                session.add(row)

        self._notify("snapshot", "replaced")
