"""
Tests for the entity repository.

This module tests CRUD operations, balance updates from contributions,
snapshot replacement and change notifications.
"""

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from finance_tracker.models.forms import (
    ContributionForm,
    ContributionUpdate,
    MortgageForm,
    MortgageUpdate,
    RetirementAccountForm,
    RetirementAccountUpdate,
)
from finance_tracker.models.records import FinanceSnapshot
from finance_tracker.repository import FinanceRepository, RecordNotFoundError, RepositoryError
from tests.factories import make_account, make_contribution, make_mortgage


def mortgage_form(**overrides) -> MortgageForm:
    fields = {
        "name": "Home",
        "original_principal": 300000,
        "interest_rate_percent": 6,
        "term_years": 30,
        "start_date": date(2024, 1, 1),
    }
    fields.update(overrides)
    return MortgageForm(**fields)


def account_form(**overrides) -> RetirementAccountForm:
    fields = {
        "name": "Work 401k",
        "account_type": "401k",
        "provider": "Fidelity",
        "current_balance": 10000,
        "contribution_amount": 500,
        "contribution_frequency": "monthly",
        "employer_match_percentage": 50,
        "expected_return_percent": 7,
    }
    fields.update(overrides)
    return RetirementAccountForm(**fields)


def contribution_form(account_id: str, **overrides) -> ContributionForm:
    fields = {
        "account_id": account_id,
        "date": date(2024, 1, 15),
        "employee_amount": 500,
        "employer_amount": 250,
        "balance_after": 10750,
    }
    fields.update(overrides)
    return ContributionForm(**fields)


class TestMortgageRepository:
    """Test cases for mortgage storage."""

    def test_no_mortgage(self, repository):
        """Test an empty store."""
        assert repository.get_mortgage() is None

    def test_set_mortgage_computes_payment(self, repository):
        """Test that the payment is derived on creation."""
        mortgage = repository.set_mortgage(mortgage_form())

        stored = repository.get_mortgage()
        assert stored.id == mortgage.id
        assert stored.interest_rate == pytest.approx(0.06)
        assert stored.term_months == 360
        assert stored.current_balance == 300000
        assert stored.monthly_payment == pytest.approx(1798.65, abs=0.01)

    def test_set_mortgage_replaces_existing(self, repository):
        """Test that only one mortgage is kept."""
        repository.set_mortgage(mortgage_form(name="Old"))
        new = repository.set_mortgage(mortgage_form(name="New"))

        assert repository.get_mortgage().id == new.id
        assert repository.get_mortgage().name == "New"

    def test_update_recomputes_payment(self, repository):
        """Test that changing the rate changes the payment."""
        original = repository.set_mortgage(mortgage_form())

        updated = repository.update_mortgage(MortgageUpdate(interest_rate_percent=0))

        assert updated.monthly_payment == pytest.approx(300000 / 360)
        assert updated.updated_at >= original.updated_at
        assert repository.get_mortgage().monthly_payment == pytest.approx(300000 / 360)

    def test_update_keeps_payment(self, repository):
        """Test that unrelated changes keep the payment."""
        original = repository.set_mortgage(mortgage_form())

        updated = repository.update_mortgage(MortgageUpdate(current_balance=250000))

        assert updated.monthly_payment == original.monthly_payment
        assert updated.current_balance == 250000

    def test_update_without_mortgage(self, repository):
        """Test updating when there is nothing to update."""
        with pytest.raises(RecordNotFoundError):
            repository.update_mortgage(MortgageUpdate(escrow_amount=100))

    def test_delete_mortgage(self, repository):
        """Test mortgage deletion."""
        repository.set_mortgage(mortgage_form())

        assert repository.delete_mortgage() is True
        assert repository.get_mortgage() is None
        assert repository.delete_mortgage() is False


class TestAccountRepository:
    """Test cases for retirement account storage."""

    def test_add_and_get(self, repository):
        """Test adding an account."""
        account = repository.add_account(account_form())

        stored = repository.get_account(account.id)
        assert stored.name == "Work 401k"
        assert stored.expected_return_rate == pytest.approx(0.07)
        assert stored.employer_match_percentage == 50

    def test_missing_account(self, repository):
        """Test looking up an unknown account."""
        assert repository.get_account("missing") is None

    def test_list_and_total_balance(self, repository):
        """Test listing accounts and the active balance total."""
        repository.add_account(account_form())
        repository.add_account(account_form(name="Old IRA", current_balance=5000, is_active=False))

        assert len(repository.list_accounts()) == 2
        assert repository.total_balance() == 10000

    def test_update(self, repository):
        """Test updating an account."""
        account = repository.add_account(account_form())

        updated = repository.update_account(
            account.id, RetirementAccountUpdate(contribution_amount=750)
        )

        assert updated.contribution_amount == 750
        assert repository.get_account(account.id).contribution_amount == 750

    def test_update_missing(self, repository):
        """Test updating an unknown account."""
        with pytest.raises(RecordNotFoundError):
            repository.update_account("missing", RetirementAccountUpdate(name="x"))

    def test_delete_removes_contributions(self, repository):
        """Test that deleting an account deletes its contributions."""
        account = repository.add_account(account_form())
        repository.add_contribution(contribution_form(account.id))

        repository.delete_account(account.id)

        assert repository.get_account(account.id) is None
        assert repository.list_contributions() == []

    def test_delete_missing(self, repository):
        """Test deleting an unknown account."""
        with pytest.raises(RecordNotFoundError):
            repository.delete_account("missing")


class TestContributionRepository:
    """Test cases for the contribution ledger."""

    def test_add_updates_account_balance(self, repository):
        """Test that a contribution moves the balance to balance_after."""
        account = repository.add_account(account_form())

        contribution = repository.add_contribution(contribution_form(account.id))

        assert contribution.total_amount == 750
        assert repository.get_account(account.id).current_balance == 10750

    def test_add_to_unknown_account(self, repository):
        """Test that contributions need an existing account."""
        with pytest.raises(RecordNotFoundError):
            repository.add_contribution(contribution_form("missing"))

        assert repository.list_contributions() == []

    def test_newest_first_per_account(self, repository):
        """Test per-account ordering."""
        account = repository.add_account(account_form())
        other = repository.add_account(account_form(name="Other"))
        repository.add_contribution(contribution_form(account.id, date=date(2024, 1, 15)))
        repository.add_contribution(contribution_form(account.id, date=date(2024, 3, 15)))
        repository.add_contribution(contribution_form(other.id, date=date(2024, 2, 15)))

        dates = [c.date for c in repository.contributions_for_account(account.id)]

        assert dates == [date(2024, 3, 15), date(2024, 1, 15)]
        assert len(repository.list_contributions()) == 3

    def test_update_leaves_balance(self, repository):
        """Test that editing a contribution does not touch the balance."""
        account = repository.add_account(account_form())
        contribution = repository.add_contribution(contribution_form(account.id))

        updated = repository.update_contribution(
            contribution.id, ContributionUpdate(notes="bonus", balance_after=11000)
        )

        assert updated.notes == "bonus"
        assert updated.balance_after == 11000
        assert repository.get_account(account.id).current_balance == 10750

    def test_delete(self, repository):
        """Test contribution deletion."""
        account = repository.add_account(account_form())
        contribution = repository.add_contribution(contribution_form(account.id))

        repository.delete_contribution(contribution.id)

        assert repository.list_contributions() == []
        with pytest.raises(RecordNotFoundError):
            repository.delete_contribution(contribution.id)


class TestSnapshots:
    """Test cases for loading and replacing snapshots."""

    def test_load_snapshot(self, repository):
        """Test that a snapshot holds every record."""
        repository.set_mortgage(mortgage_form())
        account = repository.add_account(account_form())
        repository.add_contribution(contribution_form(account.id))

        snapshot = repository.load_snapshot()

        assert snapshot.mortgage is not None
        assert [a.id for a in snapshot.accounts] == [account.id]
        assert len(snapshot.contributions) == 1
        assert snapshot.active_accounts == snapshot.accounts

    def test_replace_snapshot(self, repository):
        """Test that replacing clears old records."""
        repository.add_account(account_form(name="Old"))
        account = make_account(name="Restored")
        snapshot = FinanceSnapshot(
            mortgage=make_mortgage(),
            accounts=[account],
            contributions=[make_contribution(account.id)],
        )

        repository.replace_snapshot(snapshot)

        loaded = repository.load_snapshot()
        assert [a.name for a in loaded.accounts] == ["Restored"]
        assert loaded.mortgage.id == snapshot.mortgage.id
        assert loaded.contributions[0].id == snapshot.contributions[0].id

    def test_replace_rejects_orphans(self, repository):
        """Test that contributions must belong to snapshot accounts."""
        existing = repository.add_account(account_form())
        snapshot = FinanceSnapshot(contributions=[make_contribution("missing")])

        with pytest.raises(RepositoryError):
            repository.replace_snapshot(snapshot)

        assert repository.get_account(existing.id) is not None


class TestNotifications:
    """Test cases for change notifications."""

    def test_events_after_changes(self, repository):
        """Test that listeners see each committed change."""
        events = []
        repository.subscribe(events.append)

        account = repository.add_account(account_form())
        repository.add_contribution(contribution_form(account.id))

        assert [(e.topic, e.action) for e in events] == [
            ("accounts", "created"),
            ("contributions", "created"),
            ("accounts", "updated"),
        ]
        assert events[0].record_id == account.id

    def test_unsubscribe(self, repository):
        """Test that unsubscribed listeners stop receiving events."""
        events = []
        unsubscribe = repository.subscribe(events.append)
        unsubscribe()

        repository.set_mortgage(mortgage_form())

        assert events == []

    def test_failed_change_sends_no_event(self, repository):
        """Test that failures are not announced."""
        events = []
        repository.subscribe(events.append)

        with pytest.raises(RecordNotFoundError):
            repository.delete_account("missing")

        assert events == []

    def test_listener_error_does_not_undo_change(self, repository):
        """Test that a failing listener does not affect the change."""

        def broken(event):
            raise RuntimeError("boom")

        repository.subscribe(broken)

        repository.set_mortgage(mortgage_form())

        assert repository.get_mortgage() is not None


class TestAvailability:
    """Test cases for the entity store reachability check."""

    def test_available(self, repository):
        """Test a reachable store."""
        assert repository.is_available() is True

    def test_unreachable(self, tmp_path):
        """Test a store whose database cannot be opened."""
        engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'finance.db'}")
        repository = FinanceRepository(sessionmaker(bind=engine))

        assert repository.is_available() is False
        engine.dispose()
