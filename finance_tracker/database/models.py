"""
SQLAlchemy database models for the finance tracker.

This module defines the tables backing mortgages, retirement accounts and the
contribution ledger.
"""

from datetime import datetime
from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Index,
    Integer, String, Text
)
from sqlalchemy.orm import relationship

from .base import Base


class MortgageRow(Base):
    """Mortgage loan; at most one per user."""

    __tablename__ = 'mortgages'

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    property_address = Column(Text)
    original_principal = Column(Float, nullable=False)
    current_balance = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False)  # Fraction, 0-1
    term_months = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    payment_day = Column(Integer, nullable=False, default=1)
    monthly_payment = Column(Float, nullable=False)
    extra_payment_amount = Column(Float)
    escrow_amount = Column(Float)
    pmi_amount = Column(Float)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("original_principal > 0", name='ck_mortgage_principal_positive'),
        CheckConstraint("interest_rate >= 0 AND interest_rate <= 1", name='ck_mortgage_rate_range'),
        CheckConstraint("term_months > 0", name='ck_mortgage_term_positive'),
    )

    def __repr__(self):
        return f"<MortgageRow(id={self.id}, name='{self.name}', balance={self.current_balance})>"


class RetirementAccountRow(Base):
    """Retirement savings account."""

    __tablename__ = 'retirement_accounts'

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    account_type = Column(String(20), nullable=False, index=True)
    provider = Column(String(255), nullable=False)
    current_balance = Column(Float, nullable=False, default=0)
    employer_name = Column(String(255))
    contribution_amount = Column(Float, nullable=False, default=0)
    contribution_frequency = Column(String(20), nullable=False)
    employer_match_percentage = Column(Float)  # Percentage, 0-100
    employer_match_limit = Column(Float)  # Percentage, 0-100
    vesting_percentage = Column(Float, nullable=False, default=100)  # Percentage, 0-100
    expected_return_rate = Column(Float, nullable=False)  # Fraction, 0-1
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    contributions = relationship(
        "ContributionRow", back_populates="account", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("account_type IN ('401k', 'roth-401k', 'ira', 'roth-ira', '403b', 'pension')", name='ck_account_type'),
        CheckConstraint("contribution_frequency IN ('per-paycheck', 'monthly', 'yearly')", name='ck_contribution_frequency'),
        CheckConstraint("vesting_percentage >= 0 AND vesting_percentage <= 100", name='ck_vesting_range'),
        CheckConstraint("expected_return_rate >= 0 AND expected_return_rate <= 1", name='ck_return_rate_range'),
        Index('idx_accounts_created', 'created_at'),
    )

    def __repr__(self):
        return f"<RetirementAccountRow(id={self.id}, name='{self.name}', type='{self.account_type}')>"


class ContributionRow(Base):
    """Historical deposit into a retirement account."""

    __tablename__ = 'contributions'

    id = Column(String(36), primary_key=True)
    account_id = Column(String(36), ForeignKey('retirement_accounts.id', ondelete='CASCADE'), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    employee_amount = Column(Float, nullable=False, default=0)
    employer_amount = Column(Float, nullable=False, default=0)
    total_amount = Column(Float, nullable=False, default=0)
    balance_after = Column(Float, nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    account = relationship("RetirementAccountRow", back_populates="contributions")

    __table_args__ = (
        Index('idx_contributions_account_date', 'account_id', 'date'),
    )

    def __repr__(self):
        return f"<ContributionRow(id={self.id}, account_id={self.account_id}, date={self.date}, total={self.total_amount})>"
