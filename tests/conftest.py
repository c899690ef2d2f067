"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from repayment_terms.domain.models import (
    ComfortLevel,
    FeePolicy,
    FeeType,
    FinancialProfile,
    Frequency,
    LoanTerms,
    PayFrequency,
)


@pytest.fixture
def start_date() -> date:
    """Fixed loan start so due dates are deterministic"""
    return date(2025, 1, 31)


@pytest.fixture
def simple_terms(start_date: date) -> LoanTerms:
    """$1000 at a flat 10%, 3 monthly installments"""
    return LoanTerms(
        principal=Decimal("1000"),
        installment_count=3,
        frequency=Frequency.MONTHLY,
        start_date=start_date,
        interest_rate_percent=Decimal("10"),
    )


@pytest.fixture
def monthly_profile() -> FinancialProfile:
    """Monthly earner with $1000 disposable income"""
    return FinancialProfile(
        pay_frequency=PayFrequency.MONTHLY,
        pay_amount=Decimal("4000"),
        monthly_income=Decimal("4000"),
        monthly_expenses=Decimal("3000"),
        disposable_income=Decimal("1000"),
        comfort_level=ComfortLevel.BALANCED,
    )


@pytest.fixture
def weekly_profile() -> FinancialProfile:
    """Weekly earner ($750/week) with $1200 disposable income"""
    return FinancialProfile(
        pay_frequency=PayFrequency.WEEKLY,
        pay_amount=Decimal("750"),
        monthly_income=Decimal("3247.50"),
        monthly_expenses=Decimal("2047.50"),
        disposable_income=Decimal("1200"),
        comfort_level=ComfortLevel.COMFORTABLE,
    )


@pytest.fixture
def broke_profile() -> FinancialProfile:
    """Expenses exceed income"""
    return FinancialProfile(
        pay_frequency=PayFrequency.BIWEEKLY,
        pay_amount=Decimal("1000"),
        monthly_income=Decimal("2170"),
        monthly_expenses=Decimal("2220"),
        disposable_income=Decimal("-50"),
    )


@pytest.fixture
def percentage_policy() -> FeePolicy:
    """5% fee bounded to $10-$25"""
    return FeePolicy(
        enabled=True,
        type=FeeType.PERCENTAGE,
        percentage=Decimal("5"),
        min_fee=Decimal("10"),
        max_fee=Decimal("25"),
    )
