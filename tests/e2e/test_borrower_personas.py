"""
E2E tests for borrower personas running the full repayment terms pipeline.

Each persona starts from raw pay and expense figures, picks a schedule shape,
materializes it and prices one payment under an admin fee policy.

Borrower personas:
- borrower_salaried: Monthly salary, healthy budget, balanced plan expected
- borrower_gig: Weekly irregular pay, prefers comfortable payments
- borrower_stretched: Expenses exceed income, presets fallback expected
- borrower_anonymous: No financial profile, amount-tiered presets expected
- borrower_large: Large loan, income-driven installment count
"""

import pytest
from datetime import date
from decimal import Decimal
from repayment_terms.config import load_fee_policy
from repayment_terms.domain.affordability import build_financial_profile, is_payment_safe
from repayment_terms.domain.models import Frequency
from repayment_terms.service import (
    fee_breakdown,
    materialize_preset,
    materialize_suggestion,
    schedule_options,
)


@pytest.fixture
def fee_policy():
    """2.9% + $0.30 card-style fee capped at $15"""
    return load_fee_policy(
        {"enabled": True, "type": "combined", "percentage": "2.9", "fixed_amount": "0.30", "max_fee": "15"}
    )


@pytest.mark.integration
def test_borrower_salaried_balanced_plan(fee_policy):
    """
    borrower_salaried: $5000/month, $3200 expenses
    Expected: Balanced 6-month plan for $900, payments well within budget
    """
    profile = build_financial_profile(
        "monthly",
        5000,
        {"rent_mortgage": 1800, "groceries": 600, "utilities": 200, "transportation": 400, "phone": 200},
        pay_day_of_month=1,
    )
    options = schedule_options(900, profile)

    assert options.source == "suggestions"
    chosen = options.recommended
    assert chosen.number_of_payments == 6
    assert chosen.payment_amount == Decimal("150.00")

    schedule = materialize_suggestion(900, chosen, date(2025, 6, 1), interest_rate_percent=5)
    assert len(schedule) == 6
    assert sum(item.total_amount for item in schedule) == Decimal("945.00")
    assert is_payment_safe(schedule[0].total_amount, "monthly", profile.disposable_income).safe is True

    fee = fee_breakdown(schedule[0].total_amount, fee_policy)
    assert fee.platform_fee == Decimal("4.87")  # 0.30 + 2.9% of 157.50


@pytest.mark.integration
def test_borrower_gig_comfortable_plan():
    """
    borrower_gig: $600/week, lean budget, prefers comfortable payments
    Expected: Longest suggested plan on a weekly schedule
    """
    profile = build_financial_profile(
        "weekly",
        600,
        {"rent_mortgage": 1400, "groceries": 500, "transportation": 300},
        comfort_level="comfortable",
        pay_day_of_week=4,
    )
    options = schedule_options(400, profile)

    chosen = options.recommended
    assert chosen is options.suggestions.comfortable
    assert chosen.number_of_payments == 8
    assert chosen.weeks_to_payoff == 8

    schedule = materialize_suggestion(400, chosen, date(2025, 6, 6))
    assert [item.due_date for item in schedule[:2]] == [date(2025, 6, 13), date(2025, 6, 20)]
    assert sum(item.total_amount for item in schedule) == Decimal("400.00")


@pytest.mark.integration
def test_borrower_stretched_presets_fallback():
    """
    borrower_stretched: Expenses exceed income
    Expected: No suggestions, presets with an affordability warning
    """
    profile = build_financial_profile("biweekly", 900, {"rent_mortgage": 1500, "existing_debt_payments": 600})
    options = schedule_options(250, profile)

    assert options.source == "presets_fallback"
    assert options.suggestions is None
    assert options.warning is not None

    schedule = materialize_preset(250, options.recommended, date(2025, 6, 1))
    assert len(schedule) == 4
    assert sum(item.principal_portion for item in schedule) == Decimal("250.00")


@pytest.mark.integration
def test_borrower_anonymous_presets():
    """
    borrower_anonymous: No financial profile shared
    Expected: Amount-tiered presets, fee disabled by default policy
    """
    options = schedule_options(80)

    assert options.source == "presets"
    assert [p.installments for p in options.presets] == [1, 2, 4]
    assert options.recommended.frequency is Frequency.WEEKLY

    schedule = materialize_preset(80, options.recommended, "2025-06-01")
    assert [item.total_amount for item in schedule] == [Decimal("40.00"), Decimal("40.00")]

    fee = fee_breakdown(schedule[0].total_amount, load_fee_policy({"enabled": False}))
    assert fee.platform_fee == Decimal("0")


@pytest.mark.integration
def test_borrower_large_income_driven_plan(fee_policy):
    """
    borrower_large: $6000 loan, $1500/month disposable
    Expected: Balanced count derived from budget share, capped fee
    """
    profile = build_financial_profile("monthly", 6000, {"rent_mortgage": 3000, "other_bills": 1500})
    options = schedule_options(6000, profile)

    balanced = options.suggestions.balanced
    # 1500 * 0.22 = 330/month → ceil(6000 / 330) = 19 → capped at 12
    assert balanced.number_of_payments == 12
    assert balanced.payment_amount == Decimal("500.00")

    schedule = materialize_suggestion(6000, balanced, date(2025, 1, 31), interest_rate_percent=12, interest_mode="compound")
    assert len(schedule) == 12
    assert schedule[1].due_date == date(2025, 3, 31)
    assert sum(item.principal_portion for item in schedule) == Decimal("6000.00")

    fee = fee_breakdown(schedule[0].total_amount, fee_policy)
    assert fee.platform_fee == Decimal("15.00")
