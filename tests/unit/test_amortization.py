"""Unit tests for amortization schedule generation"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from repayment_terms.domain.amortization import compute_total_interest, generate_schedule
from repayment_terms.domain.exceptions import InvalidTermsError
from repayment_terms.domain.models import Frequency, InterestMode, LoanTerms


def test_simple_interest_flat_split(simple_terms):
    """Test flat loan-level interest split evenly, last installment absorbs remainder"""
    schedule = generate_schedule(simple_terms)

    assert len(schedule) == 3
    assert [item.principal_portion for item in schedule] == [
        Decimal("333.33"),
        Decimal("333.33"),
        Decimal("333.34"),
    ]
    assert [item.interest_portion for item in schedule] == [
        Decimal("33.33"),
        Decimal("33.33"),
        Decimal("33.34"),
    ]
    assert [item.total_amount for item in schedule] == [
        Decimal("366.66"),
        Decimal("366.66"),
        Decimal("366.68"),
    ]
    assert compute_total_interest(simple_terms) == Decimal("100.00")


def test_schedule_sum_matches_principal_plus_interest(simple_terms):
    """Test totals reconcile exactly after rounding"""
    schedule = generate_schedule(simple_terms)

    assert sum(item.total_amount for item in schedule) == Decimal("1100.00")
    assert sum(item.principal_portion for item in schedule) == simple_terms.principal
    for item in schedule:
        assert item.total_amount == item.principal_portion + item.interest_portion
        assert item.is_paid is False
        assert item.paid_at is None


def test_equal_split_without_interest():
    """Test evenly divisible principal at zero interest"""
    terms = LoanTerms(
        principal=400,
        installment_count=4,
        frequency=Frequency.WEEKLY,
        start_date=date(2025, 3, 3),
    )
    schedule = generate_schedule(terms)

    assert all(item.total_amount == Decimal("100.00") for item in schedule)
    assert all(item.interest_portion == Decimal("0") for item in schedule)


def test_rounding_remainder_goes_to_last_installment():
    """Test $400.03 over 4 installments"""
    terms = LoanTerms(
        principal="400.03",
        installment_count=4,
        frequency=Frequency.BIWEEKLY,
        start_date=date(2025, 3, 3),
    )
    schedule = generate_schedule(terms)

    assert schedule[0].total_amount == schedule[1].total_amount == schedule[2].total_amount
    assert sum(item.total_amount for item in schedule) == Decimal("400.03")


def test_tiny_principal_never_produces_negative_portions():
    """Test rounding down when rounding up would overdraw the last installment"""
    terms = LoanTerms(
        principal="0.10",
        installment_count=15,
        frequency=Frequency.WEEKLY,
        start_date=date(2025, 3, 3),
    )
    schedule = generate_schedule(terms)

    assert all(item.principal_portion >= 0 for item in schedule)
    assert sum(item.principal_portion for item in schedule) == Decimal("0.10")


def test_compound_interest_declining_balance():
    """Test level payment with principal growing and interest shrinking"""
    terms = LoanTerms(
        principal=1000,
        installment_count=12,
        frequency=Frequency.MONTHLY,
        start_date=date(2025, 1, 1),
        interest_rate_percent=12,
        interest_mode=InterestMode.COMPOUND,
    )
    schedule = generate_schedule(terms)

    # r = 12% / 12 = 1% per month → payment 88.85
    assert schedule[0].interest_portion == Decimal("10.00")
    assert schedule[0].principal_portion == Decimal("78.85")
    assert schedule[0].total_amount == Decimal("88.85")
    assert schedule[1].interest_portion == Decimal("9.21")

    body = schedule[:-1]
    for earlier, later in zip(body, body[1:]):
        assert later.principal_portion > earlier.principal_portion
        assert later.interest_portion < earlier.interest_portion
        assert later.total_amount == Decimal("88.85")

    total_interest = sum(item.interest_portion for item in schedule)
    assert sum(item.principal_portion for item in schedule) == Decimal("1000.00")
    assert sum(item.total_amount for item in schedule) == Decimal("1000.00") + total_interest
    assert compute_total_interest(terms) == total_interest


def test_compound_biweekly_periodic_rate():
    """Test biweekly frequency divides the rate by 26"""
    terms = LoanTerms(
        principal=2600,
        installment_count=1,
        frequency=Frequency.BIWEEKLY,
        start_date=date(2025, 1, 1),
        interest_rate_percent=26,
        interest_mode=InterestMode.COMPOUND,
    )
    schedule = generate_schedule(terms)

    assert len(schedule) == 1
    assert schedule[0].interest_portion == Decimal("26.00")
    assert schedule[0].total_amount == Decimal("2626.00")


def test_compound_zero_rate_matches_flat_split():
    """Test compound mode at 0% degenerates to an even split"""
    compound = LoanTerms(
        principal=900,
        installment_count=3,
        frequency=Frequency.MONTHLY,
        start_date=date(2025, 1, 1),
        interest_mode="compound",
    )
    simple = LoanTerms(
        principal=900,
        installment_count=3,
        frequency=Frequency.MONTHLY,
        start_date=date(2025, 1, 1),
    )

    assert generate_schedule(compound) == generate_schedule(simple)


def test_monthly_due_dates_clamp_to_month_end(simple_terms):
    """Test Jan 31 + 1 month lands on Feb 28, then returns to the 31st"""
    schedule = generate_schedule(simple_terms)

    assert [item.due_date for item in schedule] == [
        date(2025, 2, 28),
        date(2025, 3, 31),
        date(2025, 4, 30),
    ]


def test_monthly_due_dates_leap_year():
    terms = LoanTerms(
        principal=100,
        installment_count=1,
        frequency=Frequency.MONTHLY,
        start_date=date(2024, 1, 31),
    )
    assert generate_schedule(terms)[0].due_date == date(2024, 2, 29)


@pytest.mark.parametrize("frequency,days", [(Frequency.WEEKLY, 7), (Frequency.BIWEEKLY, 14)])
def test_due_dates_strictly_increasing(frequency, days):
    """Test first due date is one period after start and dates never repeat"""
    start = date(2025, 12, 20)
    terms = LoanTerms(
        principal=500,
        installment_count=6,
        frequency=frequency,
        start_date=start,
    )
    schedule = generate_schedule(terms)

    assert schedule[0].due_date == start + timedelta(days=days)
    for earlier, later in zip(schedule, schedule[1:]):
        assert later.due_date - earlier.due_date == timedelta(days=days)


def test_start_date_accepts_iso_string():
    terms = LoanTerms(
        principal=100,
        installment_count=2,
        frequency="weekly",
        start_date="2025-03-01",
    )
    assert terms.start_date == date(2025, 3, 1)
    assert terms.frequency is Frequency.WEEKLY
    assert generate_schedule(terms)[0].due_date == date(2025, 3, 8)


def test_generate_schedule_is_idempotent(simple_terms):
    """Test identical terms give identical schedules"""
    assert generate_schedule(simple_terms) == generate_schedule(simple_terms)


def test_schedule_item_to_record(simple_terms):
    record = generate_schedule(simple_terms)[0].to_record()

    assert record == {
        "due_date": "2025-02-28",
        "amount": "366.66",
        "principal_amount": "333.33",
        "interest_amount": "33.33",
        "is_paid": False,
        "paid_at": None,
    }


@pytest.mark.parametrize(
    "overrides",
    [
        {"principal": 0},
        {"principal": "-25"},
        {"principal": "abc"},
        {"installment_count": 0},
        {"installment_count": -1},
        {"installment_count": 2.5},
        {"installment_count": True},
        {"start_date": "2025-13-45"},
        {"start_date": None},
        {"interest_rate_percent": float("nan")},
        {"interest_rate_percent": float("inf")},
        {"interest_rate_percent": -1},
        {"frequency": "daily"},
        {"interest_mode": "continuous"},
    ],
)
def test_invalid_terms_rejected(overrides):
    """Test contract violations fail fast before any schedule exists"""
    fields = {
        "principal": 100,
        "installment_count": 4,
        "frequency": Frequency.WEEKLY,
        "start_date": date(2025, 1, 1),
    }
    fields.update(overrides)

    with pytest.raises(InvalidTermsError):
        LoanTerms(**fields)


def test_generate_schedule_requires_loan_terms():
    with pytest.raises(InvalidTermsError):
        generate_schedule({"principal": 100, "installment_count": 2})


def test_compound_long_schedule_keeps_every_installment_positive():
    """Test 520 weekly payments at 0.01%: level 1.92, remainder 3.52 on the last"""
    terms = LoanTerms(
        principal=1000,
        installment_count=520,
        frequency=Frequency.WEEKLY,
        start_date=date(2025, 1, 1),
        interest_rate_percent=Decimal("0.01"),
        interest_mode=InterestMode.COMPOUND,
    )
    schedule = generate_schedule(terms)

    assert len(schedule) == 520
    assert all(item.total_amount == Decimal("1.92") for item in schedule[:-1])
    assert schedule[-1].total_amount == Decimal("3.52")
    assert sum(item.principal_portion for item in schedule) == Decimal("1000.00")
