"""Amortization schedule generation for loan repayment"""

from datetime import date
from decimal import Decimal
from typing import Dict, List

from repayment_terms.domain.exceptions import InvalidTermsError
from repayment_terms.domain.models import Frequency, InterestMode, LoanTerms, ScheduleItem
from repayment_terms.utils.date_utils import generate_due_dates
from repayment_terms.utils.money import HUNDRED, ZERO, floor_money, round_money

PERIODS_PER_YEAR: Dict[Frequency, int] = {
    Frequency.WEEKLY: 52,
    Frequency.BIWEEKLY: 26,
    Frequency.MONTHLY: 12,
}


def generate_schedule(terms: LoanTerms) -> List[ScheduleItem]:
    """
    Materialize dated installments for fully resolved loan terms.

    Requirements:
    - Simple mode: flat loan-level interest (principal x rate / 100), split evenly
    - Compound mode: level payment on the declining balance, per-period rate
      derived from the frequency (rate / 52, / 26 or / 12)
    - Last installment absorbs rounding remainder so the schedule sums exactly
      to principal + total interest
    - First due date is one period after start_date

    Example:
        $1000.00 at 10% simple, 3 monthly installments
        → [$366.66, $366.66, $366.68] (principal 333.33/333.33/333.34)

    Raises:
        InvalidTermsError: terms is not a LoanTerms instance
    """
    if not isinstance(terms, LoanTerms):
        raise InvalidTermsError(f"expected LoanTerms, got {type(terms).__name__}")

    due_dates = generate_due_dates(terms.start_date, terms.frequency, terms.installment_count)

    if terms.interest_mode is InterestMode.COMPOUND and terms.interest_rate_percent > ZERO:
        return _compound_schedule(terms, due_dates)
    return _flat_schedule(terms, due_dates)


def compute_total_interest(terms: LoanTerms) -> Decimal:
    """Total interest the schedule for these terms will carry"""
    if terms.interest_rate_percent == ZERO:
        return ZERO
    if terms.interest_mode is InterestMode.SIMPLE:
        return round_money(terms.principal * terms.interest_rate_percent / HUNDRED)
    return sum((item.interest_portion for item in generate_schedule(terms)), ZERO)


def periodic_rate(terms: LoanTerms) -> Decimal:
    return terms.interest_rate_percent / HUNDRED / PERIODS_PER_YEAR[terms.frequency]


def _split(amount: Decimal, count: int) -> Decimal:
    """Even per-installment share; rounds down if rounding up would overdraw the last one"""
    share = round_money(amount / count)
    if share * (count - 1) > amount:
        share = floor_money(amount / count)
    return share


def _flat_schedule(terms: LoanTerms, due_dates: List[date]) -> List[ScheduleItem]:
    count = terms.installment_count
    total_interest = compute_total_interest(terms)
    principal_share = _split(terms.principal, count)
    interest_share = _split(total_interest, count)

    items = []
    for i, due_date in enumerate(due_dates):
        if i == count - 1:
            principal_portion = terms.principal - principal_share * (count - 1)
            interest_portion = total_interest - interest_share * (count - 1)
        else:
            principal_portion = principal_share
            interest_portion = interest_share

        items.append(
            ScheduleItem(
                due_date=due_date,
                total_amount=principal_portion + interest_portion,
                principal_portion=principal_portion,
                interest_portion=interest_portion,
            )
        )

    return items


def _compound_schedule(terms: LoanTerms, due_dates: List[date]) -> List[ScheduleItem]:
    count = terms.installment_count
    rate = periodic_rate(terms)

    # payment = P * r / (1 - (1 + r)^-n)
    factor = (1 + rate) ** count
    payment = round_money(terms.principal * rate * factor / (factor - 1))

    items = []
    balance = terms.principal
    for i, due_date in enumerate(due_dates):
        interest_portion = round_money(balance * rate)
        if i == count - 1:
            principal_portion = balance
        else:
            principal_portion = min(payment - interest_portion, balance)

        items.append(
            ScheduleItem(
                due_date=due_date,
                total_amount=principal_portion + interest_portion,
                principal_portion=principal_portion,
                interest_portion=interest_portion,
            )
        )
        balance -= principal_portion

    return items
