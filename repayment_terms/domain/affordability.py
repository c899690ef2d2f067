"""Income-aware repayment suggestions - core affordability logic.

A borrower's disposable income (supplied by the financial-profile owner, never
derived here) bounds how fast each comfort level repays. Small loans use the
fixed installment counts of their amount tier; larger loans size a payment
from a share of disposable income and clamp the resulting count.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Mapping, Optional

from repayment_terms.domain.duration_fees import calculate_duration_fee
from repayment_terms.domain.exceptions import InvalidAmountError
from repayment_terms.domain.models import (
    COMFORT_ORDER,
    ComfortLevel,
    ComfortSuggestion,
    ComfortSuggestions,
    FinancialProfile,
    PayFrequency,
)
from repayment_terms.domain.tiers import (
    AGGRESSIVE_PAYMENT_PERCENT,
    COMFORT_BUDGET_SHARE,
    COMFORT_COUNT_BOUNDS,
    COMFORT_DESCRIPTIONS,
    LOW_DISPOSABLE_INCOME_RATIO,
    MIN_LARGE_LOAN_PAYMENT,
    PAY_FREQUENCY_MULTIPLIERS,
    UNSAFE_PAYMENT_PERCENT,
    WEEKS_PER_PAYMENT,
    find_tier,
)
from repayment_terms.utils.date_utils import add_months, clamp_day
from repayment_terms.utils.money import HUNDRED, ZERO, MoneyLike, ceil_units, round_units, to_money


def suggest(
    principal: MoneyLike,
    profile: FinancialProfile,
    include_duration_fees: bool = False,
) -> Optional[ComfortSuggestions]:
    """
    Build comfortable / balanced / aggressive suggestions for a loan.

    Returns None when disposable income is zero or negative: no safe
    suggestion exists and the caller falls back to presets or manual entry.
    With include_duration_fees, each suggestion carries its duration fee and
    the fee is added to total_repayment (payment_amount stays principal-only).

    Raises:
        InvalidAmountError: principal is not positive
    """
    principal = to_money(principal, "principal")
    if principal <= ZERO:
        raise InvalidAmountError(f"principal must be > 0, got {principal}")
    if profile.disposable_income <= ZERO:
        return None

    built = {
        level: _suggest_for_level(principal, profile, level, include_duration_fees) for level in COMFORT_ORDER
    }
    return ComfortSuggestions(
        comfortable=built[ComfortLevel.COMFORTABLE],
        balanced=built[ComfortLevel.BALANCED],
        aggressive=built[ComfortLevel.AGGRESSIVE],
    )


def installment_count(principal: Decimal, profile: FinancialProfile, level: ComfortLevel) -> int:
    """Number of payments for a comfort level"""
    fixed = find_tier(principal).count_for(level)
    if fixed is not None:
        return fixed

    multiplier = PAY_FREQUENCY_MULTIPLIERS[profile.pay_frequency]
    monthly_budget = profile.disposable_income * COMFORT_BUDGET_SHARE[level]
    payment = max(round_units(monthly_budget / multiplier), MIN_LARGE_LOAN_PAYMENT)
    count = math.ceil(principal / payment)

    low, high = COMFORT_COUNT_BOUNDS[level]
    return min(max(count, low), high)


def _suggest_for_level(
    principal: Decimal,
    profile: FinancialProfile,
    level: ComfortLevel,
    include_duration_fees: bool = False,
) -> ComfortSuggestion:
    count = installment_count(principal, profile, level)
    # Principal only; interest is applied when the chosen shape is scheduled
    payment_amount = ceil_units(principal / count)
    monthly_equivalent = payment_amount * PAY_FREQUENCY_MULTIPLIERS[profile.pay_frequency]
    percent = int(round_units(monthly_equivalent / profile.disposable_income * HUNDRED))

    total_repayment = payment_amount * count
    duration_fee = duration_fee_percent = None
    if include_duration_fees:
        fee = calculate_duration_fee(principal, profile.pay_frequency, count)
        duration_fee, duration_fee_percent = fee.fee_amount, fee.fee_percent
        total_repayment += duration_fee

    return ComfortSuggestion(
        level=level,
        frequency=profile.pay_frequency,
        payment_amount=payment_amount,
        number_of_payments=count,
        percent_of_disposable=min(percent, 100),
        weeks_to_payoff=count * WEEKS_PER_PAYMENT[profile.pay_frequency],
        total_repayment=total_repayment,
        description=COMFORT_DESCRIPTIONS[level],
        duration_fee=duration_fee,
        duration_fee_percent=duration_fee_percent,
    )


# ── Income and expense derivation ────────────────────────────────────────────

EXPENSE_CATEGORIES = (
    "rent_mortgage",
    "utilities",
    "transportation",
    "insurance",
    "groceries",
    "phone",
    "subscriptions",
    "childcare",
    "other_bills",
    "existing_debt_payments",
)


def calculate_monthly_income(pay_amount: MoneyLike, pay_frequency: str) -> Decimal:
    return to_money(to_money(pay_amount, "pay_amount") * PAY_FREQUENCY_MULTIPLIERS[PayFrequency(pay_frequency)])


def calculate_monthly_expenses(expenses: Mapping[str, MoneyLike]) -> Decimal:
    """Sum the named expense categories; missing ones count as zero"""
    unknown = set(expenses) - set(EXPENSE_CATEGORIES)
    if unknown:
        raise ValueError(f"Unknown expense categories: {', '.join(sorted(unknown))}")
    return sum((to_money(expenses[name], name) for name in EXPENSE_CATEGORIES if name in expenses), ZERO)


def calculate_disposable_income(monthly_income: MoneyLike, monthly_expenses: MoneyLike) -> Decimal:
    return max(ZERO, to_money(monthly_income) - to_money(monthly_expenses))


def build_financial_profile(
    pay_frequency: str,
    pay_amount: MoneyLike,
    expenses: Optional[Mapping[str, MoneyLike]] = None,
    comfort_level: str = ComfortLevel.BALANCED,
    **pay_calendar,
) -> FinancialProfile:
    """Derive a FinancialProfile from raw pay and expense figures"""
    monthly_income = calculate_monthly_income(pay_amount, pay_frequency)
    monthly_expenses = calculate_monthly_expenses(expenses or {})
    return FinancialProfile(
        pay_frequency=pay_frequency,
        pay_amount=pay_amount,
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        disposable_income=calculate_disposable_income(monthly_income, monthly_expenses),
        comfort_level=comfort_level,
        **pay_calendar,
    )


def affordability_warning(principal: MoneyLike, disposable_income: MoneyLike) -> Optional[str]:
    principal = to_money(principal, "principal")
    disposable_income = to_money(disposable_income, "disposable_income")
    if disposable_income <= ZERO:
        return "Your expenses exceed your income. Consider adjusting your budget before taking a loan."
    if disposable_income < principal * LOW_DISPOSABLE_INCOME_RATIO:
        return "Your disposable income is low. This loan may be difficult to repay."
    return None


# ── Payment safety ───────────────────────────────────────────────────────────


@dataclass
class PaymentSafety:
    safe: bool
    percentage: Decimal
    message: str


def is_payment_safe(payment_amount: MoneyLike, pay_frequency: str, disposable_income: MoneyLike) -> PaymentSafety:
    """
    Judge a per-period payment against monthly disposable income.

    Bands: above 35% is unsafe, 25-35% is aggressive but manageable,
    anything lower is comfortable. A non-positive disposable income is
    always unsafe.
    """
    disposable_income = to_money(disposable_income, "disposable_income")
    monthly_payment = to_money(payment_amount) * PAY_FREQUENCY_MULTIPLIERS[PayFrequency(pay_frequency)]

    if disposable_income <= ZERO:
        return PaymentSafety(
            safe=False,
            percentage=HUNDRED,
            message="You have no disposable income to cover this payment.",
        )

    percentage = (monthly_payment / disposable_income * HUNDRED).quantize(Decimal("0.1"))

    if percentage > UNSAFE_PAYMENT_PERCENT:
        return PaymentSafety(
            safe=False,
            percentage=percentage,
            message="This payment is more than 35% of your disposable income and may be difficult to maintain.",
        )
    if percentage > AGGRESSIVE_PAYMENT_PERCENT:
        return PaymentSafety(
            safe=True,
            percentage=percentage,
            message="This payment is aggressive but manageable if you have no unexpected expenses.",
        )
    return PaymentSafety(
        safe=True,
        percentage=percentage,
        message="This payment is within a comfortable range for your budget.",
    )


# ── Pay calendar ─────────────────────────────────────────────────────────────

DEFAULT_PAY_WEEKDAY = 4  # Friday

PAY_FREQUENCY_LABELS = {
    PayFrequency.WEEKLY: "Weekly",
    PayFrequency.BIWEEKLY: "Every 2 weeks",
    PayFrequency.SEMIMONTHLY: "Twice a month",
    PayFrequency.MONTHLY: "Monthly",
}


def format_pay_frequency(frequency: str) -> str:
    return PAY_FREQUENCY_LABELS[PayFrequency(frequency)]


def next_pay_date(profile: FinancialProfile, today: date) -> date:
    """First pay date strictly after today"""
    if profile.pay_frequency in (PayFrequency.WEEKLY, PayFrequency.BIWEEKLY):
        weekday = DEFAULT_PAY_WEEKDAY if profile.pay_day_of_week is None else profile.pay_day_of_week
        days_until = (weekday - today.weekday()) % 7 or 7
        return today + timedelta(days=days_until)

    pay_days = [profile.pay_day_of_month or 1]
    if profile.pay_frequency is PayFrequency.SEMIMONTHLY:
        pay_days.append(profile.second_pay_day_of_month or 15)

    pay_days.sort()
    for day in pay_days:
        candidate = clamp_day(today.year, today.month, day)
        if candidate > today:
            return candidate

    next_month = add_months(today.replace(day=1), 1)
    return clamp_day(next_month.year, next_month.month, pay_days[0])


def suggested_first_payment_date(profile: FinancialProfile, today: date) -> date:
    """Next pay date plus the borrower's preferred buffer"""
    return next_pay_date(profile, today) + timedelta(days=profile.preferred_payment_buffer_days)
