"""Duration-based fee tiers: the longer the repayment term, the higher the fee"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from repayment_terms.domain.models import InterestMode, PayFrequency
from repayment_terms.domain.tiers import WEEKS_PER_PAYMENT
from repayment_terms.utils.money import HUNDRED, ZERO, MoneyLike, ceil_units, to_money


@dataclass(frozen=True)
class DurationFeeTier:
    min_weeks: int
    max_weeks: Optional[int]  # None = no upper bound
    fee_percent: int
    label: str
    description: str

    def covers(self, total_weeks: int) -> bool:
        return total_weeks >= self.min_weeks and (self.max_weeks is None or total_weeks <= self.max_weeks)


DURATION_FEE_TIERS: Tuple[DurationFeeTier, ...] = (
    DurationFeeTier(0, 4, 0, "No Fee", "Repay within 4 weeks"),
    DurationFeeTier(5, 8, 2, "2% Fee", "5-8 weeks"),
    DurationFeeTier(9, 12, 4, "4% Fee", "9-12 weeks (2-3 months)"),
    DurationFeeTier(13, 24, 6, "6% Fee", "3-6 months"),
    DurationFeeTier(25, 52, 8, "8% Fee", "6-12 months"),
    DurationFeeTier(53, None, 10, "10% Fee", "Over 12 months"),
)


@dataclass
class DurationFee:
    fee_percent: int
    fee_amount: Decimal
    total_weeks: int
    tier: DurationFeeTier


@dataclass
class DurationFeeSavings:
    """What paying one tier faster would save"""

    faster_payments: int
    saved_amount: Decimal


@dataclass
class DurationFeeTotal:
    principal: Decimal
    interest_amount: Decimal
    duration_fee: Decimal
    duration_fee_percent: int
    total_amount: Decimal
    payment_amount: Decimal
    total_weeks: int
    fee_tier: DurationFeeTier
    savings: Optional[DurationFeeSavings] = None


def find_duration_tier(total_weeks: int) -> DurationFeeTier:
    for tier in DURATION_FEE_TIERS:
        if tier.covers(total_weeks):
            return tier
    return DURATION_FEE_TIERS[-1]


def weeks_per_payment(frequency: str) -> int:
    return WEEKS_PER_PAYMENT[PayFrequency(frequency)]


def calculate_duration_fee(principal: MoneyLike, frequency: str, number_of_payments: int) -> DurationFee:
    """Fee percent for the term's tier, charged as whole money units rounded up"""
    principal = to_money(principal, "principal")
    total_weeks = weeks_per_payment(frequency) * number_of_payments
    tier = find_duration_tier(total_weeks)

    return DurationFee(
        fee_percent=tier.fee_percent,
        fee_amount=ceil_units(principal * tier.fee_percent / HUNDRED),
        total_weeks=total_weeks,
        tier=tier,
    )


def calculate_total_with_duration_fee(
    principal: MoneyLike,
    interest_rate_percent: MoneyLike,
    interest_mode: str,
    frequency: str,
    number_of_payments: int,
) -> DurationFeeTotal:
    """
    Total loan cost including term-scaled interest and the duration fee.

    Interest here is annualised against the term length (term months = weeks / 4),
    simple or monthly-compounded, and rounded up to whole money units.
    """
    principal = to_money(principal, "principal")
    rate = to_money(interest_rate_percent, "interest_rate_percent")
    term_months = Decimal(weeks_per_payment(frequency) * number_of_payments) / 4

    interest_amount = ZERO
    if rate > ZERO:
        if InterestMode(interest_mode) is InterestMode.SIMPLE:
            interest_amount = ceil_units(principal * rate / HUNDRED * term_months / 12)
        else:
            # Fractional month exponents need float pow
            growth = Decimal(repr(math.pow(1 + float(rate) / 100 / 12, float(term_months))))
            interest_amount = ceil_units(principal * growth - principal)

    fee = calculate_duration_fee(principal, frequency, number_of_payments)
    total_amount = principal + interest_amount + fee.fee_amount
    payment_amount = ceil_units(total_amount / number_of_payments)

    savings = None
    tier_index = DURATION_FEE_TIERS.index(fee.tier)
    if fee.fee_percent > 0 and tier_index > 0:
        lower_tier = DURATION_FEE_TIERS[tier_index - 1]
        faster_payments = math.ceil(lower_tier.max_weeks / weeks_per_payment(frequency))
        saved_amount = fee.fee_amount - ceil_units(principal * lower_tier.fee_percent / HUNDRED)
        if saved_amount > ZERO and faster_payments >= 1:
            savings = DurationFeeSavings(faster_payments=faster_payments, saved_amount=saved_amount)

    return DurationFeeTotal(
        principal=principal,
        interest_amount=interest_amount,
        duration_fee=fee.fee_amount,
        duration_fee_percent=fee.fee_percent,
        total_amount=total_amount,
        payment_amount=payment_amount,
        total_weeks=fee.total_weeks,
        fee_tier=fee.tier,
        savings=savings,
    )


def duration_fee_explanation(total_weeks: int) -> str:
    tier = find_duration_tier(total_weeks)
    if tier.fee_percent == 0:
        return "No extra fees for repaying within 4 weeks!"
    return f"A {tier.fee_percent}% fee applies for {tier.description.lower()}. Pay faster to reduce fees!"
