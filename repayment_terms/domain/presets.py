"""Amount-tiered repayment presets for borrowers without income data"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from repayment_terms.domain.duration_fees import calculate_total_with_duration_fee
from repayment_terms.domain.models import Frequency, InterestMode, RepaymentPreset
from repayment_terms.domain.tiers import find_tier
from repayment_terms.utils.money import ZERO, MoneyLike, ceil_units, to_money


def get_presets(
    principal: MoneyLike,
    interest_rate_percent: MoneyLike = 0,
    include_duration_fees: bool = False,
) -> List[RepaymentPreset]:
    """
    Offer 2-4 schedule shapes sized to the loan amount.

    The recommended preset mirrors the tier's balanced comfort level, so a
    borrower without a financial profile lands on the same installment count
    the affordability advisor would suggest by default.

    Returns [] for a non-positive principal.
    """
    principal = to_money(principal, "principal")
    if principal <= ZERO:
        return []

    tier = find_tier(principal)
    presets = []
    for option in tier.presets:
        if principal < option.min_amount:
            continue

        if include_duration_fees:
            total = calculate_total_with_duration_fee(
                principal,
                interest_rate_percent,
                InterestMode.SIMPLE,
                option.frequency,
                option.installments,
            )
            presets.append(
                RepaymentPreset(
                    label=option.label,
                    frequency=option.frequency,
                    installments=option.installments,
                    payment_amount=total.payment_amount,
                    recommended=option.recommended,
                    duration_fee=total.duration_fee,
                    duration_fee_percent=total.duration_fee_percent,
                    total_amount=total.total_amount,
                    total_weeks=total.total_weeks,
                )
            )
        else:
            presets.append(
                RepaymentPreset(
                    label=option.label,
                    frequency=option.frequency,
                    installments=option.installments,
                    payment_amount=ceil_units(principal / option.installments),
                    recommended=option.recommended,
                )
            )

    return presets


def recommended_preset(presets: List[RepaymentPreset]) -> Optional[RepaymentPreset]:
    return next((p for p in presets if p.recommended), None)


# ── Manual schedule validation ───────────────────────────────────────────────

MIN_PAYMENT_FLOOR = Decimal("10")
MIN_PAYMENT_SHARE = Decimal("0.05")

# (amount ceiling, {frequency: max installments}); None ceiling = everything above
MAX_INSTALLMENTS: Tuple[Tuple[Optional[Decimal], Dict[Frequency, int]], ...] = (
    (Decimal("100"), {Frequency.WEEKLY: 4, Frequency.BIWEEKLY: 2, Frequency.MONTHLY: 2}),
    (Decimal("500"), {Frequency.WEEKLY: 8, Frequency.BIWEEKLY: 6, Frequency.MONTHLY: 3}),
    (Decimal("2000"), {Frequency.WEEKLY: 24, Frequency.BIWEEKLY: 12, Frequency.MONTHLY: 6}),
    (Decimal("10000"), {Frequency.WEEKLY: 52, Frequency.BIWEEKLY: 24, Frequency.MONTHLY: 12}),
    (None, {Frequency.WEEKLY: 104, Frequency.BIWEEKLY: 48, Frequency.MONTHLY: 24}),
)


@dataclass
class ScheduleValidation:
    valid: bool
    payment_amount: Decimal
    message: Optional[str] = None


def max_installments_for(amount: Decimal, frequency: Frequency) -> int:
    for ceiling, limits in MAX_INSTALLMENTS:
        if ceiling is None or amount <= ceiling:
            return limits[Frequency(frequency)]
    raise LookupError(f"No installment limit covers {amount}")


def validate_repayment_schedule(amount: MoneyLike, frequency: str, installments: int) -> ScheduleValidation:
    """
    Check that a hand-entered schedule is realistic for the loan amount.

    Rules:
    - Each payment must be at least max($10, 5% of the loan)
    - Installment count is capped per amount band and frequency
      (e.g. a $100 loan cannot run longer than about a month)
    """
    amount = to_money(amount)
    if amount <= ZERO:
        return ScheduleValidation(valid=False, payment_amount=ZERO, message="Invalid loan amount")
    if not installments or installments <= 0:
        return ScheduleValidation(valid=False, payment_amount=ZERO, message="Invalid number of installments")

    frequency = Frequency(frequency)
    min_payment = max(MIN_PAYMENT_FLOOR, amount * MIN_PAYMENT_SHARE)
    payment_amount = ceil_units(amount / installments)

    if payment_amount < min_payment:
        return ScheduleValidation(
            valid=False,
            payment_amount=payment_amount,
            message=f"Payment amount is too small. Each payment should be at least ${min_payment:.0f}.",
        )

    max_installments = max_installments_for(amount, frequency)
    if installments > max_installments:
        return ScheduleValidation(
            valid=False,
            payment_amount=payment_amount,
            message=(
                f"Repayment period is too long. Maximum {max_installments} "
                f"{frequency.value} payments for this loan amount."
            ),
        )

    return ScheduleValidation(valid=True, payment_amount=payment_amount)
