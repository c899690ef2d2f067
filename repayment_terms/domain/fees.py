"""Platform fee calculation for disbursements and repayments"""

from decimal import Decimal

from repayment_terms.domain.exceptions import InvalidAmountError
from repayment_terms.domain.models import FeeCalculation, FeePolicy, FeeType
from repayment_terms.utils.money import HUNDRED, ZERO, MoneyLike, round_money, to_decimal, to_money

NO_FEE_LABEL = "No Fee"
NO_FEE_DESCRIPTION = "No platform fee"


def calculate_fee(amount: MoneyLike, policy: FeePolicy) -> FeeCalculation:
    """
    Split a payment into platform fee and the two sides of the transfer.

    Both sides come from the same amount and fee:
    - gross_amount = amount + fee (what a payer sends when the fee is added on top)
    - net_amount = amount - fee (what a receiver keeps when the fee is deducted)

    The caller decides which side to show.
    """
    amount = to_money(amount)
    if amount < ZERO:
        raise InvalidAmountError(f"amount must be >= 0, got {amount}")

    if not policy.enabled:
        return FeeCalculation(
            gross_amount=amount,
            platform_fee=ZERO,
            net_amount=amount,
            fee_label=NO_FEE_LABEL,
            fee_description=NO_FEE_DESCRIPTION,
            fee_enabled=False,
        )

    fee = round_money(clamp_fee(raw_fee(amount, policy), policy))
    return FeeCalculation(
        gross_amount=amount + fee,
        platform_fee=fee,
        net_amount=amount - fee,
        fee_label=policy.fee_label,
        fee_description=policy.fee_description,
        fee_enabled=True,
    )


def raw_fee(amount: Decimal, policy: FeePolicy) -> Decimal:
    fee_type = FeeType(policy.type)
    fixed = to_decimal(policy.fixed_amount, "fixed_amount")
    percentage = to_decimal(policy.percentage, "percentage")

    if fee_type is FeeType.FIXED:
        return fixed
    if fee_type is FeeType.PERCENTAGE:
        return amount * percentage / HUNDRED
    return fixed + amount * percentage / HUNDRED


def clamp_fee(fee: Decimal, policy: FeePolicy) -> Decimal:
    """Apply min then max bounds; a zero bound is open. max_fee wins if min > max."""
    min_fee = to_decimal(policy.min_fee, "min_fee")
    max_fee = to_decimal(policy.max_fee, "max_fee")

    if min_fee > ZERO and fee < min_fee:
        fee = min_fee
    if max_fee > ZERO and fee > max_fee:
        fee = max_fee
    return max(fee, ZERO)


def format_fee_description(policy: FeePolicy) -> str:
    """
    Human-readable fee summary for a confirmation screen.

    Examples:
        disabled → "No fees"
        fixed $1.50 → "$1.50 per transaction"
        2.5%, min 0.50, max 25 → "2.5% (min $0.50, max $25.00)"
        combined $0.30 + 2.9% → "$0.30 + 2.9% per transaction"
    """
    if not policy.enabled:
        return "No fees"

    fee_type = FeeType(policy.type)
    fixed = _dollars(to_decimal(policy.fixed_amount, "fixed_amount"))
    if fee_type is FeeType.FIXED:
        return f"{fixed} per transaction"

    percentage = to_decimal(policy.percentage, "percentage").normalize()
    description = f"{percentage:f}%"
    if fee_type is FeeType.COMBINED:
        description = f"{fixed} + {description} per transaction"

    bounds = []
    min_fee = to_decimal(policy.min_fee, "min_fee")
    max_fee = to_decimal(policy.max_fee, "max_fee")
    if min_fee > ZERO:
        bounds.append(f"min {_dollars(min_fee)}")
    if max_fee > ZERO:
        bounds.append(f"max {_dollars(max_fee)}")
    if bounds:
        description += f" ({', '.join(bounds)})"
    return description


def _dollars(amount: Decimal) -> str:
    return f"${round_money(amount)}"
