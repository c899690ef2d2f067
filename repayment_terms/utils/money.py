"""Fixed-point money helpers.

All monetary values are decimal.Decimal quantized to cents. Floats are only
accepted at the boundary and converted through their repr so 0.1 stays 0.1.
"""

from decimal import ROUND_CEILING, ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from repayment_terms.domain.exceptions import InvalidAmountError

MoneyLike = Union[Decimal, int, float, str]

ZERO = Decimal("0")
CENT = Decimal("0.01")
UNIT = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: MoneyLike, field: str = "amount") -> Decimal:
    """Convert boundary input to Decimal, rejecting bools, NaN and infinities"""
    if isinstance(value, bool):
        raise InvalidAmountError(f"{field} must be numeric, got bool")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(f"{field} is not a number: {value!r}")
    if not result.is_finite():
        raise InvalidAmountError(f"{field} must be finite, got {value!r}")
    return result


def to_money(value: MoneyLike, field: str = "amount") -> Decimal:
    """Convert boundary input to a cent-quantized Decimal"""
    return round_money(to_decimal(value, field))


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def floor_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_DOWN)


def round_units(value: Decimal) -> Decimal:
    """Round half-up to whole money units (Math.round for positive values)"""
    return value.quantize(UNIT, rounding=ROUND_HALF_UP)


def ceil_units(value: Decimal) -> Decimal:
    """Round up to whole money units, returned with cent precision"""
    return value.quantize(UNIT, rounding=ROUND_CEILING).quantize(CENT)
