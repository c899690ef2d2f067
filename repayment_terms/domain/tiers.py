"""Amount tiers and rule tables shared by presets and affordability suggestions.

Every threshold lives here as ordered data so it can be tuned and tested
without touching the traversal logic in presets.py and affordability.py.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Tuple

from repayment_terms.domain.models import ComfortLevel, Frequency, PayFrequency
from repayment_terms.utils.money import ZERO

C, B, A = ComfortLevel.COMFORTABLE, ComfortLevel.BALANCED, ComfortLevel.AGGRESSIVE
WEEKLY, BIWEEKLY, MONTHLY = Frequency.WEEKLY, Frequency.BIWEEKLY, Frequency.MONTHLY


@dataclass(frozen=True)
class PresetOption:
    """Candidate schedule shape offered inside a tier"""

    frequency: Frequency
    installments: int
    label: str
    recommended: bool = False
    min_amount: Decimal = ZERO  # offered only when principal >= min_amount


@dataclass(frozen=True)
class AmountTier:
    """Principal band with its fixed comfort counts and preset candidates"""

    ceiling: Optional[Decimal]  # inclusive; None = open-ended top tier
    comfort_counts: Optional[Tuple[int, int, int]]  # (comfortable, balanced, aggressive)
    presets: Tuple[PresetOption, ...]

    def count_for(self, level: ComfortLevel) -> Optional[int]:
        if self.comfort_counts is None:
            return None
        comfortable, balanced, aggressive = self.comfort_counts
        return {C: comfortable, B: balanced, A: aggressive}[ComfortLevel(level)]


AMOUNT_TIERS: Tuple[AmountTier, ...] = (
    AmountTier(
        ceiling=Decimal("100"),
        comfort_counts=(4, 2, 1),
        presets=(
            PresetOption(WEEKLY, 1, "Pay in full (1 week)"),
            PresetOption(WEEKLY, 2, "2 weekly payments", recommended=True),
            PresetOption(WEEKLY, 4, "4 weekly payments", min_amount=Decimal("50")),
        ),
    ),
    AmountTier(
        ceiling=Decimal("300"),
        comfort_counts=(6, 4, 2),
        presets=(
            PresetOption(WEEKLY, 2, "2 weekly payments"),
            PresetOption(WEEKLY, 4, "4 weekly payments", recommended=True),
            PresetOption(BIWEEKLY, 4, "4 bi-weekly payments"),
            PresetOption(MONTHLY, 3, "3 monthly payments", min_amount=Decimal("200")),
        ),
    ),
    AmountTier(
        ceiling=Decimal("500"),
        comfort_counts=(8, 4, 2),
        presets=(
            PresetOption(WEEKLY, 2, "2 weekly payments"),
            PresetOption(WEEKLY, 4, "4 weekly payments", recommended=True),
            PresetOption(BIWEEKLY, 4, "4 bi-weekly payments"),
            PresetOption(MONTHLY, 3, "3 monthly payments"),
        ),
    ),
    AmountTier(
        ceiling=Decimal("1000"),
        comfort_counts=(10, 6, 3),
        presets=(
            PresetOption(BIWEEKLY, 4, "4 bi-weekly payments"),
            PresetOption(MONTHLY, 3, "3 monthly payments"),
            PresetOption(BIWEEKLY, 6, "6 bi-weekly payments", recommended=True),
            PresetOption(MONTHLY, 6, "6 monthly payments"),
        ),
    ),
    AmountTier(
        ceiling=Decimal("2000"),
        comfort_counts=(12, 8, 4),
        presets=(
            PresetOption(MONTHLY, 3, "3 monthly payments"),
            PresetOption(MONTHLY, 4, "4 monthly payments"),
            PresetOption(BIWEEKLY, 8, "8 bi-weekly payments", recommended=True),
            PresetOption(MONTHLY, 6, "6 monthly payments"),
        ),
    ),
    AmountTier(
        ceiling=None,
        comfort_counts=None,
        presets=(
            PresetOption(MONTHLY, 3, "3 monthly payments"),
            PresetOption(MONTHLY, 6, "6 monthly payments", recommended=True),
            PresetOption(MONTHLY, 9, "9 monthly payments"),
            PresetOption(MONTHLY, 12, "12 monthly payments"),
        ),
    ),
)


def find_tier(principal: Decimal) -> AmountTier:
    """Return the first tier whose ceiling covers principal"""
    for tier in AMOUNT_TIERS:
        if tier.ceiling is None or principal <= tier.ceiling:
            return tier
    raise LookupError(f"No amount tier covers {principal}")  # unreachable: last tier is open


# ── Income-based rules for principals above the fixed tiers ──────────────────

PAY_FREQUENCY_MULTIPLIERS: Dict[PayFrequency, Decimal] = {
    PayFrequency.WEEKLY: Decimal("4.33"),
    PayFrequency.BIWEEKLY: Decimal("2.17"),
    PayFrequency.SEMIMONTHLY: Decimal("2"),
    PayFrequency.MONTHLY: Decimal("1"),
}

WEEKS_PER_PAYMENT: Dict[PayFrequency, int] = {
    PayFrequency.WEEKLY: 1,
    PayFrequency.BIWEEKLY: 2,
    PayFrequency.SEMIMONTHLY: 2,
    PayFrequency.MONTHLY: 4,
}

COMFORT_BUDGET_SHARE: Dict[ComfortLevel, Decimal] = {
    C: Decimal("0.15"),
    B: Decimal("0.22"),
    A: Decimal("0.30"),
}

COMFORT_COUNT_BOUNDS: Dict[ComfortLevel, Tuple[int, int]] = {
    C: (8, 24),
    B: (4, 12),
    A: (2, 6),
}

MIN_LARGE_LOAN_PAYMENT = Decimal("50")

COMFORT_DESCRIPTIONS: Dict[ComfortLevel, str] = {
    C: "Easy on your budget, longer payoff time",
    B: "Recommended balance of comfort and speed",
    A: "Fastest payoff, tighter budget",
}

# ── Payment safety thresholds (percent of disposable income) ─────────────────

UNSAFE_PAYMENT_PERCENT = Decimal("35")
AGGRESSIVE_PAYMENT_PERCENT = Decimal("25")
LOW_DISPOSABLE_INCOME_RATIO = Decimal("0.1")
