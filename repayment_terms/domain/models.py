"""Domain models - pure Python dataclasses representing repayment terms"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterator, Optional

from repayment_terms.domain.exceptions import InvalidAmountError, InvalidTermsError
from repayment_terms.utils.money import ZERO, to_decimal, to_money


class Frequency(str, Enum):
    """How often a loan installment falls due"""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class PayFrequency(str, Enum):
    """How often the borrower is paid"""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    MONTHLY = "monthly"


class InterestMode(str, Enum):
    SIMPLE = "simple"
    COMPOUND = "compound"


class ComfortLevel(str, Enum):
    """Risk/speed tradeoff, ordered slowest to fastest"""

    COMFORTABLE = "comfortable"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"


COMFORT_ORDER = (ComfortLevel.COMFORTABLE, ComfortLevel.BALANCED, ComfortLevel.AGGRESSIVE)


class FeeType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"
    COMBINED = "combined"


def parse_date(value: Any, field_name: str = "start_date") -> date:
    """Accept a date, datetime or ISO YYYY-MM-DD string"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise InvalidTermsError(f"{field_name} is not a valid ISO date: {value!r}")
    raise InvalidTermsError(f"{field_name} must be a date, got {type(value).__name__}")


@dataclass(frozen=True)
class LoanTerms:
    """Fully resolved terms handed to the scheduler"""

    principal: Decimal
    installment_count: int
    frequency: Frequency
    start_date: date
    interest_rate_percent: Decimal = ZERO
    interest_mode: InterestMode = InterestMode.SIMPLE

    def __post_init__(self) -> None:
        try:
            principal = to_money(self.principal, "principal")
            rate = to_decimal(self.interest_rate_percent, "interest_rate_percent")
        except InvalidAmountError as e:
            raise InvalidTermsError(str(e))

        if principal <= ZERO:
            raise InvalidTermsError(f"principal must be > 0, got {principal}")
        if rate < ZERO:
            raise InvalidTermsError(f"interest_rate_percent must be >= 0, got {rate}")
        if isinstance(self.installment_count, bool) or not isinstance(self.installment_count, int):
            raise InvalidTermsError(f"installment_count must be an integer, got {self.installment_count!r}")
        if self.installment_count < 1:
            raise InvalidTermsError(f"installment_count must be >= 1, got {self.installment_count}")

        try:
            frequency = Frequency(self.frequency)
            mode = InterestMode(self.interest_mode)
        except ValueError as e:
            raise InvalidTermsError(str(e))

        # Frozen dataclass: normalise fields in place
        object.__setattr__(self, "principal", principal)
        object.__setattr__(self, "interest_rate_percent", rate)
        object.__setattr__(self, "frequency", frequency)
        object.__setattr__(self, "interest_mode", mode)
        object.__setattr__(self, "start_date", parse_date(self.start_date))


@dataclass
class ScheduleItem:
    """Single dated installment in an amortization schedule"""

    due_date: date
    total_amount: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    is_paid: bool = False
    paid_at: Optional[datetime] = None

    def to_record(self) -> Dict[str, Any]:
        """Flat row for the persistence layer"""
        return {
            "due_date": self.due_date.isoformat(),
            "amount": str(self.total_amount),
            "principal_amount": str(self.principal_portion),
            "interest_amount": str(self.interest_portion),
            "is_paid": self.is_paid,
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
        }


@dataclass
class FinancialProfile:
    """Borrower income snapshot supplied by the financial-profile owner"""

    pay_frequency: PayFrequency
    pay_amount: Decimal
    monthly_income: Decimal
    monthly_expenses: Decimal
    disposable_income: Decimal
    comfort_level: ComfortLevel = ComfortLevel.BALANCED
    pay_day_of_week: Optional[int] = None  # 0 = Monday
    pay_day_of_month: Optional[int] = None
    second_pay_day_of_month: Optional[int] = None
    preferred_payment_buffer_days: int = 2

    def __post_init__(self) -> None:
        self.pay_frequency = PayFrequency(self.pay_frequency)
        self.comfort_level = ComfortLevel(self.comfort_level)
        self.pay_amount = to_money(self.pay_amount, "pay_amount")
        self.monthly_income = to_money(self.monthly_income, "monthly_income")
        self.monthly_expenses = to_money(self.monthly_expenses, "monthly_expenses")
        self.disposable_income = to_money(self.disposable_income, "disposable_income")


@dataclass
class ComfortSuggestion:
    """Installment count/size pair for one comfort level"""

    level: ComfortLevel
    frequency: PayFrequency
    payment_amount: Decimal
    number_of_payments: int
    percent_of_disposable: int
    weeks_to_payoff: int
    total_repayment: Decimal
    description: str = ""
    duration_fee: Optional[Decimal] = None  # set when duration fees are requested
    duration_fee_percent: Optional[int] = None


@dataclass
class ComfortSuggestions:
    comfortable: ComfortSuggestion
    balanced: ComfortSuggestion
    aggressive: ComfortSuggestion

    def for_level(self, level: ComfortLevel) -> ComfortSuggestion:
        return getattr(self, ComfortLevel(level).value)

    def recommended_for(self, profile: FinancialProfile) -> ComfortSuggestion:
        return self.for_level(profile.comfort_level)

    def __iter__(self) -> Iterator[ComfortSuggestion]:
        return iter([self.for_level(level) for level in COMFORT_ORDER])


@dataclass
class RepaymentPreset:
    """Selectable schedule shape for borrowers without income data"""

    label: str
    frequency: Frequency
    installments: int
    payment_amount: Decimal
    recommended: bool = False
    duration_fee: Optional[Decimal] = None
    duration_fee_percent: Optional[int] = None
    total_amount: Optional[Decimal] = None
    total_weeks: Optional[int] = None


@dataclass(frozen=True)
class FeePolicy:
    """Admin-configured platform fee settings"""

    enabled: bool = False
    type: FeeType = FeeType.PERCENTAGE
    percentage: Decimal = ZERO
    fixed_amount: Decimal = ZERO
    min_fee: Decimal = ZERO  # 0 = no lower bound
    max_fee: Decimal = ZERO  # 0 = no upper bound
    fee_label: str = "Service Fee"
    fee_description: str = "Platform processing fee"


@dataclass
class FeeCalculation:
    """Fee breakdown for a single payment"""

    gross_amount: Decimal
    platform_fee: Decimal
    net_amount: Decimal
    fee_label: str
    fee_description: str
    fee_enabled: bool = False
