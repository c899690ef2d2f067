"""Repayment terms pipeline - composes the pure calculators with logging and metrics.

Flow:
1. Offer schedule shapes: income-based suggestions when the borrower has a
   usable financial profile, amount-tiered presets otherwise
2. Materialize the chosen shape into a dated amortization schedule
3. Break down the platform fee for each payment, independently of 1-2
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Union

from repayment_terms.domain.affordability import affordability_warning, suggest
from repayment_terms.domain.amortization import generate_schedule
from repayment_terms.domain.exceptions import DomainException, InvalidAmountError
from repayment_terms.domain.fees import calculate_fee
from repayment_terms.domain.models import (
    ComfortSuggestion,
    ComfortSuggestions,
    FeeCalculation,
    FeePolicy,
    FeeType,
    FinancialProfile,
    Frequency,
    InterestMode,
    LoanTerms,
    PayFrequency,
    RepaymentPreset,
    ScheduleItem,
)
from repayment_terms.domain.presets import get_presets, recommended_preset
from repayment_terms.infrastructure.observability.logging import (
    log_fee_calculated,
    log_schedule_generated,
    log_schedule_options,
)
from repayment_terms.infrastructure.observability.metrics import (
    calculation_duration_histogram,
    record_fee,
    record_schedule,
    record_schedule_options,
)
from repayment_terms.utils.money import ZERO, MoneyLike, to_money

logger = logging.getLogger(__name__)

# Loan schedules have no semimonthly period; two pays a month repay every two weeks
PAY_TO_LOAN_FREQUENCY = {
    PayFrequency.WEEKLY: Frequency.WEEKLY,
    PayFrequency.BIWEEKLY: Frequency.BIWEEKLY,
    PayFrequency.SEMIMONTHLY: Frequency.BIWEEKLY,
    PayFrequency.MONTHLY: Frequency.MONTHLY,
}


@dataclass
class ScheduleOptions:
    """Schedule shapes offered to a borrower for one principal"""

    source: str  # suggestions | presets | presets_fallback
    presets: List[RepaymentPreset] = field(default_factory=list)
    suggestions: Optional[ComfortSuggestions] = None
    recommended: Optional[Union[ComfortSuggestion, RepaymentPreset]] = None
    warning: Optional[str] = None


def _elapsed_ms(start_time: float) -> float:
    return round((time.time() - start_time) * 1000, 3)


def schedule_options(
    principal: MoneyLike,
    profile: Optional[FinancialProfile] = None,
    interest_rate_percent: MoneyLike = 0,
    include_duration_fees: bool = False,
) -> ScheduleOptions:
    """
    Offer schedule shapes for a principal.

    With a profile whose disposable income is positive, returns the three
    comfort suggestions and recommends the profile's own comfort level.
    Otherwise (no profile, or no disposable income) falls back to presets.

    Raises:
        InvalidAmountError: principal is not a positive amount
    """
    start_time = time.time()
    try:
        principal = to_money(principal, "principal")
        if principal <= ZERO:
            raise InvalidAmountError(f"principal must be > 0, got {principal}")

        warning = None
        if profile is not None:
            warning = affordability_warning(principal, profile.disposable_income)
            suggestions = suggest(principal, profile, include_duration_fees)
            if suggestions is not None:
                options = ScheduleOptions(
                    source="suggestions",
                    suggestions=suggestions,
                    recommended=suggestions.recommended_for(profile),
                    warning=warning,
                )
                return _finish_options(principal, options, 3, start_time)

        presets = get_presets(principal, interest_rate_percent, include_duration_fees)
    except DomainException as e:
        logger.warning(f"Schedule options rejected: {e}", extra={"step": "schedule_options_rejected"})
        raise

    options = ScheduleOptions(
        source="presets" if profile is None else "presets_fallback",
        presets=presets,
        recommended=recommended_preset(presets),
        warning=warning,
    )
    return _finish_options(principal, options, len(presets), start_time)


def _finish_options(principal: Decimal, options: ScheduleOptions, count: int, start_time: float) -> ScheduleOptions:
    duration_ms = _elapsed_ms(start_time)
    calculation_duration_histogram.labels(operation="schedule_options").observe(duration_ms / 1000)
    record_schedule_options(options.source)
    log_schedule_options(str(principal), options.source, count, duration_ms, options.warning)
    return options


def materialize(
    principal: MoneyLike,
    frequency: str,
    installment_count: int,
    start_date: Union[date, str],
    interest_rate_percent: MoneyLike = 0,
    interest_mode: str = InterestMode.SIMPLE,
) -> List[ScheduleItem]:
    """
    Build LoanTerms and generate the dated schedule.

    Raises:
        InvalidTermsError: terms are incomplete or out of bounds
    """
    start_time = time.time()
    try:
        terms = LoanTerms(
            principal=principal,
            installment_count=installment_count,
            frequency=frequency,
            start_date=start_date,
            interest_rate_percent=interest_rate_percent,
            interest_mode=interest_mode,
        )
        schedule = generate_schedule(terms)
    except DomainException as e:
        logger.warning(f"Schedule rejected: {e}", extra={"step": "schedule_rejected"})
        raise

    duration_ms = _elapsed_ms(start_time)
    calculation_duration_histogram.labels(operation="generate_schedule").observe(duration_ms / 1000)
    record_schedule(terms.interest_mode.value, terms.frequency.value)
    log_schedule_generated(
        principal=str(terms.principal),
        frequency=terms.frequency.value,
        interest_mode=terms.interest_mode.value,
        installment_count=len(schedule),
        total_repayment=str(sum((item.total_amount for item in schedule), ZERO)),
        duration_ms=duration_ms,
    )
    return schedule


def materialize_suggestion(
    principal: MoneyLike,
    suggestion: ComfortSuggestion,
    start_date: Union[date, str],
    interest_rate_percent: MoneyLike = 0,
    interest_mode: str = InterestMode.SIMPLE,
) -> List[ScheduleItem]:
    """Schedule a chosen comfort suggestion; interest is applied here, not in the suggestion"""
    return materialize(
        principal,
        PAY_TO_LOAN_FREQUENCY[PayFrequency(suggestion.frequency)],
        suggestion.number_of_payments,
        start_date,
        interest_rate_percent,
        interest_mode,
    )


def materialize_preset(
    principal: MoneyLike,
    preset: RepaymentPreset,
    start_date: Union[date, str],
    interest_rate_percent: MoneyLike = 0,
    interest_mode: str = InterestMode.SIMPLE,
) -> List[ScheduleItem]:
    return materialize(
        principal,
        preset.frequency,
        preset.installments,
        start_date,
        interest_rate_percent,
        interest_mode,
    )


def fee_breakdown(amount: MoneyLike, policy: FeePolicy) -> FeeCalculation:
    """Fee breakdown for one disbursement or repayment"""
    start_time = time.time()
    try:
        calculation = calculate_fee(amount, policy)
    except DomainException as e:
        logger.warning(f"Fee calculation rejected: {e}", extra={"step": "fee_rejected"})
        raise

    fee_type = FeeType(policy.type).value if policy.enabled else "disabled"

    duration_ms = _elapsed_ms(start_time)
    calculation_duration_histogram.labels(operation="calculate_fee").observe(duration_ms / 1000)
    record_fee(fee_type, calculation.platform_fee)
    log_fee_calculated(
        amount=str(to_money(amount)),
        platform_fee=str(calculation.platform_fee),
        fee_type=fee_type,
        duration_ms=duration_ms,
    )
    return calculation
