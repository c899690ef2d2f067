"""Prometheus metrics for schedule generation, suggestion fallbacks, and platform fees"""

from decimal import Decimal

from prometheus_client import Counter, Histogram

# Schedule metrics
schedule_counter = Counter(
    "repayment_schedules_generated_total",
    "Amortization schedules generated",
    ["interest_mode", "frequency"],
)

schedule_options_counter = Counter(
    "repayment_schedule_options_total",
    "Schedule shape requests by source",
    ["source"],  # suggestions | presets | presets_fallback
)

# Fee metrics
fee_counter = Counter(
    "repayment_platform_fee_calculations_total",
    "Platform fee calculations",
    ["fee_type"],  # fixed | percentage | combined | disabled
)

fee_amount_histogram = Histogram(
    "repayment_platform_fee_amount",
    "Platform fee charged per payment",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 25.0, 50.0, 100.0],
)

# Latency
calculation_duration_histogram = Histogram(
    "repayment_calculation_duration_seconds",
    "Time spent in a calculation",
    ["operation"],
)


def record_schedule(interest_mode: str, frequency: str) -> None:
    schedule_counter.labels(interest_mode=interest_mode, frequency=frequency).inc()


def record_schedule_options(source: str) -> None:
    """Record whether income-based suggestions or fallback presets were served"""
    schedule_options_counter.labels(source=source).inc()


def record_fee(fee_type: str, platform_fee: Decimal) -> None:
    fee_counter.labels(fee_type=fee_type).inc()
    if fee_type != "disabled":
        fee_amount_histogram.observe(float(platform_fee))
