"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List

PERIOD_DAYS = {
    "weekly": 7,
    "biweekly": 14,
}


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping to the last day of a shorter month"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(from_date.day, last_day))


def add_periods(from_date: date, frequency: str, periods: int) -> date:
    """Offset a date by whole repayment periods.

    Monthly offsets are always taken from the anchor date, so Jan 31 yields
    Feb 28/29 and then Mar 31 rather than drifting to the 28th.
    """
    key = getattr(frequency, "value", frequency)
    if key == "monthly":
        return add_months(from_date, periods)
    return from_date + timedelta(days=PERIOD_DAYS[key] * periods)


def generate_due_dates(start: date, frequency: str, count: int) -> List[date]:
    """Due dates one period after start, then every period (count dates)"""
    return [add_periods(start, frequency, i + 1) for i in range(count)]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, moving day 29-31 back to the month's last day"""
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))
