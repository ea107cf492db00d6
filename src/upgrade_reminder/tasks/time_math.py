# src/upgrade_reminder/tasks/time_math.py

"""
Calendar-aware, saturating date arithmetic.

All helpers return datetime.max instead of raising when the result
would fall outside the representable range.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta

MAX_DATETIME = datetime.max


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(dt: datetime, n: int) -> datetime:
    """Add n months to dt, clamping the day to the target month's end."""
    if n == 0:
        return dt
    month = dt.month - 1 + n
    year = dt.year + month // 12
    month = month % 12 + 1
    if year > MAX_DATETIME.year:
        return MAX_DATETIME
    if year < 1:
        return datetime.min
    day = clamp_day_to_month(year, month, dt.day)
    return dt.replace(year=year, month=month, day=day)


def add_years(dt: datetime, n: int) -> datetime:
    """Add n calendar years (Feb 29 becomes Feb 28 on non-leap years)."""
    return add_months(dt, 12 * n)


def add_delta(dt: datetime, delta: timedelta) -> datetime:
    try:
        return dt + delta
    except OverflowError:
        return MAX_DATETIME if delta > timedelta(0) else datetime.min


def add_dhms(dt: datetime, days: int = 0, hours: int = 0, minutes: int = 0, seconds: int = 0) -> datetime:
    try:
        delta = timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds)
    except OverflowError:
        return MAX_DATETIME
    return add_delta(dt, delta)


def add_period(
    dt: datetime,
    *,
    years: int = 0,
    months: int = 0,
    days: int = 0,
    hours: int = 0,
    minutes: int = 0,
    seconds: int = 0,
) -> datetime:
    """Add a calendar period: years and months first, then the fixed-length part."""
    out = add_months(dt, 12 * years + months)
    if out == MAX_DATETIME:
        return out
    return add_dhms(out, days, hours, minutes, seconds)


def normalize_dhms(days: int, hours: int, minutes: int, seconds: int) -> tuple[int, int, int, int]:
    """
    Carry seconds/minutes/hours into the next unit so that
    0 <= seconds < 60, 0 <= minutes < 60, 0 <= hours < 24.
    Negative inputs are clamped to zero. Days are never carried into months.
    """
    seconds = max(0, seconds)
    minutes = max(0, minutes)
    hours = max(0, hours)
    days = max(0, days)

    minutes += seconds // 60
    seconds %= 60
    hours += minutes // 60
    minutes %= 60
    days += hours // 24
    hours %= 24
    return days, hours, minutes, seconds


def split_timedelta(delta: timedelta) -> tuple[int, int, int, int]:
    """Break a timedelta into (days, hours, minutes, seconds); negative deltas give zeros."""
    total = int(delta.total_seconds())
    if total <= 0:
        return 0, 0, 0, 0
    return normalize_dhms(0, 0, 0, total)
