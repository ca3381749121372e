"""
Calendar arithmetic helpers for FinTrackLab.

All helpers work on naive ``datetime.date`` values (local calendar days), so no
timezone shifting can move a record to the previous or next day.
"""

from __future__ import annotations

import calendar
from datetime import date

import numpy as np


def parse_iso_day(value: str | date) -> date:
    """
    Parse a ``YYYY-MM-DD`` string into a calendar day.

    Dates are taken as local calendar days. Values that already are ``date``
    instances are returned unchanged.

    Args:
        value: ISO day string or date

    Returns:
        The parsed calendar day

    Raises:
        ValueError: If the string is not a valid ISO calendar day
    """
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given calendar month."""
    return calendar.monthrange(year, month)[1]


def add_months_clamped(d: date, n: int, day: int | None = None) -> date:
    """
    Add ``n`` calendar months, clamping the day-of-month to the target month.

    **Args:**
        d: The anchor date
        n: Number of months to add (may be negative)
        day: Day-of-month to aim for (default: ``d.day``). Recurring schedules pass
            their anchor day here so a short month never shifts later occurrences.

    **Returns:**
        The shifted date

    **Example:**
        ```python
        add_months_clamped(date(2024, 1, 31), 1)   # date(2024, 2, 29)
        add_months_clamped(date(2023, 1, 31), 1)   # date(2023, 2, 28)
        add_months_clamped(date(2024, 2, 29), 1, day=31)  # date(2024, 3, 31)
        ```
    """
    target_day = d.day if day is None else day
    month_index = d.year * 12 + (d.month - 1) + n
    year, month0 = divmod(month_index, 12)
    month = month0 + 1
    return date(year, month, min(target_day, days_in_month(year, month)))


def months_between(a: date, b: date) -> int:
    """
    Whole-month difference from ``a`` to ``b``.

    Computed as ``(year(b) - year(a)) * 12 + (month(b) - month(a))``; the
    day-of-month is ignored, so partial months add nothing.
    """
    return (b.year - a.year) * 12 + (b.month - a.month)


def iso_day(d: date) -> str:
    """Format as ``YYYY-MM-DD``."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def iso_month(d: date) -> str:
    """Format as ``YYYY-MM``."""
    return f"{d.year:04d}-{d.month:02d}"


def month_start(d: date) -> date:
    """First day of the month containing ``d``."""
    return d.replace(day=1)


def month_end(d: date) -> date:
    """Last day of the month containing ``d``."""
    return d.replace(day=days_in_month(d.year, d.month))


def month_range(start: date, months: int) -> np.ndarray:
    """
    Generate consecutive months starting at the month of ``start``.

    Args:
        start: Any day of the first month
        months: Number of months to generate

    Returns:
        A numpy array of ``datetime64[M]`` values
    """
    s = np.datetime64(iso_month(start), "M")
    return s + np.arange(months).astype("timedelta64[M]")


def month_to_date(m: np.datetime64) -> date:
    """First calendar day of a ``datetime64[M]`` month."""
    year, month = str(np.datetime64(m, "M")).split("-")
    return date(int(year), int(month), 1)
