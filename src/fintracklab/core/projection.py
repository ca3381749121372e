"""
Forward projection of net worth.

A deterministic monthly simulation that compounds the current investment value at
the portfolio's weighted average rate and adds recurring net cash flow. It is
recomputed from scratch whenever its inputs change.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pandas as pd

from .compounding import InvestmentSummary, monthly_rate, weighted_average_rate
from .dates import add_months_clamped, iso_month, month_end, month_range, month_to_date
from .records import Allocation, RecurringTransaction

PROJECTION_MONTHS = 60


@dataclass(frozen=True)
class ProjectionPoint:
    """
    One simulated month.

    Attributes:
        date: The month as ``YYYY-MM``
        value: Projected value, never negative
        contributions: Cumulative contributions, never negative
    """

    date: str
    value: float
    contributions: float

    @property
    def growth(self) -> float:
        return self.value - self.contributions

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "value": self.value,
            "contributions": self.contributions,
        }


def recurring_net_for_month(
    templates: list[RecurringTransaction], month: date
) -> float:
    """
    Net recurring cash flow counted in ``month``.

    A template contributes only in its anchor month (the calendar month of its
    ``start_date``), and only if its active window covers that month. Income
    adds its amount, expense subtracts it.
    """
    first = month.replace(day=1)
    last = month_end(first)
    net = 0.0
    for tpl in templates:
        if (tpl.start_date.year, tpl.start_date.month) != (first.year, first.month):
            continue
        if tpl.is_active_in_month(first, last):
            net += tpl.signed_amount
    return net


def project_net_worth(
    investments: InvestmentSummary,
    allocations: list[Allocation],
    templates: list[RecurringTransaction],
    today: date,
    months: int = PROJECTION_MONTHS,
) -> list[ProjectionPoint]:
    """
    Simulate projected net worth month by month, starting the month after ``today``.

    **Per month:**
        1. Grow the running value by the monthly equivalent of the
           amount-weighted average annual rate of investment allocations
        2. Add the month's recurring net cash flow
        3. Count positive net flow as a contribution rather than growth
        4. Emit the month with value and contributions floored at zero

    **Args:**
        investments: Current investment aggregate (seeds value and contributions)
        allocations: All allocations (for the weighted average rate)
        templates: Recurring templates
        today: The current calendar day
        months: Horizon in months (default 60)

    **Returns:**
        ``months`` ProjectionPoints in chronological order
    """
    r_m = monthly_rate(weighted_average_rate(allocations))
    running_value = investments.current_value
    running_contributions = investments.total_contributions

    t_index = month_range(add_months_clamped(today.replace(day=1), 1), months)
    points: list[ProjectionPoint] = []
    for m in t_index:
        month = month_to_date(m)
        running_value *= 1 + r_m

        net = recurring_net_for_month(templates, month)
        running_value += net
        if net > 0:
            running_contributions += net

        points.append(
            ProjectionPoint(
                date=iso_month(month),
                value=max(0.0, running_value),
                contributions=max(0.0, running_contributions),
            )
        )
    return points


def projection_frame(points: list[ProjectionPoint]) -> pd.DataFrame:
    """
    Tabulate a projection with the derived ``growth`` column.

    The index is a monthly ``PeriodIndex``.
    """
    df = pd.DataFrame(
        {
            "value": [p.value for p in points],
            "contributions": [p.contributions for p in points],
        },
        index=pd.PeriodIndex([p.date for p in points], freq="M", name="date"),
    )
    df["growth"] = df["value"] - df["contributions"]
    return df
