"""
Compound growth of investment allocations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

import pandas as pd

from .dates import months_between
from .records import Allocation

UNCLASSIFIED = "unclassified"


def monthly_rate(annual_rate_pct: float | None) -> float:
    """
    Convert an annual percentage rate to the equivalent monthly compounding rate.

    ``(1 + annual/100) ** (1/12) - 1``; a zero or missing rate gives ``0.0``.

    Args:
        annual_rate_pct: Annual rate in percent (e.g. 12 for 12 %)

    Returns:
        Monthly rate as a fraction
    """
    if not annual_rate_pct:
        return 0.0
    return (1 + annual_rate_pct / 100) ** (1 / 12) - 1


def elapsed_months(start: date, today: date) -> int:
    """Whole months from ``start`` to ``today``, never negative."""
    return max(0, months_between(start, today))


def allocation_value(allocation: Allocation, today: date) -> float:
    """
    Current value of a single allocation.

    ``amount * (1 + monthly_rate) ** months`` with the months elapsed since the
    allocation date. Allocations dated in the future, or without a rate, stay at
    principal.
    """
    r_m = monthly_rate(allocation.interest_rate)
    months = elapsed_months(allocation.date, today)
    return allocation.amount * (1 + r_m) ** months


@dataclass
class InvestmentSummary:
    """
    Aggregate over all investment allocations.

    Attributes:
        total_contributions: Sum of invested principal
        current_value: Sum of compounded values, floored at ``total_contributions``
        growth: ``current_value - total_contributions``, never negative
        portfolio_breakdown: Current value per investment type, in order of first
            appearance; allocations without a type land in the unclassified bucket
    """

    total_contributions: float = 0.0
    current_value: float = 0.0
    growth: float = 0.0
    portfolio_breakdown: dict[str, float] = field(default_factory=dict)

    def breakdown_frame(self) -> pd.DataFrame:
        """Portfolio breakdown as a ``name``/``value``/``share`` DataFrame."""
        df = pd.DataFrame(
            {
                "name": list(self.portfolio_breakdown.keys()),
                "value": list(self.portfolio_breakdown.values()),
            },
            columns=["name", "value"],
        )
        total = df["value"].sum()
        df["share"] = df["value"] / total if total > 0 else 0.0
        return df


def summarize_investments(
    allocations: list[Allocation],
    today: date,
    unclassified_label: str = UNCLASSIFIED,
) -> InvestmentSummary:
    """
    Compound every investment allocation to ``today`` and aggregate.

    Non-investment allocations are ignored. The reported ``current_value`` is
    never below ``total_contributions`` and ``growth`` is never negative.

    Args:
        allocations: All allocations (unfiltered)
        today: Valuation day
        unclassified_label: Bucket name for allocations without an investment type

    Returns:
        InvestmentSummary
    """
    total_contributions = 0.0
    raw_value = 0.0
    breakdown: dict[str, float] = {}

    for alloc in allocations:
        if not alloc.is_investment:
            continue
        value = allocation_value(alloc, today)
        total_contributions += alloc.amount
        raw_value += value
        key = alloc.investment_type or unclassified_label
        breakdown[key] = breakdown.get(key, 0.0) + value

    return InvestmentSummary(
        total_contributions=total_contributions,
        current_value=max(total_contributions, raw_value),
        growth=max(0.0, raw_value - total_contributions),
        portfolio_breakdown=breakdown,
    )


def weighted_average_rate(allocations: list[Allocation]) -> float:
    """
    Amount-weighted mean annual rate of investment allocations that declare one.

    Allocations without a rate (missing or zero) are excluded from both the
    numerator and the denominator. Returns ``0.0`` when nothing qualifies.
    """
    total_rate = 0.0
    total_amount = 0.0
    for alloc in allocations:
        if alloc.is_investment and alloc.interest_rate:
            total_rate += alloc.amount * alloc.interest_rate
            total_amount += alloc.amount
    return total_rate / total_amount if total_amount > 0 else 0.0
