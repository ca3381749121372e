"""
Filtered financial summaries.

Records are loaded into DataFrames with ISO date strings so a DateFilter is a
plain ``str.startswith`` over the ``date`` column. Transactions and allocations
are scoped by the same filter: unallocated balance always compares a window's
balance against the allocations made in that same window.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

from .dates import iso_day
from .records import (
    Allocation,
    AllocationCategory,
    DateFilter,
    Transaction,
    TransactionType,
)

TRANSACTION_COLUMNS = ["id", "date", "description", "amount", "type"]
ALLOCATION_COLUMNS = [
    "id",
    "date",
    "category",
    "amount",
    "interest_rate",
    "investment_type",
]
UNALLOCATED = "unallocated"


def transactions_frame(transactions: list[Transaction]) -> pd.DataFrame:
    """Tabulate transactions with ISO date strings and enum values as strings."""
    rows = [
        (tx.id, iso_day(tx.date), tx.description, tx.amount, tx.type.value)
        for tx in transactions
    ]
    df = pd.DataFrame.from_records(rows, columns=TRANSACTION_COLUMNS)
    return df.astype({"amount": float})


def allocations_frame(allocations: list[Allocation]) -> pd.DataFrame:
    """Tabulate allocations with ISO date strings and enum values as strings."""
    rows = [
        (
            a.id,
            iso_day(a.date),
            a.category.value,
            a.amount,
            a.interest_rate,
            a.investment_type,
        )
        for a in allocations
    ]
    df = pd.DataFrame.from_records(rows, columns=ALLOCATION_COLUMNS)
    return df.astype({"amount": float})


def apply_filter(df: pd.DataFrame, date_filter: DateFilter | None) -> pd.DataFrame:
    """Keep rows whose ISO ``date`` starts with the filter value."""
    if date_filter is None or date_filter.is_unfiltered or df.empty:
        return df
    return df[df["date"].str.startswith(date_filter.value)]


def filter_records(records: list, date_filter: DateFilter | None) -> list:
    """Record-level counterpart of :func:`apply_filter`."""
    if date_filter is None or date_filter.is_unfiltered:
        return list(records)
    return [r for r in records if date_filter.matches(r.date)]


@dataclass
class FinancialSummary:
    """
    Totals over a filtered record set.

    Attributes:
        total_income: Sum of INCOME amounts in the window
        total_expenses: Sum of EXPENSE amounts in the window
        total_balance: ``total_income - total_expenses``
        savings_rate: Balance as a percentage of income, ``0`` without income
        allocations_by_type: Allocated amount per category present in the window
        total_allocated: Sum over ``allocations_by_type``
        unallocated: Balance not yet allocated, never negative
    """

    total_income: float = 0.0
    total_expenses: float = 0.0
    total_balance: float = 0.0
    savings_rate: float = 0.0
    allocations_by_type: dict[AllocationCategory, float] = field(default_factory=dict)
    total_allocated: float = 0.0
    unallocated: float = 0.0

    def allocated(self, category: AllocationCategory) -> float:
        return self.allocations_by_type.get(category, 0.0)

    def available_to_allocate(self, editing: Allocation | None = None) -> float:
        """
        Amount a new (or edited) allocation may take.

        When editing, the allocation's current amount is released first.
        """
        available = self.unallocated
        if editing is not None:
            available += editing.amount
        return available

    def to_dict(self) -> dict:
        return {
            "totalIncome": self.total_income,
            "totalExpenses": self.total_expenses,
            "totalBalance": self.total_balance,
            "savingsRate": self.savings_rate,
            "allocationsByType": {
                cat.value: amount for cat, amount in self.allocations_by_type.items()
            },
            "totalAllocated": self.total_allocated,
            "unallocated": self.unallocated,
        }


def summarize(
    transactions: list[Transaction],
    allocations: list[Allocation],
    date_filter: DateFilter | None = None,
) -> FinancialSummary:
    """
    Compute income, expenses, balance, savings rate and allocation totals.

    **Args:**
        transactions: Full ledger
        allocations: All allocations
        date_filter: Window to aggregate over (None or ALL = everything)

    **Returns:**
        FinancialSummary for the window

    **Example:**
        ```python
        summary = summarize(txs, allocs, DateFilter(FilterType.MONTH, "2024-03"))
        summary.savings_rate  # 40.0 for income 5000 / expenses 3000
        ```
    """
    tx = apply_filter(transactions_frame(transactions), date_filter)
    by_type = tx.groupby("type")["amount"].sum()
    total_income = float(by_type.get(TransactionType.INCOME.value, 0.0))
    total_expenses = float(by_type.get(TransactionType.EXPENSE.value, 0.0))
    total_balance = total_income - total_expenses
    savings_rate = total_balance / total_income * 100 if total_income > 0 else 0.0

    allocs = apply_filter(allocations_frame(allocations), date_filter)
    by_category = allocs.groupby("category", sort=False)["amount"].sum()
    allocations_by_type = {
        AllocationCategory(cat): float(amount) for cat, amount in by_category.items()
    }
    total_allocated = float(sum(allocations_by_type.values()))
    unallocated = max(0.0, total_balance - total_allocated) if total_balance > 0 else 0.0

    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        total_balance=total_balance,
        savings_rate=savings_rate,
        allocations_by_type=allocations_by_type,
        total_allocated=total_allocated,
        unallocated=unallocated,
    )


def emergency_fund_progress(summary: FinancialSummary, goal: float) -> float:
    """Emergency fund allocations as a percentage of ``goal`` (``0`` if no goal)."""
    if goal <= 0:
        return 0.0
    return summary.allocated(AllocationCategory.EMERGENCY_FUND) / goal * 100


def savings_allocation_breakdown(summary: FinancialSummary) -> dict[str, float]:
    """
    Slices for a savings allocation chart.

    One slice per allocated category plus an ``unallocated`` slice; empty slices
    are dropped.
    """
    slices = {cat.value: amount for cat, amount in summary.allocations_by_type.items()}
    if summary.unallocated > 0:
        slices[UNALLOCATED] = summary.unallocated
    return {name: value for name, value in slices.items() if value > 0}
