"""
Walkthrough of a FinanceBook: catch-up, summaries, investments and projection.
"""

from __future__ import annotations

import json
from datetime import date

from fintracklab import (
    AllocationCategory,
    DateFilter,
    FilterType,
    FinanceBook,
    TransactionType,
    monthly_cashflow,
)


def pretty(data: dict) -> str:
    """Return JSON formatted output."""
    return json.dumps(data, indent=2, sort_keys=True)


def build_sample_book() -> FinanceBook:
    book = FinanceBook(today=date(2024, 6, 10))
    book.add_recurring("Salary", 4000.0, TransactionType.INCOME, date(2024, 1, 31))
    book.add_recurring("Rent", 1500.0, TransactionType.EXPENSE, date(2024, 1, 1))
    book.add_transaction(date(2024, 3, 12), "Car repair", 650.0, TransactionType.EXPENSE)

    # Books Jan-May salaries (clamped to month end) and Jan-Jun rents.
    book.apply_catch_up()

    book.add_allocation(
        date(2024, 2, 1),
        AllocationCategory.INVESTMENTS,
        3000.0,
        interest_rate=7.0,
        investment_type="ETF",
    )
    book.add_allocation(date(2024, 4, 1), AllocationCategory.EMERGENCY_FUND, 2000.0)
    book.add_reminder("Internet", 45.0, due_day=20)
    return book


def main() -> None:
    book = build_sample_book()

    print("=== Whole ledger ===")
    print(pretty(book.summary().to_dict()))

    print("\n=== March 2024 ===")
    print(pretty(book.summary(DateFilter(FilterType.MONTH, "2024-03")).to_dict()))

    print("\n=== Monthly cash flow ===")
    print(monthly_cashflow(book.transactions))

    inv = book.investments()
    print("\n=== Investments ===")
    print(f"Contributions {inv.total_contributions:,.2f}  value {inv.current_value:,.2f}")
    print(f"Emergency fund progress: {book.emergency_fund_progress():.1f}%")

    print("\n=== Projection (first 6 months) ===")
    for point in book.projection()[:6]:
        print(f"{point.date}  {point.value:>12,.2f}  growth {point.growth:>10,.2f}")


if __name__ == "__main__":
    main()
