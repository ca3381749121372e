"""
FinTrackLab - Financial Computation Engine for a Personal-Finance Tracker

FinTrackLab turns the raw records of a personal-finance tracker (transactions,
savings allocations, recurring templates) into the figures a dashboard shows.

Key Features:
- **Recurring catch-up**: Materialize monthly templates into ledger entries up
  to today, idempotently, with deterministic ids
- **Compounding**: Value investment allocations at their annual rate
- **Filtered summaries**: Income, expenses, savings rate and unallocated
  balance for any year, month or day
- **Projection**: 60-month net worth simulation combining compounding growth
  with recurring cash flow
- **Charts**: Optional Plotly figures for the dashboard

Quick Start:
    ```python
    from datetime import date
    from fintracklab import FinanceBook, TransactionType, AllocationCategory

    book = FinanceBook(today=date(2024, 4, 15))
    book.add_recurring("Salary", 5000.0, TransactionType.INCOME, date(2024, 1, 5))
    book.add_transaction(date(2024, 3, 10), "Rent", 1800.0, TransactionType.EXPENSE)
    book.apply_catch_up()

    book.add_allocation(date(2024, 3, 20), AllocationCategory.INVESTMENTS, 1000.0,
                        interest_rate=8.0, investment_type="Stocks")

    summary = book.summary()
    points = book.projection()
    ```
"""

__version__ = "0.1.0"
__author__ = "FinTrackLab Team"
__description__ = "Financial computation engine for a personal-finance tracker"

from .book import FinanceBook
from .config import TrackerSettings, load_settings
from .core import (
    Allocation,
    AllocationCategory,
    AllocationLimitError,
    ConfigError,
    DateFilter,
    FilterError,
    FilterType,
    FinancialSummary,
    FinTrackError,
    InvestmentSummary,
    MaterializationResult,
    ProjectionPoint,
    Receivable,
    ReceivableStatus,
    RecordNotFoundError,
    RecurringTransaction,
    Reminder,
    Transaction,
    TransactionType,
    materialize,
    project_net_worth,
    projection_frame,
    summarize,
    summarize_investments,
)
from .kpi import available_years, balance_history, monthly_cashflow
from .store import load_book, save_book

__all__ = [
    "FinanceBook",
    "TrackerSettings",
    "load_settings",
    "load_book",
    "save_book",
    # Records
    "Transaction",
    "TransactionType",
    "Allocation",
    "AllocationCategory",
    "RecurringTransaction",
    "DateFilter",
    "FilterType",
    "Receivable",
    "ReceivableStatus",
    "Reminder",
    # Engine
    "materialize",
    "MaterializationResult",
    "summarize",
    "FinancialSummary",
    "summarize_investments",
    "InvestmentSummary",
    "project_net_worth",
    "projection_frame",
    "ProjectionPoint",
    # KPI utilities
    "available_years",
    "balance_history",
    "monthly_cashflow",
    # Errors
    "FinTrackError",
    "ConfigError",
    "FilterError",
    "AllocationLimitError",
    "RecordNotFoundError",
    # Version info
    "__version__",
    "__author__",
    "__description__",
]
