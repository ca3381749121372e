"""
Core engine for FinTrackLab.

Pure functions over immutable records: calendar math, recurring
materialization, compounding, filtered aggregation and net worth projection.
"""

from .aggregation import (
    FinancialSummary,
    emergency_fund_progress,
    filter_records,
    savings_allocation_breakdown,
    summarize,
)
from .compounding import (
    InvestmentSummary,
    allocation_value,
    monthly_rate,
    summarize_investments,
    weighted_average_rate,
)
from .dates import (
    add_months_clamped,
    iso_day,
    iso_month,
    month_range,
    months_between,
    parse_iso_day,
)
from .errors import (
    AllocationLimitError,
    ConfigError,
    FilterError,
    FinTrackError,
    RecordNotFoundError,
)
from .materializer import MaterializationResult, materialize, recurring_transaction_id
from .projection import (
    PROJECTION_MONTHS,
    ProjectionPoint,
    project_net_worth,
    projection_frame,
)
from .receivables import (
    DisplayStatus,
    Receivable,
    ReceivableStatus,
    Reminder,
    pay_reminder,
    settle_receivable,
)
from .records import (
    Allocation,
    AllocationCategory,
    DateFilter,
    FilterType,
    RecurringTransaction,
    Transaction,
    TransactionType,
)

__all__ = [
    "FinancialSummary",
    "emergency_fund_progress",
    "filter_records",
    "savings_allocation_breakdown",
    "summarize",
    "InvestmentSummary",
    "allocation_value",
    "monthly_rate",
    "summarize_investments",
    "weighted_average_rate",
    "add_months_clamped",
    "iso_day",
    "iso_month",
    "month_range",
    "months_between",
    "parse_iso_day",
    "AllocationLimitError",
    "ConfigError",
    "FilterError",
    "FinTrackError",
    "RecordNotFoundError",
    "MaterializationResult",
    "materialize",
    "recurring_transaction_id",
    "PROJECTION_MONTHS",
    "ProjectionPoint",
    "project_net_worth",
    "projection_frame",
    "DisplayStatus",
    "Receivable",
    "ReceivableStatus",
    "Reminder",
    "pay_reminder",
    "settle_receivable",
    "Allocation",
    "AllocationCategory",
    "DateFilter",
    "FilterType",
    "RecurringTransaction",
    "Transaction",
    "TransactionType",
]
