"""
FinanceBook: the orchestration layer over the FinTrackLab engine.

The book owns the record collections, an injectable clock and the active date
filter. All figures are recomputed from current state on every call; the only
write the engine performs on its own is the recurring catch-up, exposed as the
explicit ``apply_catch_up()`` operation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from typing import Any
from uuid import uuid4

from fintracklab.config import TrackerSettings
from fintracklab.core.aggregation import (
    FinancialSummary,
    emergency_fund_progress,
    summarize,
)
from fintracklab.core.compounding import InvestmentSummary, summarize_investments
from fintracklab.core.dates import iso_month, parse_iso_day
from fintracklab.core.errors import (
    AllocationLimitError,
    ConfigError,
    RecordNotFoundError,
)
from fintracklab.core.materializer import (
    MaterializationResult,
    materialize,
    sort_by_date_desc,
)
from fintracklab.core.projection import ProjectionPoint, project_net_worth
from fintracklab.core.receivables import (
    Receivable,
    ReceivableStatus,
    Reminder,
    pay_reminder,
    settle_receivable,
)
from fintracklab.core.records import (
    MONTH_PATTERN,
    Allocation,
    AllocationCategory,
    DateFilter,
    RecurringTransaction,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

# Tolerance when comparing an allocation against the available balance
_LIMIT_EPS = 1e-9


def new_record_id() -> str:
    """Opaque id for manually created records."""
    return uuid4().hex


class FinanceBook:
    """
    Record collections plus the computations a tracker front end needs.

    **Example:**
        ```python
        from datetime import date
        from fintracklab import FinanceBook, TransactionType

        book = FinanceBook(today=date(2024, 4, 15))
        book.add_recurring("Salary", 1000.0, TransactionType.INCOME, date(2024, 1, 31))
        book.apply_catch_up()          # books Jan 31, Feb 29 and Mar 31
        book.summary().total_income    # 3000.0
        ```

    Note:
        Manual records get random ids. Materialized records keep the
        deterministic ``recurring:<templateId>:<date>`` ids so repeated
        catch-ups never duplicate entries.
    """

    def __init__(
        self,
        transactions: list[Transaction] | None = None,
        allocations: list[Allocation] | None = None,
        recurring: list[RecurringTransaction] | None = None,
        receivables: list[Receivable] | None = None,
        reminders: list[Reminder] | None = None,
        settings: TrackerSettings | None = None,
        date_filter: DateFilter | None = None,
        today: date | Callable[[], date] | None = None,
        id_factory: Callable[[], str] = new_record_id,
    ):
        self._transactions = sort_by_date_desc(list(transactions or []))
        self._allocations = sort_by_date_desc(list(allocations or []))
        self._recurring = list(recurring or [])
        self._receivables = _sort_receivables(list(receivables or []))
        self._reminders = _sort_reminders(list(reminders or []))
        self.settings = settings or TrackerSettings()
        self.date_filter = date_filter or DateFilter.all()
        self._clock = today
        self._new_id = id_factory
        self._caught_up = False

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def today(self) -> date:
        if self._clock is None:
            return date.today()
        if isinstance(self._clock, date):
            return self._clock
        return self._clock()

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    @property
    def allocations(self) -> list[Allocation]:
        return list(self._allocations)

    @property
    def recurring(self) -> list[RecurringTransaction]:
        return list(self._recurring)

    @property
    def receivables(self) -> list[Receivable]:
        return list(self._receivables)

    @property
    def reminders(self) -> list[Reminder]:
        return list(self._reminders)

    # ------------------------------------------------------------------
    # Recurring catch-up
    # ------------------------------------------------------------------

    def apply_catch_up(self) -> MaterializationResult:
        """
        Materialize every recurring template up to today.

        Intended to run once per session start. Calling it again is harmless:
        deterministic ids make the second run a no-op.
        """
        if self._caught_up:
            logger.warning("apply_catch_up() called again in the same session")
        result = materialize(self._recurring, self._transactions, self.today)
        if result.changed:
            self._transactions, self._recurring = result.transactions, result.templates
        self._caught_up = True
        return result

    # ------------------------------------------------------------------
    # Computations
    # ------------------------------------------------------------------

    def summary(self, date_filter: DateFilter | None = None) -> FinancialSummary:
        """Financial summary over ``date_filter`` (default: the book's active filter)."""
        return summarize(
            self._transactions, self._allocations, date_filter or self.date_filter
        )

    def investments(self) -> InvestmentSummary:
        return summarize_investments(
            self._allocations, self.today, self.settings.unclassified_label
        )

    def projection(self) -> list[ProjectionPoint]:
        return project_net_worth(
            self.investments(),
            self._allocations,
            self._recurring,
            self.today,
            months=self.settings.projection_months,
        )

    def emergency_fund_progress(self) -> float:
        return emergency_fund_progress(
            self.summary(), self.settings.emergency_fund_goal
        )

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def add_transaction(
        self,
        date: date,
        description: str,
        amount: float,
        type: TransactionType,
    ) -> Transaction:
        tx = Transaction(
            id=self._new_id(),
            date=date,
            description=description,
            amount=amount,
            type=TransactionType(type),
        )
        self._transactions = sort_by_date_desc([*self._transactions, tx])
        return tx

    def update_transaction(self, tx: Transaction) -> Transaction:
        self._transactions = sort_by_date_desc(
            _replace_by_id(self._transactions, tx, "transactions")
        )
        return tx

    def delete_transaction(self, record_id: str) -> None:
        self._transactions = _remove_by_id(
            self._transactions, record_id, "transactions"
        )

    # ------------------------------------------------------------------
    # Allocations
    # ------------------------------------------------------------------

    def add_allocation(
        self,
        date: date,
        category: AllocationCategory,
        amount: float,
        description: str | None = None,
        interest_rate: float | None = None,
        investment_type: str | None = None,
    ) -> Allocation:
        """
        Allocate part of the unallocated balance.

        Raises:
            AllocationLimitError: If ``amount`` exceeds the unallocated balance
                of the active filter window
        """
        self._check_limit(amount, editing=None)
        category = AllocationCategory(category)
        is_investment = category is AllocationCategory.INVESTMENTS
        alloc = Allocation(
            id=self._new_id(),
            date=date,
            category=category,
            amount=amount,
            description=description,
            interest_rate=interest_rate if is_investment else None,
            investment_type=investment_type if is_investment else None,
        )
        self._allocations = sort_by_date_desc([*self._allocations, alloc])
        return alloc

    def update_allocation(self, alloc: Allocation) -> Allocation:
        """Replace an allocation; non-investments lose their rate and investment type."""
        existing = _find(self._allocations, alloc.id, "allocations")
        if not alloc.is_investment:
            alloc = replace(alloc, interest_rate=None, investment_type=None)
        self._check_limit(alloc.amount, editing=existing)
        self._allocations = sort_by_date_desc(
            _replace_by_id(self._allocations, alloc, "allocations")
        )
        return alloc

    def delete_allocation(self, record_id: str) -> None:
        self._allocations = _remove_by_id(self._allocations, record_id, "allocations")

    def _check_limit(self, amount: float, editing: Allocation | None) -> None:
        available = self.summary().available_to_allocate(editing)
        if amount > available + _LIMIT_EPS:
            raise AllocationLimitError(amount, available)

    # ------------------------------------------------------------------
    # Recurring templates
    # ------------------------------------------------------------------

    def add_recurring(
        self,
        description: str,
        amount: float,
        type: TransactionType,
        start_date: date,
        end_date: date | None = None,
    ) -> RecurringTransaction:
        tpl = RecurringTransaction(
            id=self._new_id(),
            description=description,
            amount=amount,
            type=TransactionType(type),
            start_date=start_date,
            end_date=end_date,
        )
        self._recurring = [*self._recurring, tpl]
        return tpl

    def update_recurring(self, tpl: RecurringTransaction) -> RecurringTransaction:
        """Update a template's terms; its materialization cursor is kept as stored."""
        existing = _find(self._recurring, tpl.id, "recurring")
        tpl = replace(tpl, last_processed_date=existing.last_processed_date)
        self._recurring = _replace_by_id(self._recurring, tpl, "recurring")
        return tpl

    def delete_recurring(self, record_id: str) -> None:
        self._recurring = _remove_by_id(self._recurring, record_id, "recurring")

    # ------------------------------------------------------------------
    # Receivables and reminders
    # ------------------------------------------------------------------

    def add_receivable(
        self,
        client_name: str,
        description: str,
        amount: float,
        due_date: date,
        status: ReceivableStatus = ReceivableStatus.PENDING,
    ) -> Receivable:
        rec = Receivable(
            id=self._new_id(),
            client_name=client_name,
            description=description,
            amount=amount,
            due_date=due_date,
            status=ReceivableStatus(status),
        )
        self._receivables = _sort_receivables([*self._receivables, rec])
        return rec

    def update_receivable(self, rec: Receivable) -> Receivable:
        self._receivables = _sort_receivables(
            _replace_by_id(self._receivables, rec, "receivables")
        )
        return rec

    def delete_receivable(self, record_id: str) -> None:
        self._receivables = _remove_by_id(self._receivables, record_id, "receivables")

    def settle_receivable(self, record_id: str) -> Transaction:
        """Mark a receivable paid and book the income entry dated today."""
        rec = _find(self._receivables, record_id, "receivables")
        paid, tx = settle_receivable(rec, self.today, self._new_id())
        self.update_receivable(paid)
        self._transactions = sort_by_date_desc([*self._transactions, tx])
        return tx

    def add_reminder(self, description: str, amount: float, due_day: int) -> Reminder:
        rem = Reminder(
            id=self._new_id(), description=description, amount=amount, due_day=due_day
        )
        self._reminders = _sort_reminders([*self._reminders, rem])
        return rem

    def update_reminder(self, rem: Reminder) -> Reminder:
        self._reminders = _sort_reminders(
            _replace_by_id(self._reminders, rem, "reminders")
        )
        return rem

    def delete_reminder(self, record_id: str) -> None:
        self._reminders = _remove_by_id(self._reminders, record_id, "reminders")

    def pay_reminder(self, record_id: str, month: str | None = None) -> Transaction | None:
        """
        Pay a reminder for ``month`` (``YYYY-MM``, default: the current month).

        Returns:
            The booked expense entry, or None if the month was already paid
        """
        rem = _find(self._reminders, record_id, "reminders")
        month = month or iso_month(self.today)
        if not MONTH_PATTERN.match(month):
            raise ConfigError(f"reminder {record_id}: month must be YYYY-MM, got {month!r}")
        updated, tx = pay_reminder(rem, parse_iso_day(f"{month}-01"), self._new_id())
        if tx is None:
            return None
        self.update_reminder(updated)
        self._transactions = sort_by_date_desc([*self._transactions, tx])
        return tx

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "transactions": [tx.to_dict() for tx in self._transactions],
            "allocations": [a.to_dict() for a in self._allocations],
            "recurringTransactions": [r.to_dict() for r in self._recurring],
            "receivables": [r.to_dict() for r in self._receivables],
            "reminders": [r.to_dict() for r in self._reminders],
            "filter": self.date_filter.to_dict(),
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        settings: TrackerSettings | None = None,
        today: date | Callable[[], date] | None = None,
    ) -> FinanceBook:
        return cls(
            transactions=[Transaction.from_dict(d) for d in data.get("transactions", [])],
            allocations=[Allocation.from_dict(d) for d in data.get("allocations", [])],
            recurring=[
                RecurringTransaction.from_dict(d)
                for d in data.get("recurringTransactions", [])
            ],
            receivables=[Receivable.from_dict(d) for d in data.get("receivables", [])],
            reminders=[Reminder.from_dict(d) for d in data.get("reminders", [])],
            settings=settings,
            date_filter=DateFilter.from_dict(data.get("filter") or {}),
            today=today,
        )


def _find(records: list, record_id: str, collection: str):
    for record in records:
        if record.id == record_id:
            return record
    raise RecordNotFoundError(collection, record_id)


def _replace_by_id(records: list, new: Any, collection: str) -> list:
    _find(records, new.id, collection)
    return [new if r.id == new.id else r for r in records]


def _remove_by_id(records: list, record_id: str, collection: str) -> list:
    _find(records, record_id, collection)
    return [r for r in records if r.id != record_id]


def _sort_receivables(records: list[Receivable]) -> list[Receivable]:
    return sorted(records, key=lambda r: r.due_date)


def _sort_reminders(records: list[Reminder]) -> list[Reminder]:
    return sorted(records, key=lambda r: r.due_day)
