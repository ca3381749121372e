"""
Receivables and monthly bill reminders.

Both feed the ledger: settling a receivable books an income entry, paying a
reminder books an expense entry on the reminder's due day.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any

from .dates import days_in_month, iso_day, iso_month
from .errors import ConfigError
from .records import (
    Transaction,
    TransactionType,
    _check_amount,
    _coerce_amount,
    _coerce_date,
    _coerce_enum,
    _coerce_str,
)


class ReceivableStatus(str, Enum):
    PENDING = "pending"
    BILLED = "billed"
    PAID = "paid"


class DisplayStatus(str, Enum):
    """Status shown to the user, including the derived OVERDUE state."""

    PENDING = "pending"
    BILLED = "billed"
    PAID = "paid"
    OVERDUE = "overdue"


@dataclass(frozen=True, slots=True)
class Receivable:
    """Money owed to the user by a client."""

    id: str
    client_name: str
    description: str
    amount: float
    due_date: date
    status: ReceivableStatus = ReceivableStatus.PENDING

    def __post_init__(self) -> None:
        _check_amount(self.amount, f"receivable {self.id}")

    def display_status(self, today: date) -> DisplayStatus:
        if self.status is not ReceivableStatus.PAID and self.due_date < today:
            return DisplayStatus.OVERDUE
        return DisplayStatus(self.status.value)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Receivable:
        ctx = f"receivable {data.get('id', '?')}"
        return cls(
            id=_coerce_str(data.get("id"), f"{ctx}.id"),
            client_name=str(data.get("clientName", "")),
            description=str(data.get("description", "")),
            amount=_coerce_amount(data.get("amount"), f"{ctx}.amount"),
            due_date=_coerce_date(data.get("dueDate"), f"{ctx}.dueDate"),
            status=_coerce_enum(
                ReceivableStatus, data.get("status", "pending"), f"{ctx}.status"
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "clientName": self.client_name,
            "description": self.description,
            "amount": self.amount,
            "dueDate": iso_day(self.due_date),
            "status": self.status.value,
        }


@dataclass(frozen=True, slots=True)
class Reminder:
    """
    A monthly bill due on a fixed day.

    Attributes:
        due_day: Day of the month (1-31); clamped to short months
        paid_months: ``YYYY-MM`` months already paid
    """

    id: str
    description: str
    amount: float
    due_day: int
    paid_months: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _check_amount(self.amount, f"reminder {self.id}")
        if not 1 <= self.due_day <= 31:
            raise ConfigError(
                f"reminder {self.id}: due_day must be within 1..31, got {self.due_day}"
            )

    def due_date(self, month: str) -> date:
        """Due date within a ``YYYY-MM`` month."""
        year, mon = (int(part) for part in month.split("-"))
        return date(year, mon, min(self.due_day, days_in_month(year, mon)))

    def is_paid(self, month: str) -> bool:
        return month in self.paid_months

    def status(self, month: str, today: date) -> DisplayStatus:
        if self.is_paid(month):
            return DisplayStatus.PAID
        if self.due_date(month) < today:
            return DisplayStatus.OVERDUE
        return DisplayStatus.PENDING

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Reminder:
        ctx = f"reminder {data.get('id', '?')}"
        due_day = data.get("dueDay")
        if isinstance(due_day, bool) or not isinstance(due_day, int):
            raise ConfigError(f"{ctx}.dueDay: expected an integer day")
        return cls(
            id=_coerce_str(data.get("id"), f"{ctx}.id"),
            description=str(data.get("description", "")),
            amount=_coerce_amount(data.get("amount"), f"{ctx}.amount"),
            due_day=due_day,
            paid_months=tuple(data.get("paidMonths", ())),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "dueDay": self.due_day,
            "paidMonths": list(self.paid_months),
        }


def settle_receivable(
    receivable: Receivable, today: date, transaction_id: str
) -> tuple[Receivable, Transaction]:
    """
    Mark a receivable as paid and book the matching income entry dated ``today``.

    Returns:
        The updated receivable and the new transaction
    """
    paid = replace(receivable, status=ReceivableStatus.PAID)
    tx = Transaction(
        id=transaction_id,
        date=today,
        description=f"Paid: {receivable.client_name} - {receivable.description}",
        amount=receivable.amount,
        type=TransactionType.INCOME,
    )
    return paid, tx


def pay_reminder(
    reminder: Reminder, payment_date: date, transaction_id: str
) -> tuple[Reminder, Transaction | None]:
    """
    Record a reminder payment for the month of ``payment_date``.

    The expense entry is dated on the reminder's due day in that month. Paying a
    month twice is a no-op and returns ``None`` for the transaction.
    """
    month = iso_month(payment_date)
    if reminder.is_paid(month):
        return reminder, None
    updated = replace(reminder, paid_months=(*reminder.paid_months, month))
    tx = Transaction(
        id=transaction_id,
        date=reminder.due_date(month),
        description=f"Reminder: {reminder.description}",
        amount=reminder.amount,
        type=TransactionType.EXPENSE,
    )
    return updated, tx
