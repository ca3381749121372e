"""
Record types for the FinTrackLab engine.

The engine consumes plain, immutable records supplied by external collaborators
(persistence, forms) and returns new records rather than mutating inputs. Each
record converts to and from the camelCase mapping shape persisted by those
collaborators via ``to_dict()`` / ``from_dict()``.
"""

from __future__ import annotations

import math
import re
import warnings
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from .dates import add_months_clamped, iso_day, months_between
from .errors import ConfigError, FilterError

__all__ = [
    "TransactionType",
    "AllocationCategory",
    "FilterType",
    "Transaction",
    "Allocation",
    "RecurringTransaction",
    "DateFilter",
]


class TransactionType(str, Enum):
    """Direction of a cash-flow record. Amounts are stored positive."""

    INCOME = "income"
    EXPENSE = "expense"


class AllocationCategory(str, Enum):
    """Savings buckets an allocation can move money into."""

    INVESTMENTS = "investments"
    EMERGENCY_FUND = "emergency_fund"
    GOALS = "goals"


class FilterType(str, Enum):
    """Granularity of a date filter."""

    ALL = "all"
    YEAR = "year"
    MONTH = "month"
    DAY = "day"


_FILTER_PATTERNS = {
    FilterType.YEAR: re.compile(r"^\d{4}$"),
    FilterType.MONTH: re.compile(r"^\d{4}-(0[1-9]|1[0-2])$"),
    FilterType.DAY: re.compile(r"^\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$"),
}
MONTH_PATTERN = _FILTER_PATTERNS[FilterType.MONTH]


@dataclass(frozen=True, slots=True)
class Transaction:
    """
    A concrete ledger entry.

    Attributes:
        id: Opaque id for manual records, ``recurring:<templateId>:<date>`` for
            materialized ones
        date: Calendar day of the entry
        description: Free-text label
        amount: Non-negative amount; the sign comes from ``type``
        type: INCOME or EXPENSE
    """

    id: str
    date: date
    description: str
    amount: float
    type: TransactionType

    def __post_init__(self) -> None:
        _check_amount(self.amount, f"transaction {self.id}")

    @property
    def signed_amount(self) -> float:
        """Amount with income positive and expense negative."""
        return self.amount if self.type is TransactionType.INCOME else -self.amount

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        ctx = f"transaction {data.get('id', '?')}"
        return cls(
            id=_coerce_str(data.get("id"), f"{ctx}.id"),
            date=_coerce_date(data.get("date"), f"{ctx}.date"),
            description=str(data.get("description", "")),
            amount=_coerce_amount(data.get("amount"), f"{ctx}.amount"),
            type=_coerce_enum(TransactionType, data.get("type"), f"{ctx}.type"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": iso_day(self.date),
            "description": self.description,
            "amount": self.amount,
            "type": self.type.value,
        }


@dataclass(frozen=True, slots=True)
class Allocation:
    """
    Money moved out of the unallocated balance into a savings bucket.

    ``interest_rate`` (annual percent) and ``investment_type`` are only
    meaningful for the INVESTMENTS category.
    """

    id: str
    date: date
    category: AllocationCategory
    amount: float
    description: str | None = None
    interest_rate: float | None = None
    investment_type: str | None = None

    def __post_init__(self) -> None:
        _check_amount(self.amount, f"allocation {self.id}")
        if self.interest_rate is not None and self.interest_rate <= -100:
            raise ConfigError(
                f"allocation {self.id}: interest_rate must be > -100, got {self.interest_rate}"
            )
        if (
            self.category is not AllocationCategory.INVESTMENTS
            and self.interest_rate
        ):
            warnings.warn(
                f"allocation {self.id}: interest_rate is ignored for category "
                f"{self.category.value!r}",
                category=UserWarning,
                stacklevel=3,
            )

    @property
    def is_investment(self) -> bool:
        return self.category is AllocationCategory.INVESTMENTS

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Allocation:
        ctx = f"allocation {data.get('id', '?')}"
        rate = data.get("interestRate")
        return cls(
            id=_coerce_str(data.get("id"), f"{ctx}.id"),
            date=_coerce_date(data.get("date"), f"{ctx}.date"),
            category=_coerce_enum(
                AllocationCategory, data.get("category"), f"{ctx}.category"
            ),
            amount=_coerce_amount(data.get("amount"), f"{ctx}.amount"),
            description=data.get("description"),
            interest_rate=None
            if rate is None
            else _coerce_amount(rate, f"{ctx}.interestRate", allow_negative=True),
            investment_type=data.get("investmentType") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "date": iso_day(self.date),
            "category": self.category.value,
            "amount": self.amount,
        }
        if self.description is not None:
            out["description"] = self.description
        if self.interest_rate is not None:
            out["interestRate"] = self.interest_rate
        if self.investment_type is not None:
            out["investmentType"] = self.investment_type
        return out


@dataclass(frozen=True, slots=True)
class RecurringTransaction:
    """
    A monthly template that generates one Transaction per elapsed month.

    Occurrence ``k`` falls on ``start_date`` shifted by ``k`` months with the
    day clamped to the target month, always aiming for ``start_date.day``.

    Note:
        ``last_processed_date`` is the materialization cursor. Only the
        materializer advances it.
    """

    id: str
    description: str
    amount: float
    type: TransactionType
    start_date: date
    end_date: date | None = None
    last_processed_date: date | None = None

    def __post_init__(self) -> None:
        _check_amount(self.amount, f"recurring {self.id}")

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type is TransactionType.INCOME else -self.amount

    def occurrence(self, k: int) -> date:
        """Date of the ``k``-th occurrence (``k = 0`` is ``start_date``)."""
        return add_months_clamped(self.start_date, k, day=self.start_date.day)

    def next_occurrence_index(self) -> int:
        """Index of the first occurrence not yet materialized."""
        if self.last_processed_date is None:
            return 0
        return max(0, months_between(self.start_date, self.last_processed_date) + 1)

    def is_active_in_month(self, first: date, last: date) -> bool:
        """Whether the ``start_date..end_date`` window overlaps ``first..last``."""
        if self.start_date > last:
            return False
        return self.end_date is None or self.end_date >= first

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecurringTransaction:
        ctx = f"recurring {data.get('id', '?')}"
        return cls(
            id=_coerce_str(data.get("id"), f"{ctx}.id"),
            description=str(data.get("description", "")),
            amount=_coerce_amount(data.get("amount"), f"{ctx}.amount"),
            type=_coerce_enum(TransactionType, data.get("type"), f"{ctx}.type"),
            start_date=_coerce_date(data.get("startDate"), f"{ctx}.startDate"),
            end_date=_coerce_optional_date(data.get("endDate"), f"{ctx}.endDate"),
            last_processed_date=_coerce_optional_date(
                data.get("lastProcessedDate"), f"{ctx}.lastProcessedDate"
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "type": self.type.value,
            "startDate": iso_day(self.start_date),
        }
        if self.end_date is not None:
            out["endDate"] = iso_day(self.end_date)
        if self.last_processed_date is not None:
            out["lastProcessedDate"] = iso_day(self.last_processed_date)
        return out


@dataclass(frozen=True, slots=True)
class DateFilter:
    """
    Prefix filter over ISO dates.

    ``value`` must be ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD`` for YEAR, MONTH
    and DAY filters respectively. A filter of type ALL, or with no value,
    matches every record.

    **Example:**
        ```python
        march = DateFilter(FilterType.MONTH, "2024-03")
        march.matches(date(2024, 3, 15))  # True
        DateFilter.parse("year:2024")     # DateFilter(FilterType.YEAR, "2024")
        ```
    """

    type: FilterType = FilterType.ALL
    value: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, FilterType):
            object.__setattr__(
                self, "type", _coerce_enum(FilterType, self.type, "filter.type", FilterError)
            )
        if self.type is FilterType.ALL or self.value is None:
            return
        if not isinstance(self.value, str):
            raise FilterError(f"filter value must be a string, got {self.value!r}")
        if not _FILTER_PATTERNS[self.type].match(self.value):
            raise FilterError(
                f"filter value {self.value!r} is not a valid {self.type.value} prefix"
            )

    @classmethod
    def all(cls) -> DateFilter:
        return cls(FilterType.ALL, None)

    @classmethod
    def parse(cls, text: str) -> DateFilter:
        """Parse ``all`` or ``<type>:<value>`` (e.g. ``month:2024-03``)."""
        kind, _, value = text.partition(":")
        ftype = _coerce_enum(FilterType, kind.strip().lower(), "filter.type", FilterError)
        if ftype is FilterType.ALL:
            return cls.all()
        return cls(ftype, value.strip() or None)

    @property
    def is_unfiltered(self) -> bool:
        return self.type is FilterType.ALL or not self.value

    def matches(self, d: date) -> bool:
        if self.is_unfiltered:
            return True
        return iso_day(d).startswith(self.value)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DateFilter:
        value = data.get("value")
        # Unquoted YAML scalars: `2024` loads as int, `2024-03-15` as date
        if isinstance(value, date):
            value = iso_day(value)
        elif isinstance(value, int) and not isinstance(value, bool):
            value = f"{value:04d}"
        return cls(
            _coerce_enum(FilterType, data.get("type", "all"), "filter.type", FilterError),
            value,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "value": self.value}


def _check_amount(amount: float, ctx: str) -> None:
    if not math.isfinite(amount):
        raise ConfigError(f"{ctx}: amount must be finite, got {amount}")
    if amount < 0:
        raise ConfigError(f"{ctx}: amount must be >= 0, got {amount}")


def _coerce_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{ctx}: expected non-empty string")
    return value


def _coerce_amount(value: Any, ctx: str, *, allow_negative: bool = False) -> float:
    if isinstance(value, bool) or value is None:
        raise ConfigError(f"{ctx}: expected a number")
    try:
        amount = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{ctx}: expected a number, got {value!r}") from exc
    if not math.isfinite(amount):
        raise ConfigError(f"{ctx}: expected a finite number, got {value!r}")
    if not allow_negative and amount < 0:
        raise ConfigError(f"{ctx}: must be >= 0, got {amount}")
    return amount


def _coerce_date(value: Any, ctx: str) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ConfigError(f"{ctx}: invalid ISO date '{value}'") from exc
    raise ConfigError(f"{ctx}: expected ISO date string")


def _coerce_optional_date(value: Any, ctx: str) -> date | None:
    if value is None or value == "":
        return None
    return _coerce_date(value, ctx)


def _coerce_enum(enum_cls, value: Any, ctx: str, error_cls=ConfigError):
    try:
        return enum_cls(value)
    except ValueError as exc:
        choices = ", ".join(m.value for m in enum_cls)
        raise error_cls(f"{ctx}: expected one of [{choices}], got {value!r}") from exc
