"""
Error classes for FinTrackLab.

This module defines the exception hierarchy used by the record layer, the
settings loader and the orchestration layer. The computation engine itself
does not raise for valid records: zero denominators are special-cased and the
only failures are caller precondition violations.
"""

from __future__ import annotations


class FinTrackError(Exception):
    """Base class for all FinTrackLab errors."""


class ConfigError(FinTrackError, ValueError):
    """
    Invalid settings or record payload.

    **Common Causes:**
    - Negative amounts on transactions, allocations or templates
    - Unknown enum values (transaction type, allocation category, filter type)
    - Unparsable ISO dates in persisted payloads
    - Unknown or mistyped keys in a settings file

    **Example Usage:**
        ```python
        from fintracklab.core.errors import ConfigError
        from fintracklab.core.records import Transaction

        try:
            Transaction.from_dict({"id": "t1", "date": "2024-13-01", ...})
        except ConfigError as e:
            print(f"Rejected record: {e}")
        ```
    """


class FilterError(ConfigError):
    """Raised when a date filter value is not a well-formed ISO prefix for its type."""


class AllocationLimitError(FinTrackError):
    """
    Raised when an allocation exceeds the unallocated balance available to it.

    Attributes:
        amount: The requested allocation amount
        available: The balance available at the moment of the request
    """

    def __init__(self, amount: float, available: float):
        self.amount = amount
        self.available = available
        super().__init__(
            f"Allocation of {amount:,.2f} exceeds available balance {available:,.2f}"
        )


class RecordNotFoundError(FinTrackError, KeyError):
    """Raised when an update or delete targets an unknown record id."""

    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{collection}: no record with id {record_id!r}")

    def __str__(self) -> str:
        return self.args[0]
