"""
Tests for recurring transaction materialization.
"""

from datetime import date

import pytest
from fintracklab.core.materializer import (
    due_occurrences,
    materialize,
    recurring_transaction_id,
)
from fintracklab.core.records import RecurringTransaction, Transaction, TransactionType


def _template(**overrides) -> RecurringTransaction:
    fields = {
        "id": "salary",
        "description": "Salary",
        "amount": 1000.0,
        "type": TransactionType.INCOME,
        "start_date": date(2024, 1, 31),
    }
    fields.update(overrides)
    return RecurringTransaction(**fields)


class TestMaterialize:
    """Catch-up behaviour for single and multiple templates."""

    def test_month_end_start_clamps_and_stops_before_due_date(self):
        """Jan 31 start against Apr 15: Jan 31, Feb 29, Mar 31; April not yet due."""
        res = materialize([_template()], [], today=date(2024, 4, 15))

        assert [tx.date for tx in res.new_transactions] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
        ]
        assert res.templates[0].last_processed_date == date(2024, 3, 31)
        assert all(tx.amount == 1000.0 for tx in res.new_transactions)
        assert all(tx.type is TransactionType.INCOME for tx in res.new_transactions)

    def test_ids_are_deterministic(self):
        res = materialize([_template()], [], today=date(2024, 2, 29))
        assert [tx.id for tx in res.new_transactions] == [
            "recurring:salary:2024-01-31",
            "recurring:salary:2024-02-29",
        ]
        assert recurring_transaction_id("salary", date(2024, 1, 31)) == (
            "recurring:salary:2024-01-31"
        )

    def test_resumes_after_cursor_at_start_day(self):
        """A cursor on a clamped day resumes at the anchor day, not the clamped one."""
        tpl = _template(last_processed_date=date(2024, 2, 29))
        res = materialize([tpl], [], today=date(2024, 5, 31))

        assert [tx.date for tx in res.new_transactions] == [
            date(2024, 3, 31),
            date(2024, 4, 30),
            date(2024, 5, 31),
        ]

    def test_future_template_skipped(self):
        tpl = _template(start_date=date(2024, 6, 1))
        txs = [Transaction("m1", date(2024, 5, 1), "Manual", 5.0, TransactionType.EXPENSE)]
        res = materialize([tpl], txs, today=date(2024, 5, 15))

        assert not res.changed
        assert res.transactions == txs
        assert res.templates == [tpl]

    def test_end_date_bounds_generation(self):
        tpl = _template(start_date=date(2024, 1, 10), end_date=date(2024, 3, 9))
        res = materialize([tpl], [], today=date(2024, 12, 1))

        assert [tx.date for tx in res.new_transactions] == [
            date(2024, 1, 10),
            date(2024, 2, 10),
        ]
        assert res.templates[0].last_processed_date == date(2024, 2, 10)

    def test_start_today_is_due(self):
        tpl = _template(start_date=date(2024, 4, 15))
        res = materialize([tpl], [], today=date(2024, 4, 15))
        assert [tx.date for tx in res.new_transactions] == [date(2024, 4, 15)]

    def test_ledger_sorted_newest_first(self):
        manual = Transaction("m1", date(2024, 2, 15), "Manual", 5.0, TransactionType.EXPENSE)
        res = materialize([_template()], [manual], today=date(2024, 3, 31))

        dates = [tx.date for tx in res.transactions]
        assert dates == sorted(dates, reverse=True)
        assert len(res.transactions) == 4

    def test_input_collections_not_mutated(self):
        templates = [_template()]
        txs: list[Transaction] = []
        materialize(templates, txs, today=date(2024, 4, 15))
        assert txs == []
        assert templates[0].last_processed_date is None


class TestIdempotence:
    def test_second_run_is_noop(self):
        today = date(2024, 4, 15)
        first = materialize([_template()], [], today)
        second = materialize(first.templates, first.transactions, today)

        assert not second.changed
        assert second.new_transactions == []
        assert second.transactions == first.transactions
        assert second.templates == first.templates

    def test_existing_ids_are_not_duplicated(self):
        """Entries already in the ledger are dropped even with a stale cursor."""
        today = date(2024, 4, 15)
        first = materialize([_template()], [], today)

        # Cursor lost (e.g. restored from an older backup), ledger intact
        again = materialize([_template()], first.transactions, today)
        assert not again.changed
        assert len(again.transactions) == 3

    def test_partial_overlap_only_appends_missing(self):
        today = date(2024, 4, 15)
        existing = materialize([_template()], [], date(2024, 2, 29)).transactions
        res = materialize([_template()], existing, today)

        assert [tx.date for tx in res.new_transactions] == [date(2024, 3, 31)]
        assert len(res.transactions) == 3


def test_due_occurrences_empty_before_start():
    assert due_occurrences(_template(), date(2024, 1, 30)) == []


@pytest.mark.parametrize("today", [date(2024, 1, 31), date(2024, 7, 1), date(2025, 2, 28)])
def test_no_future_leakage(today):
    tpl = _template(end_date=date(2024, 12, 31))
    res = materialize([tpl], [], today)
    for tx in res.new_transactions:
        assert tx.date <= today
        assert tx.date <= tpl.end_date
