"""
Tests for record types, date filters and their mapping converters.
"""

from datetime import date

import pytest
from fintracklab.core.errors import ConfigError, FilterError
from fintracklab.core.records import (
    Allocation,
    AllocationCategory,
    DateFilter,
    FilterType,
    RecurringTransaction,
    Transaction,
    TransactionType,
)


class TestTransaction:
    def test_signed_amount_follows_type(self):
        income = Transaction("a", date(2024, 1, 1), "Salary", 100.0, TransactionType.INCOME)
        expense = Transaction("b", date(2024, 1, 1), "Rent", 40.0, TransactionType.EXPENSE)
        assert income.signed_amount == 100.0
        assert expense.signed_amount == -40.0

    def test_negative_amount_rejected(self):
        with pytest.raises(ConfigError):
            Transaction("a", date(2024, 1, 1), "Oops", -1.0, TransactionType.INCOME)

    def test_from_dict_round_trip(self):
        payload = {
            "id": "t1",
            "date": "2024-03-15",
            "description": "Salary",
            "amount": 5000,
            "type": "income",
        }
        tx = Transaction.from_dict(payload)
        assert tx.date == date(2024, 3, 15)
        assert tx.type is TransactionType.INCOME
        assert tx.to_dict() == {**payload, "amount": 5000.0}

    @pytest.mark.parametrize(
        "field, value",
        [("date", "2024-13-01"), ("type", "transfer"), ("amount", "abc"), ("id", "")],
    )
    def test_from_dict_rejects_bad_fields(self, field, value):
        payload = {
            "id": "t1",
            "date": "2024-03-15",
            "description": "x",
            "amount": 1.0,
            "type": "expense",
        }
        payload[field] = value
        with pytest.raises(ConfigError):
            Transaction.from_dict(payload)

    @pytest.mark.parametrize("amount", ["nan", float("nan"), "inf", float("-inf")])
    def test_from_dict_rejects_non_finite_amount(self, amount):
        payload = {"id": "t1", "date": "2024-03-01", "amount": amount, "type": "income"}
        with pytest.raises(ConfigError, match="finite"):
            Transaction.from_dict(payload)

    def test_constructor_rejects_nan(self):
        with pytest.raises(ConfigError, match="finite"):
            Transaction("t", date(2024, 3, 1), "x", float("nan"), TransactionType.INCOME)


class TestAllocation:
    def test_non_finite_rate_rejected(self):
        with pytest.raises(ConfigError, match="finite"):
            Allocation.from_dict(
                {
                    "id": "a0",
                    "date": "2024-03-01",
                    "category": "investments",
                    "amount": 10,
                    "interestRate": "nan",
                }
            )

    def test_optional_fields_omitted_from_dict(self):
        alloc = Allocation("a1", date(2024, 3, 1), AllocationCategory.GOALS, 200.0)
        assert alloc.to_dict() == {
            "id": "a1",
            "date": "2024-03-01",
            "category": "goals",
            "amount": 200.0,
        }

    def test_investment_fields_parsed(self):
        alloc = Allocation.from_dict(
            {
                "id": "a2",
                "date": "2024-03-01",
                "category": "investments",
                "amount": 1000,
                "interestRate": 12,
                "investmentType": "Stocks",
            }
        )
        assert alloc.is_investment
        assert alloc.interest_rate == 12.0
        assert alloc.investment_type == "Stocks"

    def test_rate_at_or_below_minus_100_rejected(self):
        with pytest.raises(ConfigError):
            Allocation(
                "a3", date(2024, 3, 1), AllocationCategory.INVESTMENTS, 10.0, interest_rate=-100
            )

    def test_rate_on_non_investment_warns(self):
        with pytest.warns(UserWarning, match="ignored"):
            Allocation(
                "a4", date(2024, 3, 1), AllocationCategory.GOALS, 10.0, interest_rate=5.0
            )


class TestRecurringTransaction:
    def test_occurrences_keep_start_day(self):
        tpl = RecurringTransaction(
            "r1", "Salary", 1000.0, TransactionType.INCOME, date(2024, 1, 31)
        )
        assert [tpl.occurrence(k) for k in range(4)] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]

    def test_next_occurrence_index_resumes_after_cursor(self):
        tpl = RecurringTransaction(
            "r1",
            "Salary",
            1000.0,
            TransactionType.INCOME,
            date(2024, 1, 31),
            last_processed_date=date(2024, 2, 29),
        )
        assert tpl.next_occurrence_index() == 2
        assert tpl.occurrence(tpl.next_occurrence_index()) == date(2024, 3, 31)

    def test_from_dict_optional_dates(self):
        tpl = RecurringTransaction.from_dict(
            {
                "id": "r2",
                "description": "Gym",
                "amount": 30,
                "type": "expense",
                "startDate": "2024-01-10",
                "endDate": "",
            }
        )
        assert tpl.end_date is None
        assert tpl.last_processed_date is None
        assert "endDate" not in tpl.to_dict()


class TestDateFilter:
    @pytest.mark.parametrize(
        "ftype, value, day, expected",
        [
            (FilterType.YEAR, "2024", date(2024, 7, 1), True),
            (FilterType.YEAR, "2024", date(2023, 12, 31), False),
            (FilterType.MONTH, "2024-03", date(2024, 3, 31), True),
            (FilterType.MONTH, "2024-03", date(2024, 4, 1), False),
            (FilterType.DAY, "2024-03-15", date(2024, 3, 15), True),
            (FilterType.DAY, "2024-03-15", date(2024, 3, 16), False),
        ],
    )
    def test_prefix_match(self, ftype, value, day, expected):
        assert DateFilter(ftype, value).matches(day) is expected

    def test_all_and_empty_value_match_everything(self):
        assert DateFilter.all().matches(date(1999, 1, 1))
        assert DateFilter(FilterType.MONTH, None).is_unfiltered

    @pytest.mark.parametrize(
        "ftype, value",
        [
            (FilterType.YEAR, "24"),
            (FilterType.MONTH, "2024-3"),
            (FilterType.MONTH, "2024-13"),
            (FilterType.DAY, "2024-03"),
        ],
    )
    def test_malformed_values_rejected(self, ftype, value):
        with pytest.raises(FilterError):
            DateFilter(ftype, value)

    def test_parse(self):
        assert DateFilter.parse("all") == DateFilter.all()
        assert DateFilter.parse("month:2024-03") == DateFilter(FilterType.MONTH, "2024-03")
        assert DateFilter("year", "2024").type is FilterType.YEAR
        with pytest.raises(FilterError):
            DateFilter.parse("week:2024-10")

    def test_from_dict_normalises_yaml_scalars(self):
        assert DateFilter.from_dict({"type": "year", "value": 2024}) == DateFilter(
            FilterType.YEAR, "2024"
        )
        assert DateFilter.from_dict({"type": "day", "value": date(2024, 3, 5)}) == DateFilter(
            FilterType.DAY, "2024-03-05"
        )

    @pytest.mark.parametrize("value", [True, 2024.0, ["2024"]])
    def test_non_string_values_rejected(self, value):
        with pytest.raises(FilterError, match="must be a string"):
            DateFilter.from_dict({"type": "year", "value": value})
