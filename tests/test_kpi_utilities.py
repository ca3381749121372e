"""
Tests for ledger KPI utilities.
"""

from datetime import date

import pandas as pd
import pytest
from fintracklab.core.records import Transaction, TransactionType
from fintracklab.kpi import available_years, balance_history, monthly_cashflow

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


@pytest.fixture
def ledger():
    return [
        Transaction("t3", date(2024, 3, 5), "Salary", 5000.0, INCOME),
        Transaction("t4", date(2024, 3, 10), "Rent", 3000.0, EXPENSE),
        Transaction("t1", date(2024, 2, 1), "Salary", 1000.0, INCOME),
        Transaction("t2", date(2024, 2, 3), "Food", 200.0, EXPENSE),
        Transaction("t0", date(2023, 12, 30), "Gift", 50.0, EXPENSE),
    ]


class TestBalanceHistory:
    def test_cumulative_and_forward_filled(self, ledger):
        history = balance_history(ledger)

        assert history.name == "balance"
        assert history.index[0] == pd.Timestamp("2023-12-30")
        assert history.index[-1] == pd.Timestamp("2024-03-10")
        assert history[pd.Timestamp("2024-02-01")] == 950.0
        assert history[pd.Timestamp("2024-02-02")] == 950.0
        assert history[pd.Timestamp("2024-03-10")] == 2750.0

    def test_empty(self):
        assert balance_history([]).empty


class TestMonthlyCashflow:
    def test_per_month_totals(self, ledger):
        table = monthly_cashflow(ledger)

        assert list(table.columns) == ["income", "expenses", "balance", "savings_rate"]
        march = table.loc[pd.Period("2024-03", freq="M")]
        assert march["income"] == 5000.0
        assert march["expenses"] == 3000.0
        assert march["balance"] == 2000.0
        assert march["savings_rate"] == pytest.approx(40.0)

    def test_month_without_income_has_zero_rate(self, ledger):
        table = monthly_cashflow(ledger)
        december = table.loc[pd.Period("2023-12", freq="M")]
        assert december["balance"] == -50.0
        assert december["savings_rate"] == 0.0

    def test_empty(self):
        assert monthly_cashflow([]).empty


def test_available_years(ledger):
    assert available_years(ledger) == ["2024", "2023"]
    assert available_years([]) == []
