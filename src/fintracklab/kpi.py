"""
KPI utilities over the transaction ledger.

These helpers tabulate the ledger with pandas for dashboards: the running balance
history, a per-month income/expense table with savings rate, and the years
available to a YEAR filter.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from fintracklab.core.aggregation import transactions_frame
from fintracklab.core.records import Transaction, TransactionType


def _signed_frame(transactions: list[Transaction]) -> pd.DataFrame:
    df = transactions_frame(transactions)
    df["signed"] = np.where(
        df["type"] == TransactionType.INCOME.value, df["amount"], -df["amount"]
    )
    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d")
    return df


def balance_history(transactions: list[Transaction]) -> pd.Series:
    """
    Cumulative balance per calendar day.

    Runs from the first to the last dated transaction, oldest first; days without
    transactions carry the previous balance forward.

    Args:
        transactions: The ledger (any order)

    Returns:
        Series indexed by day, named "balance" (empty for an empty ledger)
    """
    if not transactions:
        return pd.Series(dtype=float, name="balance")

    df = _signed_frame(transactions)
    daily = df.groupby("date")["signed"].sum().sort_index().cumsum()
    days = pd.date_range(daily.index.min(), daily.index.max(), freq="D")
    history = daily.reindex(days).ffill()
    history.index.name = "date"
    return history.rename("balance")


def monthly_cashflow(transactions: list[Transaction]) -> pd.DataFrame:
    """
    Income, expenses, balance and savings rate per calendar month.

    Returns:
        DataFrame indexed by monthly Period with columns ``income``,
        ``expenses``, ``balance`` and ``savings_rate`` (percent, 0 where there is
        no income)
    """
    columns = ["income", "expenses", "balance", "savings_rate"]
    if not transactions:
        return pd.DataFrame(columns=columns, dtype=float)

    df = _signed_frame(transactions)
    df["month"] = df["date"].dt.to_period("M")
    table = df.pivot_table(
        index="month", columns="type", values="amount", aggfunc="sum", fill_value=0.0
    )
    out = pd.DataFrame(index=table.index)
    out["income"] = table.get(TransactionType.INCOME.value, 0.0)
    out["expenses"] = table.get(TransactionType.EXPENSE.value, 0.0)
    out["balance"] = out["income"] - out["expenses"]
    out["savings_rate"] = np.where(
        out["income"] > 0, out["balance"] / out["income"].where(out["income"] > 0) * 100, 0.0
    )
    return out[columns].astype(float)


def available_years(transactions: list[Transaction]) -> list[str]:
    """Distinct ``YYYY`` values in the ledger, newest first."""
    return sorted({f"{tx.date.year:04d}" for tx in transactions}, reverse=True)
