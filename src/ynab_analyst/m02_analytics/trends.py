"""
trends.py

Month-bucketed spending trends. Expense transactions are grouped by the
calendar month of their date and by category; the window is the last
`months` calendar months ending at the month of the latest dated expense.
Months without spend are reported as zero.
"""

from typing import Iterable

import pandas as pd

from ynab_analyst.m01_transactions.models import Transaction

STABLE_BAND_PCT = 10.0


def _expense_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {"date": t.date, "category_id": t.category_id, "spend": -t.amount}
        for t in transactions
        if t.amount < 0 and t.date
    ]
    df = pd.DataFrame(rows, columns=["date", "category_id", "spend"])
    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d", errors="coerce")
    df = df.dropna(subset=["date"])
    return df.assign(month=df["date"].dt.to_period("M"))


def _trend(first: int, last: int) -> tuple[str, float | None]:
    if first == 0:
        return ("increasing" if last > 0 else "stable"), None
    change_pct = round((last - first) / first * 100, 2)
    if abs(change_pct) < STABLE_BAND_PCT:
        return "stable", change_pct
    return ("increasing" if change_pct > 0 else "decreasing"), change_pct


def monthly_spending_trends(transactions: Iterable[Transaction], months: int = 6) -> dict:
    """Return per-month totals and per-category monthly series for the window."""
    months = max(1, int(months))
    df = _expense_frame(transactions)
    if df.empty:
        return {"months": [], "monthly_totals": [], "categories": []}

    window = pd.period_range(end=df["month"].max(), periods=months, freq="M")
    df = df[df["month"].isin(window)]

    pivot = (
        df.pivot_table(
            index="month", columns="category_id", values="spend", aggfunc="sum", fill_value=0
        )
        .reindex(window, fill_value=0)
        .astype("int64")
    )

    labels = [str(p) for p in window]
    monthly_totals = [
        {"month": label, "total_spent": int(total)}
        for label, total in zip(labels, pivot.sum(axis=1))
    ]

    categories = []
    for category_id in pivot.columns:
        series = [int(v) for v in pivot[category_id].tolist()]
        trend, change_pct = _trend(series[0], series[-1])
        categories.append(
            {
                "category_id": str(category_id),
                "monthly": series,
                "total_spent": sum(series),
                "average_monthly": sum(series) // len(series),
                "trend": trend,
                "change_pct": change_pct,
            }
        )
    categories.sort(key=lambda c: c["total_spent"], reverse=True)

    return {"months": labels, "monthly_totals": monthly_totals, "categories": categories}
