"""
Dashboard aggregation — category breakdown, monthly trends, balance summary.

All functions are pure: they take materialized transactions/accounts and
return fresh view objects. Nothing is cached between calls.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from app.config import FALLBACK_COLORS, UNCATEGORIZED, DEFAULT_TRAILING_MONTHS
from app.analytics.common import sum_money
from app.data.schemas import (
    Account, BalanceSummary, Category, CategoryTotal, DateWindow, MonthlyPoint,
    Transaction, TransactionKind, shift_month,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def current_month_window(reference: Optional[dt.date] = None) -> DateWindow:
    """First to last day of the month containing ``reference`` (default today)."""
    return DateWindow.containing(reference or dt.date.today())


def _month_label(day: dt.date) -> str:
    return f"{day:%b %y}"


def _in_window(transactions: Iterable[Transaction], window: Optional[DateWindow]) -> list[Transaction]:
    if window is None:
        return list(transactions)
    return [t for t in transactions if window.contains(t.date)]


def totals(transactions: Iterable[Transaction]) -> dict:
    """Income, expenses, net and count over a transaction set."""
    txs = list(transactions)
    income = sum_money(t.amount for t in txs if t.kind == TransactionKind.INCOME)
    expenses = sum_money(t.amount for t in txs if t.kind == TransactionKind.EXPENSE)
    return {
        "income": income,
        "expenses": expenses,
        "net": income - expenses,
        "count": len(txs),
    }


# ---------------------------------------------------------------------------
# Category breakdown
# ---------------------------------------------------------------------------

def category_breakdown(
    transactions: Iterable[Transaction],
    window: DateWindow,
    categories: Optional[Mapping[str, Category]] = None,
) -> list[CategoryTotal]:
    """Expense totals per category inside ``window``, largest first.

    Groups by category id. The group is named after the category when it is
    known, after the raw id otherwise, and "Uncategorized" when the
    transaction has no category. Colors come from the category, falling back
    to a palette indexed by first-seen order.
    """
    categories = categories or {}
    groups: dict[Optional[str], list] = {}
    for t in transactions:
        if t.kind != TransactionKind.EXPENSE or not window.contains(t.date):
            continue
        groups.setdefault(t.category_id, []).append(t.amount)

    rows = []
    for idx, (cat_id, amounts) in enumerate(groups.items()):
        cat = categories.get(cat_id) if cat_id is not None else None
        if cat is not None:
            name = cat.name
        else:
            name = cat_id if cat_id is not None else UNCATEGORIZED
        color = (cat.color if cat is not None else None) or FALLBACK_COLORS[idx % len(FALLBACK_COLORS)]
        rows.append(CategoryTotal(name=name, total=sum_money(amounts), color=color))

    # sorted() is stable, so equal totals keep first-seen order
    return sorted(rows, key=lambda r: r.total, reverse=True)


# ---------------------------------------------------------------------------
# Monthly series
# ---------------------------------------------------------------------------

def trailing_windows(trailing_months: int, reference: Optional[dt.date] = None) -> list[DateWindow]:
    """Month windows for the last N months, oldest first, ending with the reference month."""
    if trailing_months < 1:
        raise ValueError("trailing_months must be at least 1")
    ref = reference or dt.date.today()
    windows = []
    for back in range(trailing_months - 1, -1, -1):
        y, m = shift_month(ref.year, ref.month, -back)
        windows.append(DateWindow.month(y, m))
    return windows


def monthly_series(
    transactions: Iterable[Transaction],
    trailing_months: int = DEFAULT_TRAILING_MONTHS,
    reference: Optional[dt.date] = None,
) -> list[MonthlyPoint]:
    """Income, expenses and net per month for the trailing window.

    Always returns exactly ``trailing_months`` points; empty months are zero.
    """
    txs = list(transactions)
    points = []
    for window in trailing_windows(trailing_months, reference):
        t = totals(_in_window(txs, window))
        points.append(MonthlyPoint(
            label=_month_label(window.start),
            income=t["income"],
            expenses=t["expenses"],
            net=t["net"],
            start=window.start,
        ))
    return points


# ---------------------------------------------------------------------------
# Balance summary
# ---------------------------------------------------------------------------

def total_balance(accounts: Iterable[Account]) -> Decimal:
    """Sum of stored balances over active accounts."""
    return sum_money(a.balance for a in accounts if a.is_active)


def balance_summary(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    window: Optional[DateWindow] = None,
) -> BalanceSummary:
    """Dashboard header figures: total balance plus income/expense/net for a window."""
    t = totals(_in_window(transactions, window))
    return BalanceSummary(
        total_balance=total_balance(accounts),
        income=t["income"],
        expenses=t["expenses"],
        net=t["net"],
        transaction_count=t["count"],
        window=window,
    )
