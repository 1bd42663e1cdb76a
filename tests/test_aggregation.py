import datetime as dt
from decimal import Decimal

import pytest

from app.analytics.aggregation import (
    balance_summary,
    category_breakdown,
    current_month_window,
    monthly_series,
    totals,
    trailing_windows,
)
from app.config import FALLBACK_COLORS, UNCATEGORIZED
from app.data.schemas import Account, Category, DateWindow, TransactionKind

MAY = DateWindow.month(2024, 5)


def test_empty_breakdown() -> None:
    assert category_breakdown([], MAY) == []


def test_breakdown_groups_and_sorts_descending(make_tx) -> None:
    txs = [
        make_tx(dt.date(2024, 5, 3), "100", category_id="A"),
        make_tx(dt.date(2024, 5, 4), "150", category_id="B"),
        make_tx(dt.date(2024, 5, 5), "250", category_id="B"),
    ]
    rows = category_breakdown(txs, MAY)

    assert [(r.name, r.total) for r in rows] == [("B", Decimal("400.00")), ("A", Decimal("100.00"))]
    # colors follow first-seen order, not sorted order
    assert rows[0].color == FALLBACK_COLORS[1]
    assert rows[1].color == FALLBACK_COLORS[0]


def test_breakdown_sums_exactly_to_the_cent(make_tx) -> None:
    txs = [make_tx(dt.date(2024, 5, 1), "0.10"), make_tx(dt.date(2024, 5, 2), "0.20")]
    (row,) = category_breakdown(txs, MAY)
    assert row.total == Decimal("0.30")


def test_breakdown_only_counts_expenses_inside_window(make_tx) -> None:
    txs = [
        make_tx(dt.date(2024, 5, 1), "10"),                     # first day, inclusive
        make_tx(dt.date(2024, 5, 31), "20"),                    # last day, inclusive
        make_tx(dt.date(2024, 4, 30), "1000"),                  # before
        make_tx(dt.date(2024, 6, 1), "1000"),                   # after
        make_tx(dt.date(2024, 5, 10), "5000", kind="income"),   # income ignored
    ]
    (row,) = category_breakdown(txs, MAY)
    assert row.name == UNCATEGORIZED
    assert row.total == Decimal("30.00")


def test_breakdown_uses_known_category_name_and_color(make_tx) -> None:
    cats = {
        "c1": Category(id="c1", name="Food & Dining", kind=TransactionKind.EXPENSE, color="#ef4444"),
        "c2": Category(id="c2", name="Misc", kind=TransactionKind.EXPENSE, color=None),
    }
    txs = [
        make_tx(dt.date(2024, 5, 1), "30", category_id="c1"),
        make_tx(dt.date(2024, 5, 1), "20", category_id="c2"),
        make_tx(dt.date(2024, 5, 1), "10", category_id="gone"),
    ]
    rows = category_breakdown(txs, MAY, cats)

    assert [r.name for r in rows] == ["Food & Dining", "Misc", "gone"]
    assert rows[0].color == "#ef4444"
    assert rows[1].color == FALLBACK_COLORS[1]
    assert rows[2].color == FALLBACK_COLORS[2]


def test_breakdown_palette_cycles(make_tx) -> None:
    txs = [make_tx(dt.date(2024, 5, 1), str(100 - i), category_id=f"cat{i}") for i in range(8)]
    rows = category_breakdown(txs, MAY)
    assert rows[-1].name == "cat7"
    assert rows[-1].color == FALLBACK_COLORS[0]


def test_breakdown_ties_keep_first_seen_order(make_tx) -> None:
    txs = [
        make_tx(dt.date(2024, 5, 1), "50", category_id="first"),
        make_tx(dt.date(2024, 5, 2), "50", category_id="second"),
    ]
    assert [r.name for r in category_breakdown(txs, MAY)] == ["first", "second"]


def test_breakdown_to_dict_shape(make_tx) -> None:
    (row,) = category_breakdown([make_tx(dt.date(2024, 5, 1), "12.5", category_id="X")], MAY)
    assert row.to_dict() == {"name": "X", "value": Decimal("12.50"), "color": FALLBACK_COLORS[0]}


def test_monthly_series_has_n_points_oldest_first(make_tx) -> None:
    txs = [
        make_tx(dt.date(2024, 5, 2), "3000", kind="income"),
        make_tx(dt.date(2024, 5, 1), "4.50"),
        make_tx(dt.date(2024, 3, 15), "100"),
        make_tx(dt.date(2023, 1, 1), "999"),   # outside the window
    ]
    points = monthly_series(txs, 6, reference=dt.date(2024, 5, 15))

    assert [p.label for p in points] == ["Dec 23", "Jan 24", "Feb 24", "Mar 24", "Apr 24", "May 24"]
    assert all(p.net == p.income - p.expenses for p in points)
    assert points[-1].income == Decimal("3000.00")
    assert points[-1].expenses == Decimal("4.50")
    assert points[-1].net == Decimal("2995.50")
    assert points[3].expenses == Decimal("100.00")
    assert points[0].income == points[0].expenses == Decimal("0.00")


def test_monthly_series_empty_input_zero_filled() -> None:
    points = monthly_series([], 3, reference=dt.date(2024, 5, 1))
    assert len(points) == 3
    assert all(p.income == p.expenses == p.net == 0 for p in points)


def test_trailing_windows_cross_year_boundary() -> None:
    windows = trailing_windows(3, dt.date(2024, 1, 10))
    assert [w.start for w in windows] == [dt.date(2023, 11, 1), dt.date(2023, 12, 1), dt.date(2024, 1, 1)]
    assert windows[-1].end == dt.date(2024, 1, 31)


def test_trailing_windows_rejects_zero_months() -> None:
    with pytest.raises(ValueError):
        trailing_windows(0)


def test_current_month_window_handles_leap_february() -> None:
    window = current_month_window(dt.date(2024, 2, 10))
    assert window == DateWindow(dt.date(2024, 2, 1), dt.date(2024, 2, 29))
    assert window.label == "February 2024"


def test_totals(make_tx) -> None:
    txs = [
        make_tx(dt.date(2024, 5, 1), "100", kind="income"),
        make_tx(dt.date(2024, 5, 1), "40"),
        make_tx(dt.date(2024, 5, 1), "0.55"),
    ]
    assert totals(txs) == {
        "income": Decimal("100.00"),
        "expenses": Decimal("40.55"),
        "net": Decimal("59.45"),
        "count": 3,
    }


def test_balance_summary_sums_active_accounts(make_tx) -> None:
    accounts = [
        Account(id="a", name="Main", balance=Decimal("1000.00")),
        Account(id="b", name="Savings", balance=Decimal("250.50")),
        Account(id="c", name="Closed", balance=Decimal("999.00"), is_active=False),
    ]
    txs = [
        make_tx(dt.date(2024, 5, 2), "500", kind="income"),
        make_tx(dt.date(2024, 5, 3), "120"),
        make_tx(dt.date(2024, 4, 3), "80"),
    ]
    s = balance_summary(accounts, txs, MAY)

    assert s.total_balance == Decimal("1250.50")
    assert s.income == Decimal("500.00")
    assert s.expenses == Decimal("120.00")
    assert s.net == Decimal("380.00")
    assert s.transaction_count == 2
    assert s.to_dict()["period"] == "May 2024"
