"""
Dashboard Report — balance KPIs, expense breakdown and monthly trends.
"""
from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Optional

from app.config import DEFAULT_TRAILING_MONTHS
from app.data.store import DataStore
from app.data.schemas import DateWindow
from app.analytics.aggregation import (
    balance_summary, category_breakdown, current_month_window, monthly_series,
)
from app.analytics.common import savings_rate
from app.excel.writer import ExcelWriter

logger = logging.getLogger(__name__)

CATEGORY_COLS = [
    ("name", "text", "Category"),
    ("value", "currency", "Spent"),
    ("color", "text", "Color"),
]

TREND_COLS = [
    ("month", "text", "Month"),
    ("income", "currency", "Income"),
    ("expenses", "currency", "Expenses"),
    ("net", "currency", "Net"),
]


def generate_json(
    store: DataStore,
    user_id: str,
    window: DateWindow | None = None,
    months: int = DEFAULT_TRAILING_MONTHS,
    reference: Optional[dt.date] = None,
) -> dict:
    window = window or current_month_window(reference)
    txs = store.transactions(user_id)
    summary = balance_summary(store.accounts(user_id), txs, window)

    return {
        "summary": summary.to_dict(),
        "savings_rate": savings_rate(summary.income, summary.expenses),
        "categories": [c.to_dict() for c in category_breakdown(txs, window, store.category_map(user_id))],
        "trends": [p.to_dict() for p in monthly_series(txs, months, reference or window.end)],
    }


def build_workbook(
    store: DataStore,
    user_id: str,
    window: DateWindow | None = None,
    months: int = DEFAULT_TRAILING_MONTHS,
    reference: Optional[dt.date] = None,
) -> ExcelWriter:
    data = generate_json(store, user_id, window, months, reference)
    s = data["summary"]
    ew = ExcelWriter()

    ws = ew.add_sheet("Overview")
    ew.write_title(ws, "PERSONAL FINANCE",
                   f"Dashboard  |  {s['period']}  |  Generated {dt.datetime.now():%B %d, %Y}")

    row = ew.write_section(ws, 5, "BALANCE")
    row = ew.write_kpi_row(ws, row, [
        (s["total_balance"], "TOTAL BALANCE", "currency"),
        (s["monthly_income"], "INCOME", "currency"),
        (s["monthly_expenses"], "EXPENSES", "currency"),
    ])
    ew.write_delta_kpi(ws, row, 1, s["net_income"], "NET")
    row = ew.write_kpi_row(ws, row, [
        (data["savings_rate"], "SAVINGS RATE", "percent"),
        (s["transaction_count"], "TRANSACTIONS", "number"),
    ], start_col=3)

    row = ew.write_section(ws, row, "EXPENSES BY CATEGORY")
    if data["categories"]:
        ew.write_table(ws, row, CATEGORY_COLS, data["categories"],
                       freeze=False, show_total=True)
    else:
        ws.cell(row=row, column=1).value = "No expenses in this period"

    ws_t = ew.add_sheet("Monthly Trends")
    ew.write_table(ws_t, 1, TREND_COLS, data["trends"], show_total=True)
    return ew


def generate_excel(
    store: DataStore,
    user_id: str,
    output_path: str | Path,
    window: DateWindow | None = None,
    months: int = DEFAULT_TRAILING_MONTHS,
    reference: Optional[dt.date] = None,
) -> Path:
    path = build_workbook(store, user_id, window, months, reference).save(output_path)
    logger.info("Dashboard report written to %s", path)
    return path
