"""
Transactions Export — every transaction plus a totals sheet.
"""
from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Optional

from app.config import UNCATEGORIZED
from app.data.store import DataStore
from app.data.schemas import DateWindow, TransactionKind
from app.analytics.aggregation import totals
from app.errors import NoDataError
from app.excel.writer import ExcelWriter

logger = logging.getLogger(__name__)

TRANSACTION_COLS = [
    ("date", "text", "Date"),
    ("description", "text", "Description"),
    ("category", "text", "Category"),
    ("account", "text", "Account"),
    ("account_type", "text", "Account Type"),
    ("type", "text", "Type"),
    ("amount", "currency", "Amount"),
    ("notes", "text", "Notes"),
    ("created", "text", "Created Date"),
]

DATE_FMT = "%d/%m/%Y"
TIMESTAMP_FMT = "%d/%m/%Y %H:%M:%S"


def default_filename(now: Optional[dt.datetime] = None) -> str:
    return f"transactions_export_{(now or dt.datetime.now()):%Y-%m-%d}.xlsx"


def generate_json(store: DataStore, user_id: str, window: DateWindow | None = None) -> dict:
    """Export rows (newest first) and totals. Raises NoDataError when empty."""
    txs = store.transactions(user_id, window)
    if not txs:
        raise NoDataError("You don't have any transactions to export")

    accounts = {a.id: a for a in store.accounts(user_id)}
    categories = store.category_map(user_id)

    rows = []
    for t in txs:
        acct = accounts.get(t.account_id)
        cat = categories.get(t.category_id) if t.category_id else None
        rows.append({
            "date": t.date.strftime(DATE_FMT),
            "description": t.description,
            "category": cat.name if cat else UNCATEGORIZED,
            "account": acct.name if acct else "Unknown",
            "account_type": acct.type if acct else "Unknown",
            "type": "Income" if t.kind == TransactionKind.INCOME else "Expense",
            "amount": t.amount,
            "notes": t.notes or "",
            "created": t.created_at.strftime(TIMESTAMP_FMT) if t.created_at else "",
        })

    return {
        "period": window.label if window else "All Time",
        "rows": rows,
        "totals": totals(txs),
    }


def build_workbook(
    store: DataStore,
    user_id: str,
    window: DateWindow | None = None,
    now: Optional[dt.datetime] = None,
) -> ExcelWriter:
    data = generate_json(store, user_id, window)
    t = data["totals"]
    now = now or dt.datetime.now()
    ew = ExcelWriter()

    ws = ew.add_sheet("Transactions")
    ew.write_table(
        ws, 1, TRANSACTION_COLS, data["rows"],
        highlight_fn=lambda _i, r: r["type"].lower(),
    )

    ws_s = ew.add_sheet("Summary")
    ew.write_key_values(ws_s, 1, ("Metric", "Amount"), [
        ("Total Income", t["income"], "currency"),
        ("Total Expenses", t["expenses"], "currency"),
        ("Net Balance", t["net"], "currency"),
        ("Total Transactions", t["count"], "number"),
        ("Export Date", now.strftime(TIMESTAMP_FMT), "text"),
    ])
    return ew


def generate_excel(
    store: DataStore,
    user_id: str,
    output_path: str | Path,
    window: DateWindow | None = None,
    now: Optional[dt.datetime] = None,
) -> Path:
    path = build_workbook(store, user_id, window, now).save(output_path)
    logger.info("Transactions export written to %s", path)
    return path
