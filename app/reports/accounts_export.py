"""
Accounts Export — one row per account, newest first.
"""
from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Optional

from app.data.store import DataStore
from app.errors import NoDataError
from app.excel.writer import ExcelWriter

logger = logging.getLogger(__name__)

ACCOUNT_COLS = [
    ("name", "text", "Account Name"),
    ("type", "text", "Account Type"),
    ("balance", "money", "Balance"),
    ("currency", "text", "Currency"),
    ("status", "text", "Status"),
    ("created", "text", "Created Date"),
]


def default_filename(now: Optional[dt.datetime] = None) -> str:
    return f"accounts_export_{(now or dt.datetime.now()):%Y-%m-%d}.xlsx"


def generate_json(store: DataStore, user_id: str) -> list[dict]:
    accounts = store.accounts(user_id)
    if not accounts:
        raise NoDataError("You don't have any accounts to export")
    return [
        {
            "name": a.name,
            "type": a.type,
            "balance": a.balance,
            "currency": a.currency,
            "status": "Active" if a.is_active else "Inactive",
            "created": a.created_at.strftime("%d/%m/%Y %H:%M:%S") if a.created_at else "",
        }
        for a in reversed(accounts)
    ]


def build_workbook(store: DataStore, user_id: str) -> ExcelWriter:
    rows = generate_json(store, user_id)
    ew = ExcelWriter()
    ws = ew.add_sheet("Accounts")
    ew.write_table(ws, 1, ACCOUNT_COLS, rows)
    return ew


def generate_excel(store: DataStore, user_id: str, output_path: str | Path) -> Path:
    path = build_workbook(store, user_id).save(output_path)
    logger.info("Accounts export written to %s", path)
    return path
