"""
Bank-statement normalization: raw spreadsheet rows -> Transaction records.

Statements are noisy, so nothing in here raises for a bad row. Rows missing a
date, a description or a positive amount are dropped and counted.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
import re
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Sequence

import pandas as pd

from app.config import (
    DATE_COLUMNS, DESCRIPTION_COLUMNS, AMOUNT_COLUMNS, DEBIT_COLUMNS, CREDIT_COLUMNS,
    IMPORT_NOTE,
)
from app.data.schemas import RawRow, Transaction, TransactionKind

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Everything except digits, minus sign and decimal point is noise (currency
# symbols, thousands separators, spaces, "Dr"/"Cr" suffixes).
_AMOUNT_NOISE_RE = re.compile(r"[^\d.\-]")
# Longest leading number, the way a lenient float parser reads "12.5-3" as 12.5.
_LEADING_NUMBER_RE = re.compile(r"^-?(\d+\.?\d*|\.\d+)")
_YEAR_FIRST_RE = re.compile(r"^\d{4}[-/.]\d{1,2}[-/.]\d{1,2}")
_DIGIT_RE = re.compile(r"\d")

_EXCEL_EPOCH = dt.date(1899, 12, 30)
_MAX_EXCEL_SERIAL = 2958465  # 9999-12-31


# ---------------------------------------------------------------------------
# Column probing
# ---------------------------------------------------------------------------

def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float) and math.isnan(value):
        return True
    return value is pd.NaT


def probe(row: RawRow, candidates: Sequence[str]) -> Any:
    """Return the value of the first candidate column present in ``row``.

    Candidates are literal keys checked in order; a blank cell counts as absent.
    """
    for key in candidates:
        if key in row and not _is_blank(row[key]):
            return row[key]
    return None


# ---------------------------------------------------------------------------
# Cell parsing
# ---------------------------------------------------------------------------

def parse_signed_amount(value: Any) -> Optional[Decimal]:
    """Parse a loosely formatted amount cell into a signed Decimal, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return Decimal(str(value))

    cleaned = _AMOUNT_NOISE_RE.sub("", str(value))
    m = _LEADING_NUMBER_RE.match(cleaned)
    if not m:
        return None
    try:
        return Decimal(m.group(0))
    except InvalidOperation:
        return None


def parse_date(value: Any) -> Optional[dt.date]:
    """Normalize a date-like cell to a calendar date, or None if unparseable.

    Strings that start with a 4-digit year are read year-first; anything else
    is read day-first (``01/05/2024`` is 1 May 2024).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.date()
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, (int, float)):
        # Excel serial day number
        if isinstance(value, float) and not math.isfinite(value):
            return None
        if not 0 < value <= _MAX_EXCEL_SERIAL:
            return None
        return _EXCEL_EPOCH + dt.timedelta(days=int(value))

    text = str(value).strip()
    # pandas reads words like "today" and "now" as the current time
    if not _DIGIT_RE.search(text):
        return None
    if _YEAR_FIRST_RE.match(text):
        ts = pd.to_datetime(text, errors="coerce", yearfirst=True)
    else:
        ts = pd.to_datetime(text, errors="coerce", dayfirst=True)
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def _resolve_amount(row: RawRow) -> tuple[Decimal, TransactionKind]:
    """Return (magnitude, kind). Magnitude is 0 when the row has no usable amount."""
    raw_amount = probe(row, AMOUNT_COLUMNS)
    if raw_amount is not None:
        signed = parse_signed_amount(raw_amount)
        if signed is None:
            return Decimal(0), TransactionKind.EXPENSE
        # Zero is not positive, so it lands on expense.
        kind = TransactionKind.INCOME if signed > 0 else TransactionKind.EXPENSE
        return abs(signed), kind

    debit = parse_signed_amount(probe(row, DEBIT_COLUMNS))
    if debit is not None and debit > 0:
        return debit, TransactionKind.EXPENSE
    credit = parse_signed_amount(probe(row, CREDIT_COLUMNS))
    if credit is not None and credit > 0:
        return credit, TransactionKind.INCOME
    return Decimal(0), TransactionKind.EXPENSE


# ---------------------------------------------------------------------------
# Row / batch normalization
# ---------------------------------------------------------------------------

@dataclass
class NormalizeReport:
    """Normalized transactions plus counts of dropped rows by reason."""
    transactions: list[Transaction] = field(default_factory=list)
    total_rows: int = 0
    dropped: Counter = field(default_factory=Counter)

    @property
    def skipped(self) -> int:
        return sum(self.dropped.values())

    def to_dict(self) -> dict:
        return {
            "total_rows": self.total_rows,
            "parsed": len(self.transactions),
            "skipped": self.skipped,
            "skipped_by_reason": dict(self.dropped),
        }


def normalize_row(row: RawRow) -> tuple[Optional[Transaction], Optional[str]]:
    """Normalize one row. Returns (transaction, None) or (None, drop_reason)."""
    raw_date = probe(row, DATE_COLUMNS)
    if raw_date is None:
        return None, "missing_date"
    raw_desc = probe(row, DESCRIPTION_COLUMNS)
    if raw_desc is None:
        return None, "missing_description"

    magnitude, kind = _resolve_amount(row)
    try:
        magnitude = magnitude.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None, "bad_amount"
    if magnitude <= 0:
        return None, "non_positive_amount"

    day = parse_date(raw_date)
    if day is None:
        return None, "bad_date"

    return Transaction(
        date=day,
        description=str(raw_desc).strip(),
        amount=magnitude,
        kind=kind,
        notes=IMPORT_NOTE,
    ), None


def normalize_with_report(rows: Iterable[RawRow]) -> NormalizeReport:
    report = NormalizeReport()
    for idx, row in enumerate(rows):
        report.total_rows += 1
        tx, reason = normalize_row(row)
        if tx is None:
            report.dropped[reason] += 1
            logger.debug("Dropped statement row %d (%s)", idx, reason)
            continue
        report.transactions.append(tx)
    return report


def normalize(rows: Iterable[RawRow]) -> list[Transaction]:
    """Convert raw statement rows to transactions, skipping unusable rows."""
    return normalize_with_report(rows).transactions
