"""
FastAPI dependencies — DataStore singleton, user scoping, date windows, error mapping.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import Header, HTTPException, Query

from app.data.store import DataStore
from app.data.schemas import DateWindow
from app.errors import (
    FinanceTrackerError, InvalidRecordError, NoAccountError, NoDataError,
    NotFoundError, UnsupportedFormatError,
)

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: DataStore | None = None


def set_store(store: DataStore) -> None:
    global _store
    _store = store


def get_store() -> DataStore:
    if _store is None or not _store.is_loaded:
        raise HTTPException(503, "Data not loaded yet")
    return _store


# ---------------------------------------------------------------------------
# User scoping
# ---------------------------------------------------------------------------

def get_user_id(
    user_id: Optional[str] = Query(None, description="Owner of the data"),
    x_user_id: Optional[str] = Header(None),
) -> str:
    uid = (user_id or x_user_id or "").strip()
    if not uid:
        raise HTTPException(401, "user_id query parameter or X-User-Id header is required")
    return uid


# ---------------------------------------------------------------------------
# Date window parsing from query params
# ---------------------------------------------------------------------------

def _parse_date(value: str, name: str) -> dt.date:
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise HTTPException(400, f"Invalid {name}: {value} (expected YYYY-MM-DD)")


def parse_window(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
) -> DateWindow | None:
    """A calendar month (year+month) or an explicit inclusive date range."""
    if start_date or end_date:
        if not (start_date and end_date):
            raise HTTPException(400, "start_date and end_date must be given together")
        try:
            return DateWindow(_parse_date(start_date, "start_date"), _parse_date(end_date, "end_date"))
        except ValueError as e:
            raise HTTPException(400, str(e))
    if year is not None and month is not None:
        return DateWindow.month(year, month)
    if year is not None or month is not None:
        raise HTTPException(400, "year and month must be given together")
    return None


# ---------------------------------------------------------------------------
# Domain errors → HTTP
# ---------------------------------------------------------------------------

def to_http(exc: FinanceTrackerError) -> HTTPException:
    if isinstance(exc, UnsupportedFormatError):
        return HTTPException(400, str(exc))
    if isinstance(exc, NoAccountError):
        return HTTPException(409, str(exc))
    if isinstance(exc, (NoDataError, NotFoundError)):
        return HTTPException(404, str(exc))
    if isinstance(exc, InvalidRecordError):
        return HTTPException(422, str(exc))
    return HTTPException(500, str(exc))
