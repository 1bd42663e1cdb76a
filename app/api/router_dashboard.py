"""
Dashboard endpoints — balance summary, expense breakdown, monthly trends.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.config import DEFAULT_TRAILING_MONTHS
from app.data.store import DataStore
from app.data.schemas import DateWindow
from app.analytics.aggregation import (
    balance_summary, category_breakdown, current_month_window, monthly_series,
)
from app.analytics.common import sanitize_for_json, savings_rate
from app.api.dependencies import get_store, get_user_id, parse_window
from app.api.response_models import CategorySlice, MonthlyPointOut, SummaryResponse

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=SummaryResponse)
def summary(
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
    window: DateWindow | None = Depends(parse_window),
):
    """Total balance plus income/expenses/net for a window (default: this month)."""
    window = window or current_month_window()
    s = balance_summary(store.accounts(user_id), store.transactions(user_id), window)
    return sanitize_for_json({**s.to_dict(), "savings_rate": savings_rate(s.income, s.expenses)})


@router.get("/category-breakdown", response_model=list[CategorySlice])
def breakdown(
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
    window: DateWindow | None = Depends(parse_window),
):
    """Expense totals per category, largest first (default: this month)."""
    window = window or current_month_window()
    rows = category_breakdown(store.transactions(user_id, window), window, store.category_map(user_id))
    return sanitize_for_json([r.to_dict() for r in rows])


@router.get("/monthly-trends", response_model=list[MonthlyPointOut])
def trends(
    months: int = Query(DEFAULT_TRAILING_MONTHS, ge=1, le=120),
    reference: Optional[dt.date] = Query(None, description="Last month shown (default today)"),
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    """Income, expenses and net for the trailing N months, oldest first."""
    points = monthly_series(store.transactions(user_id), months, reference)
    return sanitize_for_json([p.to_dict() for p in points])
