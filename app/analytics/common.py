"""
Money and math helpers used across the analytics and report modules.
"""
from __future__ import annotations

import datetime as dt
import math
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable

import pandas as pd

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce a number to a Decimal rounded to cents."""
    if isinstance(value, Decimal):
        d = value
    elif value is None:
        d = ZERO
    else:
        d = Decimal(str(value))
    return d.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable) -> Decimal:
    """Exact decimal sum, rounded to cents once at the end."""
    total = Decimal(0)
    for v in values:
        total += v if isinstance(v, Decimal) else Decimal(str(v))
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def savings_rate(income: Decimal, expenses: Decimal) -> float:
    """Share of income kept, as a percentage (0 when there is no income)."""
    return round(safe_divide(float(income - expenses), float(income)) * 100, 1)


def sanitize_for_json(obj):
    """Recursively convert Decimal/date/enum/pandas values to JSON-native types."""
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (dt.date, dt.datetime)):
        return obj.isoformat()
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    if pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    return obj
