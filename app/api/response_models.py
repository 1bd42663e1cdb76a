"""
Pydantic request/response schemas for the API.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.config import DEFAULT_CATEGORY_COLOR, DEFAULT_CURRENCY

Kind = Literal["income", "expense"]
AccountType = Literal["checking", "savings", "credit_card", "investment", "cash"]


class HealthResponse(BaseModel):
    status: str
    users: int
    transactions: int


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: AccountType = "checking"
    balance: Decimal = Decimal("0")
    currency: str = DEFAULT_CURRENCY


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[AccountType] = None
    balance: Optional[Decimal] = None
    currency: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: Kind
    color: str = DEFAULT_CATEGORY_COLOR


class TransactionCreate(BaseModel):
    date: dt.date
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    type: Kind
    account_id: str
    category_id: Optional[str] = None
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class AccountOut(BaseModel):
    id: str
    name: str
    type: str
    balance: float
    currency: str
    is_active: bool
    created_at: Optional[str] = None


class CategoryOut(BaseModel):
    id: str
    name: str
    type: Kind
    color: Optional[str] = None
    is_active: bool


class TransactionOut(BaseModel):
    id: Optional[str] = None
    date: str
    description: str
    amount: float
    type: Kind
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None


class SummaryResponse(BaseModel):
    total_balance: float
    monthly_income: float
    monthly_expenses: float
    net_income: float
    transaction_count: int
    period: str
    savings_rate: float


class CategorySlice(BaseModel):
    name: str
    value: float
    color: str


class MonthlyPointOut(BaseModel):
    month: str
    income: float
    expenses: float
    net: float


class ImportResponse(BaseModel):
    status: str
    imported: int
    account_id: Optional[str] = None
    account_name: Optional[str] = None
    total_rows: int
    parsed: int
    skipped: int
    skipped_by_reason: dict[str, int]
    transactions: list[TransactionOut] = []
