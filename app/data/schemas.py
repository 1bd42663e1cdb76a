"""
Record types (transactions, accounts, categories), date windows, and the
derived reporting views.
"""
from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass, field, asdict, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

# A loosely-typed spreadsheet row: column name -> cell value.
RawRow = Mapping[str, Any]


class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Transaction:
    """A normalized income/expense record. ``amount`` is always positive."""
    date: dt.date
    description: str
    amount: Decimal
    kind: TransactionKind
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    def with_account(self, account_id: str) -> "Transaction":
        return replace(self, account_id=account_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": str(self.amount),
            "type": self.kind.value,
            "account_id": self.account_id,
            "category_id": self.category_id,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Transaction":
        created = d.get("created_at")
        return cls(
            date=dt.date.fromisoformat(d["date"]),
            description=d["description"],
            amount=Decimal(str(d["amount"])),
            kind=TransactionKind(d["type"]),
            account_id=d.get("account_id"),
            category_id=d.get("category_id"),
            notes=d.get("notes"),
            id=d.get("id"),
            created_at=dt.datetime.fromisoformat(created) if created else None,
        )


@dataclass
class Account:
    id: str
    name: str
    type: str = "checking"
    balance: Decimal = Decimal("0.00")   # signed, maintained by the store
    currency: str = "INR"
    is_active: bool = True
    created_at: Optional[dt.datetime] = None

    def to_dict(self) -> dict:
        d = asdict(self)
        d["balance"] = str(self.balance)
        d["created_at"] = self.created_at.isoformat() if self.created_at else None
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Account":
        created = d.get("created_at")
        return cls(
            id=d["id"],
            name=d["name"],
            type=d.get("type", "checking"),
            balance=Decimal(str(d.get("balance", "0"))),
            currency=d.get("currency", "INR"),
            is_active=bool(d.get("is_active", True)),
            created_at=dt.datetime.fromisoformat(created) if created else None,
        )


@dataclass
class Category:
    id: str
    name: str
    kind: TransactionKind
    color: Optional[str] = None
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind.value,
            "color": self.color,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Category":
        return cls(
            id=d["id"],
            name=d["name"],
            kind=TransactionKind(d["type"]),
            color=d.get("color"),
            is_active=bool(d.get("is_active", True)),
        )


# ---------------------------------------------------------------------------
# Date windows
# ---------------------------------------------------------------------------

def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by ``delta`` months."""
    idx = year * 12 + (month - 1) + delta
    return idx // 12, idx % 12 + 1


@dataclass(frozen=True)
class DateWindow:
    """Inclusive calendar-date range used to filter transactions."""
    start: dt.date
    end: dt.date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"window start {self.start} is after end {self.end}")

    @classmethod
    def month(cls, year: int, month: int) -> "DateWindow":
        last = calendar.monthrange(year, month)[1]
        return cls(dt.date(year, month, 1), dt.date(year, month, last))

    @classmethod
    def containing(cls, day: dt.date) -> "DateWindow":
        return cls.month(day.year, day.month)

    def contains(self, day: dt.date) -> bool:
        return self.start <= day <= self.end

    @property
    def label(self) -> str:
        if self == DateWindow.containing(self.start):
            return f"{self.start:%B %Y}"
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CategoryTotal:
    name: str
    total: Decimal
    color: str

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.total, "color": self.color}


@dataclass(frozen=True)
class MonthlyPoint:
    label: str
    income: Decimal
    expenses: Decimal
    net: Decimal
    start: Optional[dt.date] = field(compare=False, default=None)

    def to_dict(self) -> dict:
        return {
            "month": self.label,
            "income": self.income,
            "expenses": self.expenses,
            "net": self.net,
        }


@dataclass(frozen=True)
class BalanceSummary:
    total_balance: Decimal
    income: Decimal
    expenses: Decimal
    net: Decimal
    transaction_count: int
    window: Optional[DateWindow] = None

    def to_dict(self) -> dict:
        return {
            "total_balance": self.total_balance,
            "monthly_income": self.income,
            "monthly_expenses": self.expenses,
            "net_income": self.net,
            "transaction_count": self.transaction_count,
            "period": self.window.label if self.window else "All Time",
        }
