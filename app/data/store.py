"""
DataStore — user-scoped accounts, categories and transactions.

Held in memory, written through to a JSON file on every change.
Only load() and save() touch the file.
"""
from __future__ import annotations

import datetime as dt
import json
import logging
import os
import tempfile
import threading
import uuid
from contextlib import contextmanager
from dataclasses import fields, replace
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional

from app.config import (
    STORE_FILE, ACCOUNT_TYPES, DEFAULT_ACCOUNT_NAME, DEFAULT_CATEGORIES,
    DEFAULT_CATEGORY_COLOR, DEFAULT_CURRENCY,
)
from app.analytics.common import to_money
from app.data.schemas import Account, Category, DateWindow, Transaction, TransactionKind
from app.errors import InvalidRecordError, NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class _UserData:
    def __init__(self) -> None:
        self.accounts: dict[str, Account] = {}
        self.categories: dict[str, Category] = {}
        self.transactions: dict[str, Transaction] = {}


class DataStore:
    """In-memory finance data with per-user accessors."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path
        self._users: dict[str, _UserData] = {}
        self._lock = threading.RLock()
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading / saving
    # ------------------------------------------------------------------

    def load(self, path: Optional[Path] = None) -> "DataStore":
        """Load the JSON snapshot (a missing file means an empty store)."""
        if path is not None:
            self.path = Path(path)
        elif self.path is None:
            self.path = STORE_FILE

        with self._lock:
            self._users = {}
            if self.path.exists():
                try:
                    raw = json.loads(self.path.read_text(encoding="utf-8"))
                except (OSError, ValueError) as exc:
                    raise PersistenceError(f"Could not read {self.path}: {exc}") from exc
                for user_id, data in raw.get("users", {}).items():
                    ud = self._user(user_id)
                    for a in data.get("accounts", []):
                        acct = Account.from_dict(a)
                        ud.accounts[acct.id] = acct
                    for c in data.get("categories", []):
                        cat = Category.from_dict(c)
                        ud.categories[cat.id] = cat
                    for t in data.get("transactions", []):
                        tx = Transaction.from_dict(t)
                        ud.transactions[tx.id] = tx
                logger.info("Loaded %d users, %d transactions from %s",
                            len(self._users), self.transaction_count(), self.path)
            else:
                logger.info("No store file at %s — starting empty", self.path)
            self._loaded = True
        return self

    def save(self) -> None:
        """Atomically rewrite the JSON snapshot. No-op for memory-only stores."""
        if self.path is None:
            return
        with self._lock:
            payload = {
                "version": 1,
                "saved_at": dt.datetime.now().isoformat(),
                "users": {
                    uid: {
                        "accounts": [a.to_dict() for a in ud.accounts.values()],
                        "categories": [c.to_dict() for c in ud.categories.values()],
                        "transactions": [t.to_dict() for t in ud.transactions.values()],
                    }
                    for uid, ud in self._users.items()
                },
            }
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=1)
                os.replace(tmp, self.path)
            except OSError as exc:
                raise PersistenceError(f"Could not write {self.path}: {exc}") from exc

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _user(self, user_id: str) -> _UserData:
        if not user_id:
            raise InvalidRecordError("user_id is required")
        ud = self._users.get(user_id)
        if ud is None:
            ud = self._users[user_id] = _UserData()
        return ud

    @contextmanager
    def _changes(self, user_id: str):
        """Yield the user's records for editing, then save.

        If the block or the save fails, the user's records are put back as
        they were, so memory never holds a change the file does not.
        """
        with self._lock:
            existed = user_id in self._users
            ud = self._user(user_id)
            accounts = dict(ud.accounts)
            snapshots = {k: replace(a) for k, a in accounts.items()}
            categories = dict(ud.categories)
            transactions = dict(ud.transactions)
            try:
                yield ud
                self.save()
            except BaseException:
                if existed:
                    for k, acct in accounts.items():
                        for f in fields(acct):
                            setattr(acct, f.name, getattr(snapshots[k], f.name))
                    ud.accounts, ud.categories, ud.transactions = accounts, categories, transactions
                else:
                    self._users.pop(user_id, None)
                raise

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def create_account(
        self,
        user_id: str,
        name: str,
        account_type: str = "checking",
        balance=Decimal("0"),
        currency: str = DEFAULT_CURRENCY,
    ) -> Account:
        name = (name or "").strip()
        if not name:
            raise InvalidRecordError("Account name is required")
        if account_type not in ACCOUNT_TYPES:
            raise InvalidRecordError(f"Invalid account type: {account_type}. Valid: {list(ACCOUNT_TYPES)}")
        acct = Account(
            id=_new_id(),
            name=name,
            type=account_type,
            balance=to_money(balance),
            currency=currency,
            created_at=dt.datetime.now(),
        )
        with self._changes(user_id) as ud:
            ud.accounts[acct.id] = acct
        return acct

    def update_account(self, user_id: str, account_id: str, **changes) -> Account:
        allowed = {"name", "type", "balance", "currency", "is_active"}
        unknown = set(changes) - allowed
        if unknown:
            raise InvalidRecordError(f"Cannot update account fields: {sorted(unknown)}")
        if "type" in changes and changes["type"] not in ACCOUNT_TYPES:
            raise InvalidRecordError(f"Invalid account type: {changes['type']}")
        if "balance" in changes:
            changes["balance"] = to_money(changes["balance"])
        with self._changes(user_id):
            acct = self.get_account(user_id, account_id)
            for k, v in changes.items():
                setattr(acct, k, v)
        return acct

    def get_account(self, user_id: str, account_id: str) -> Account:
        acct = self._user(user_id).accounts.get(account_id)
        if acct is None:
            raise NotFoundError(f"Account not found: {account_id}")
        return acct

    def accounts(self, user_id: str, active_only: bool = False) -> list[Account]:
        """Accounts in creation order."""
        with self._lock:
            accts = list(self._user(user_id).accounts.values())
        if active_only:
            accts = [a for a in accts if a.is_active]
        return accts

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def create_category(
        self,
        user_id: str,
        name: str,
        kind: TransactionKind | str,
        color: str = DEFAULT_CATEGORY_COLOR,
    ) -> Category:
        name = (name or "").strip()
        if not name:
            raise InvalidRecordError("Category name is required")
        try:
            kind = TransactionKind(kind)
        except ValueError as exc:
            raise InvalidRecordError(f"Invalid category type: {kind}") from exc
        cat = Category(id=_new_id(), name=name, kind=kind, color=color)
        with self._changes(user_id) as ud:
            ud.categories[cat.id] = cat
        return cat

    def categories(self, user_id: str, kind: TransactionKind | str | None = None) -> list[Category]:
        with self._lock:
            cats = list(self._user(user_id).categories.values())
        if kind is not None:
            cats = [c for c in cats if c.kind == TransactionKind(kind)]
        return sorted(cats, key=lambda c: c.name)

    def category_map(self, user_id: str) -> dict[str, Category]:
        with self._lock:
            return dict(self._user(user_id).categories)

    def seed_defaults(self, user_id: str) -> dict:
        """Give a new user a default account and the standard category set.

        Only fills what is missing, so it is safe to call repeatedly.
        """
        created = {"accounts": 0, "categories": 0}
        with self._changes(user_id) as ud:
            if not ud.accounts:
                self.create_account(user_id, DEFAULT_ACCOUNT_NAME, "checking")
                created["accounts"] += 1
            if not ud.categories:
                for name, kind, color in DEFAULT_CATEGORIES:
                    self.create_category(user_id, name, kind, color)
                    created["categories"] += 1
        return created

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def _validate(self, ud: _UserData, tx: Transaction) -> None:
        # checked after rounding, so sub-cent amounts cannot be stored as 0.00
        if to_money(tx.amount) <= 0:
            raise InvalidRecordError(f"Amount must be at least 0.01 (got {tx.amount})")
        if not tx.description.strip():
            raise InvalidRecordError("Description is required")
        if tx.account_id not in ud.accounts:
            raise InvalidRecordError(f"Unknown account: {tx.account_id}")
        if tx.category_id is not None:
            cat = ud.categories.get(tx.category_id)
            if cat is None:
                raise InvalidRecordError(f"Unknown category: {tx.category_id}")
            if cat.kind != tx.kind:
                raise InvalidRecordError(
                    f"Category '{cat.name}' is for {cat.kind.value}, not {tx.kind.value}"
                )

    @staticmethod
    def _balance_effect(tx: Transaction) -> Decimal:
        return tx.amount if tx.kind == TransactionKind.INCOME else -tx.amount

    def insert_transactions(self, user_id: str, transactions: Iterable[Transaction]) -> list[Transaction]:
        """Validate then insert a batch; all-or-nothing.

        Each insert moves its account balance by +amount (income) or
        -amount (expense).
        """
        txs = list(transactions)
        with self._changes(user_id) as ud:
            for tx in txs:
                self._validate(ud, tx)

            now = dt.datetime.now()
            stored = []
            for tx in txs:
                row = Transaction(
                    date=tx.date,
                    description=tx.description.strip(),
                    amount=to_money(tx.amount),
                    kind=tx.kind,
                    account_id=tx.account_id,
                    category_id=tx.category_id,
                    notes=tx.notes,
                    id=_new_id(),
                    created_at=now,
                )
                ud.transactions[row.id] = row
                ud.accounts[row.account_id].balance += self._balance_effect(row)
                stored.append(row)
        logger.info("Inserted %d transactions for user %s", len(stored), user_id)
        return stored

    def add_transaction(self, user_id: str, transaction: Transaction) -> Transaction:
        return self.insert_transactions(user_id, [transaction])[0]

    def delete_transaction(self, user_id: str, transaction_id: str) -> Transaction:
        """Remove a transaction and reverse its balance effect."""
        with self._changes(user_id) as ud:
            tx = ud.transactions.pop(transaction_id, None)
            if tx is None:
                raise NotFoundError(f"Transaction not found: {transaction_id}")
            acct = ud.accounts.get(tx.account_id)
            if acct is not None:
                acct.balance -= self._balance_effect(tx)
        return tx

    def transactions(self, user_id: str, window: Optional[DateWindow] = None) -> list[Transaction]:
        """Transactions newest first (by date, then insertion time)."""
        with self._lock:
            txs = list(self._user(user_id).transactions.values())
        if window is not None:
            txs = [t for t in txs if window.contains(t.date)]
        min_dt = dt.datetime.min
        return sorted(txs, key=lambda t: (t.date, t.created_at or min_dt), reverse=True)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def user_ids(self) -> list[str]:
        return sorted(self._users)

    def transaction_count(self, user_id: Optional[str] = None) -> int:
        with self._lock:
            if user_id is not None:
                return len(self._user(user_id).transactions)
            return sum(len(ud.transactions) for ud in self._users.values())
