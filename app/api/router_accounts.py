"""
Record endpoints: accounts, categories, transactions.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.data.store import DataStore
from app.data.schemas import DateWindow, Transaction, TransactionKind
from app.analytics.common import sanitize_for_json
from app.api.dependencies import get_store, get_user_id, parse_window, to_http
from app.api.response_models import (
    AccountCreate, AccountOut, AccountUpdate,
    CategoryCreate, CategoryOut,
    TransactionCreate, TransactionOut,
)
from app.errors import FinanceTrackerError

router = APIRouter(prefix="/api", tags=["records"])


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

@router.get("/accounts", response_model=list[AccountOut])
def list_accounts(
    active_only: bool = Query(False),
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    return sanitize_for_json([a.to_dict() for a in store.accounts(user_id, active_only)])


@router.post("/accounts", response_model=AccountOut, status_code=201)
def create_account(
    req: AccountCreate,
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    try:
        acct = store.create_account(user_id, req.name, req.type, req.balance, req.currency)
    except FinanceTrackerError as e:
        raise to_http(e) from e
    return sanitize_for_json(acct.to_dict())


@router.patch("/accounts/{account_id}", response_model=AccountOut)
def update_account(
    account_id: str,
    req: AccountUpdate,
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    try:
        acct = store.update_account(user_id, account_id, **req.model_dump(exclude_none=True))
    except FinanceTrackerError as e:
        raise to_http(e) from e
    return sanitize_for_json(acct.to_dict())


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

@router.get("/categories", response_model=list[CategoryOut])
def list_categories(
    type: Optional[TransactionKind] = Query(None, description="income|expense"),
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    return [c.to_dict() for c in store.categories(user_id, type)]


@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(
    req: CategoryCreate,
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    try:
        cat = store.create_category(user_id, req.name, req.type, req.color)
    except FinanceTrackerError as e:
        raise to_http(e) from e
    return cat.to_dict()


@router.post("/seed")
def seed_defaults(
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    """Create the default account and categories for a new user."""
    return {"status": "ok", "created": store.seed_defaults(user_id)}


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

@router.get("/transactions", response_model=list[TransactionOut])
def list_transactions(
    limit: Optional[int] = Query(None, ge=1),
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
    window: DateWindow | None = Depends(parse_window),
):
    """Transactions newest first, optionally limited to a window."""
    txs = store.transactions(user_id, window)
    if limit is not None:
        txs = txs[:limit]
    return sanitize_for_json([t.to_dict() for t in txs])


@router.post("/transactions", response_model=TransactionOut, status_code=201)
def create_transaction(
    req: TransactionCreate,
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    tx = Transaction(
        date=req.date,
        description=req.description,
        amount=req.amount,
        kind=TransactionKind(req.type),
        account_id=req.account_id,
        category_id=req.category_id,
        notes=req.notes,
    )
    try:
        stored = store.add_transaction(user_id, tx)
    except FinanceTrackerError as e:
        raise to_http(e) from e
    return sanitize_for_json(stored.to_dict())


@router.delete("/transactions/{transaction_id}")
def delete_transaction(
    transaction_id: str,
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    try:
        store.delete_transaction(user_id, transaction_id)
    except FinanceTrackerError as e:
        raise to_http(e) from e
    return {"status": "deleted", "id": transaction_id}
