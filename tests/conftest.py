import datetime as dt
from decimal import Decimal
from pathlib import Path

import pytest

from app.data.schemas import Transaction, TransactionKind
from app.data.store import DataStore

USER = "alice"


@pytest.fixture
def store(tmp_path: Path) -> DataStore:
    return DataStore(tmp_path / "store.json").load()


@pytest.fixture
def seeded_store(store: DataStore) -> DataStore:
    store.seed_defaults(USER)
    return store


@pytest.fixture
def make_tx():
    def _make(
        day: dt.date,
        amount: str,
        kind: str = "expense",
        description: str = "Item",
        category_id=None,
        account_id=None,
    ) -> Transaction:
        return Transaction(
            date=day,
            description=description,
            amount=Decimal(amount),
            kind=TransactionKind(kind),
            account_id=account_id,
            category_id=category_id,
        )

    return _make
