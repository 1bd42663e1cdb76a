import datetime as dt
from decimal import Decimal

import pytest

from app.config import IMPORT_NOTE
from app.data.store import DataStore
from app.errors import NoAccountError, PersistenceError, UnsupportedFormatError
from app.services.importer import import_statement, parse_statement, resolve_account

USER = "alice"
STATEMENT = b"Date,Description,Amount\n01/05/2024,Coffee,-4.50\n2024-05-02,Salary,3000\n,Broken row,1\n"


def test_parse_statement_reports_skips() -> None:
    report = parse_statement(STATEMENT, "may.csv")
    assert report.total_rows == 3
    assert len(report.transactions) == 2
    assert report.dropped["missing_date"] == 1


def test_import_into_first_account(seeded_store: DataStore) -> None:
    result = import_statement(seeded_store, USER, STATEMENT, "may.csv")

    assert result.imported == 2
    assert result.account.name == "Main Account"
    assert result.to_dict()["status"] == "imported"

    txs = seeded_store.transactions(USER)
    assert [t.description for t in txs] == ["Salary", "Coffee"]
    assert all(t.account_id == result.account.id for t in txs)
    assert all(t.notes == IMPORT_NOTE for t in txs)
    assert txs[1].date == dt.date(2024, 5, 1)
    assert seeded_store.get_account(USER, result.account.id).balance == Decimal("2995.50")


def test_import_into_explicit_account(seeded_store: DataStore) -> None:
    savings = seeded_store.create_account(USER, "Savings", "savings")
    result = import_statement(seeded_store, USER, STATEMENT, "may.csv", account_id=savings.id)
    assert result.account.id == savings.id
    assert seeded_store.get_account(USER, savings.id).balance == Decimal("2995.50")


def test_no_account_is_refused_and_nothing_written(store: DataStore) -> None:
    with pytest.raises(NoAccountError, match="create an account first"):
        import_statement(store, USER, STATEMENT, "may.csv")
    assert store.transaction_count(USER) == 0


def test_no_account_error_is_a_persistence_error() -> None:
    assert issubclass(NoAccountError, PersistenceError)
    assert not issubclass(UnsupportedFormatError, PersistenceError)


def test_unknown_or_inactive_account_refused(seeded_store: DataStore) -> None:
    with pytest.raises(NoAccountError):
        resolve_account(seeded_store, USER, "missing")

    acct = seeded_store.accounts(USER)[0]
    seeded_store.update_account(USER, acct.id, is_active=False)
    with pytest.raises(NoAccountError):
        resolve_account(seeded_store, USER, acct.id)


def test_default_account_skips_inactive(seeded_store: DataStore) -> None:
    first = seeded_store.accounts(USER)[0]
    seeded_store.update_account(USER, first.id, is_active=False)
    with pytest.raises(NoAccountError):
        resolve_account(seeded_store, USER)

    second = seeded_store.create_account(USER, "Savings", "savings")
    assert resolve_account(seeded_store, USER) is second


def test_parse_failure_is_not_a_persistence_failure(store: DataStore) -> None:
    # No account exists either, but the format check runs first.
    with pytest.raises(UnsupportedFormatError):
        import_statement(store, USER, b"whatever", "statement.pdf")


def test_statement_with_no_usable_rows(seeded_store: DataStore) -> None:
    content = b"Date,Description,Amount\n2024-05-01,Zero,0\n"
    result = import_statement(seeded_store, USER, content, "zero.csv")

    assert result.imported == 0
    assert result.to_dict()["status"] == "nothing_to_import"
    assert result.to_dict()["skipped_by_reason"] == {"non_positive_amount": 1}
    assert seeded_store.transaction_count(USER) == 0
