"""
Bank statement import: parse an uploaded file, attach an account, persist.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from app.data.loader import read_statement
from app.data.normalize import NormalizeReport, normalize_with_report
from app.data.schemas import Account, Transaction
from app.data.store import DataStore
from app.errors import NoAccountError, NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    account: Optional[Account]
    report: NormalizeReport
    stored: list[Transaction] = field(default_factory=list)

    @property
    def imported(self) -> int:
        return len(self.stored)

    def to_dict(self) -> dict:
        return {
            "status": "imported" if self.stored else "nothing_to_import",
            "imported": self.imported,
            "account_id": self.account.id if self.account else None,
            "account_name": self.account.name if self.account else None,
            **self.report.to_dict(),
        }


def parse_statement(content: bytes, filename: str) -> NormalizeReport:
    """Decode + normalize a statement. Raises UnsupportedFormatError only."""
    rows = read_statement(content, filename)
    report = normalize_with_report(rows)
    logger.info(
        "Parsed %s: %d rows -> %d transactions (%d skipped)",
        filename, report.total_rows, len(report.transactions), report.skipped,
    )
    return report


def resolve_account(store: DataStore, user_id: str, account_id: Optional[str] = None) -> Account:
    """The explicit account if given, else the user's first active account."""
    if account_id:
        try:
            acct = store.get_account(user_id, account_id)
        except NotFoundError as exc:
            raise NoAccountError(f"Account not found: {account_id}") from exc
        if not acct.is_active:
            raise NoAccountError(f"Account '{acct.name}' is inactive")
        return acct

    accounts = store.accounts(user_id, active_only=True)
    if not accounts:
        raise NoAccountError()
    return accounts[0]


def import_statement(
    store: DataStore,
    user_id: str,
    content: bytes,
    filename: str,
    account_id: Optional[str] = None,
) -> ImportResult:
    """Parse a statement and save its transactions into one account.

    Parse failures raise UnsupportedFormatError before anything is written.
    A missing account raises NoAccountError; a rejected write raises
    PersistenceError. The two are kept apart so callers can tell
    "could not read the file" from "read it, but could not save".
    """
    report = parse_statement(content, filename)
    account = resolve_account(store, user_id, account_id)

    if not report.transactions:
        return ImportResult(account=account, report=report)

    to_store = [tx.with_account(account.id) for tx in report.transactions]
    try:
        stored = store.insert_transactions(user_id, to_store)
    except PersistenceError:
        logger.exception("Import of %s into account %s failed", filename, account.id)
        raise
    logger.info("Imported %d transactions from %s into '%s'", len(stored), filename, account.name)
    return ImportResult(account=account, report=report, stored=stored)
