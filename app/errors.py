"""
Exception types shared by the import workflow, store, exports and API.
"""
from __future__ import annotations


class FinanceTrackerError(Exception):
    """Base class for all application errors."""


class UnsupportedFormatError(FinanceTrackerError):
    """The uploaded file cannot be read as a table at all."""


class PersistenceError(FinanceTrackerError):
    """The store rejected a write."""


class NoAccountError(PersistenceError):
    """Import refused: the user has no account to attach transactions to."""

    def __init__(self, message: str = "No account found. Please create an account first.") -> None:
        super().__init__(message)


class NotFoundError(FinanceTrackerError):
    """A referenced account, category or transaction does not exist for the user."""


class NoDataError(FinanceTrackerError):
    """An export was requested but there is nothing to export."""


class InvalidRecordError(PersistenceError):
    """A write was refused because the record itself is invalid (bad amount, unknown account...)."""
