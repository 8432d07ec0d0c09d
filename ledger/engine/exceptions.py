"""
Ledger Exceptions

Every failure here is recoverable: the caller shows a notice and the
ledger state is exactly what it was before the call.
"""

from typing import Optional

from ledger.models.transaction import ValidationIssue


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class EmptyHistoryError(LedgerError):
    """Undo requested with nothing left to undo."""

    def __init__(self, message: str = "No transactions to undo"):
        super().__init__(message)


class TransactionNotFoundError(LedgerError):
    """A transaction id is not present in the store."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} is not in the ledger")


class InvalidInputError(LedgerError):
    """
    User input could not be turned into a transaction.

    Raised by the entry validator, never by the engine itself.
    """

    def __init__(self, issues: list[ValidationIssue], message: Optional[str] = None):
        self.issues = issues
        if message is None:
            message = "; ".join(issue.message for issue in issues) or "Invalid input"
        super().__init__(message)
