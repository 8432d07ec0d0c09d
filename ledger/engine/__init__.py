"""Ledger engine package."""

from ledger.engine.aggregator import CategoryAggregator
from ledger.engine.exceptions import (
    EmptyHistoryError,
    InvalidInputError,
    LedgerError,
    TransactionNotFoundError,
)
from ledger.engine.fraud import FraudScanner, describe_report, upper_median
from ledger.engine.ledger import Ledger
from ledger.engine.store import TransactionStore
from ledger.engine.undo import UndoHistory

__all__ = [
    "CategoryAggregator",
    "EmptyHistoryError",
    "FraudScanner",
    "InvalidInputError",
    "Ledger",
    "LedgerError",
    "TransactionNotFoundError",
    "TransactionStore",
    "UndoHistory",
    "describe_report",
    "upper_median",
]
