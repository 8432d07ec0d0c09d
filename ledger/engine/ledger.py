"""
Ledger Engine

The single entry point front ends talk to. It owns one transaction
store, one category aggregator, one undo history and one fraud scanner,
and keeps them consistent as a unit.

GUARANTEES:
- Every public operation either fully commits or raises with no change
- balance == signed sum of the transactions currently present
- category totals only ever reflect expenses currently present

UNDO POLICY: undo reverses the most recent additions, newest first, and
only the last `undo_depth` of them (5 by default). There is no redo,
and once an addition falls out of the history it is permanent. Undo
works by insertion order, not by category.

The engine is synchronous and holds no locks: callers serialize access.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from ledger.config.settings import LedgerSettings
from ledger.engine import analytics
from ledger.engine.aggregator import CategoryAggregator
from ledger.engine.exceptions import TransactionNotFoundError
from ledger.engine.fraud import FraudScanner
from ledger.engine.store import TransactionStore
from ledger.engine.undo import UndoHistory
from ledger.models.transaction import CategoryTotal, FraudReport, Transaction, to_decimal


class Ledger:
    """
    In-memory personal ledger.

    Create one per session and drop it when the session ends; nothing is
    persisted.
    """

    def __init__(
        self,
        undo_depth: int = 5,
        top_n: int = analytics.DEFAULT_TOP_N,
        recent_limit: int = analytics.DEFAULT_RECENT_LIMIT,
        outlier_multiplier: Decimal = Decimal("3"),
    ):
        self._store = TransactionStore()
        self._aggregator = CategoryAggregator()
        self._undo = UndoHistory(undo_depth)
        self._scanner = FraudScanner(outlier_multiplier)
        self._top_n = top_n
        self._recent_limit = recent_limit

    @classmethod
    def from_settings(cls, settings: LedgerSettings) -> "Ledger":
        """Build a ledger from LedgerSettings."""
        return cls(
            undo_depth=settings.undo_depth,
            top_n=settings.top_n,
            recent_limit=settings.recent_limit,
            outlier_multiplier=settings.outlier_multiplier,
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_transaction(
        self,
        amount: Union[Decimal, int, float, str],
        category: str,
        description: str,
        date: Union[date, str],
        is_income: bool,
    ) -> Transaction:
        """
        Record a transaction and return it with its assigned id.

        Inputs are trusted to be validated already. Duplicates of
        existing entries are accepted; spotting them is the fraud scan's job.

        Raises:
            pydantic.ValidationError: the record itself is malformed
            ArithmeticError: the balance or a category total would leave
                the decimal context (state unchanged)
        """
        transaction = self._store.append(amount, category, description, date, is_income)
        try:
            self._aggregator.record(transaction)
        except ArithmeticError:
            self._store.discard_last()
            raise
        self._undo.push(transaction)
        return transaction

    def undo_last(self) -> Transaction:
        """
        Reverse the most recent addition still in the undo history.

        Raises:
            EmptyHistoryError: nothing left to undo (state unchanged)
        """
        transaction = self._undo.pop()
        try:
            self._store.remove(transaction)
        except TransactionNotFoundError:
            self._undo.push(transaction)
            raise
        self._aggregator.reverse(transaction)
        return transaction

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_balance(self) -> Decimal:
        return self._store.balance

    def get_balance_history(self) -> tuple[Decimal, ...]:
        return self._store.balance_history

    def get_transactions(self) -> tuple[Transaction, ...]:
        return self._store.transactions

    def get_category_totals(self) -> dict[str, Decimal]:
        return self._aggregator.totals()

    def get_category_counts(self) -> dict[str, int]:
        return self._aggregator.counts()

    def get_top_expenses(self, n: Optional[int] = None) -> list[Transaction]:
        return analytics.top_expenses(self._store.transactions, self._top_n if n is None else n)

    def get_top_categories(self, n: Optional[int] = None) -> list[CategoryTotal]:
        return analytics.top_categories(
            self._aggregator.totals(),
            self._top_n if n is None else n,
            counts=self._aggregator.counts(),
        )

    def get_monthly_average(self) -> Decimal:
        return analytics.monthly_average(self._store.transactions)

    def get_monthly_totals(self) -> dict[str, Decimal]:
        return dict(analytics.monthly_totals(self._store.transactions))

    def get_category_usage(self, category: str, budget: Decimal) -> Decimal:
        """Percent of `budget` spent in `category`, 0..100."""
        return analytics.category_usage(self._aggregator.total_for(category), to_decimal(budget))

    def get_recent_transactions(self, n: Optional[int] = None) -> list[Transaction]:
        return analytics.recent_transactions(
            self._store.transactions,
            self._recent_limit if n is None else n,
        )

    def run_fraud_scan(self) -> FraudReport:
        return self._scanner.scan(self._store.transactions)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def undo_available(self) -> int:
        """How many undos would currently succeed."""
        return len(self._undo)

    @property
    def undo_depth(self) -> int:
        return self._undo.depth

    @property
    def next_id(self) -> int:
        return self._store.next_id

    def __len__(self) -> int:
        return len(self._store)
