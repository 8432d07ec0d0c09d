"""
Transaction Store

Append-only list of transactions plus a running balance and its
prefix history. The only removal is undo, which takes transactions
away by id.

Invariant: len(balance_history) == len(transactions) + 1, and
balance_history[k] is the balance after the first k transactions.
"""

from datetime import date
from decimal import Decimal
from typing import Iterator, Optional, Union

from ledger.engine.exceptions import TransactionNotFoundError
from ledger.models.transaction import ZERO, Transaction


class TransactionStore:
    """Ordered transactions with a running balance."""

    def __init__(self):
        self._transactions: list[Transaction] = []
        self._balance: Decimal = ZERO
        self._balance_history: list[Decimal] = [ZERO]
        self._next_id = 1

    def append(
        self,
        amount: Union[Decimal, int, float, str],
        category: str,
        description: str,
        date: Union[date, str],
        is_income: bool,
    ) -> Transaction:
        """
        Record a new transaction and return it.

        The model and the new balance are computed before any state
        changes, so a rejected amount, an empty label or a balance that
        overflows the decimal context leaves the store untouched. Ids are
        handed out from a counter that undo never rewinds.
        """
        transaction = Transaction(
            id=self._next_id,
            amount=amount,
            category=category,
            description=description,
            date=date,
            is_income=is_income,
        )
        new_balance = self._balance + transaction.signed_amount

        self._next_id += 1
        self._transactions.append(transaction)
        self._balance = new_balance
        self._balance_history.append(new_balance)
        return transaction

    def discard_last(self) -> Transaction:
        """
        Drop the most recent append as if it never happened.

        Unlike remove(), the id counter is rewound too. Used to roll back
        an addition that a later step of the same operation rejected.
        """
        transaction = self._transactions.pop()
        self._balance_history.pop()
        self._balance = self._balance_history[-1]
        self._next_id = transaction.id
        return transaction

    def remove(self, transaction: Transaction) -> None:
        """
        Take a transaction out by id and revert its balance effect.

        Undo only ever removes the most recent addition still present,
        so dropping the last balance snapshot keeps the history aligned.
        """
        index = self._index_of(transaction.id)
        if index is None:
            raise TransactionNotFoundError(transaction.id)

        new_balance = self._balance - transaction.signed_amount

        del self._transactions[index]
        self._balance = new_balance
        self._balance_history.pop()

    def _index_of(self, transaction_id: int) -> Optional[int]:
        # Search from the end: undo targets recent entries
        for index in range(len(self._transactions) - 1, -1, -1):
            if self._transactions[index].id == transaction_id:
                return index
        return None

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def balance_history(self) -> tuple[Decimal, ...]:
        return tuple(self._balance_history)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(tuple(self._transactions))
