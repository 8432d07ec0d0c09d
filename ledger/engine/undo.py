"""
Undo History

A bounded LIFO of the most recent additions. Pushing beyond the depth
silently forgets the oldest entry; those transactions can no longer be
undone. There is no redo.
"""

from collections import deque

from ledger.engine.exceptions import EmptyHistoryError
from ledger.models.transaction import Transaction


DEFAULT_UNDO_DEPTH = 5


class UndoHistory:
    """Last-in, first-out record of recent additions."""

    def __init__(self, depth: int = DEFAULT_UNDO_DEPTH):
        if depth < 1:
            raise ValueError(f"Undo depth must be at least 1, got {depth}")
        self._entries: deque[Transaction] = deque(maxlen=depth)

    @property
    def depth(self) -> int:
        return self._entries.maxlen

    def push(self, transaction: Transaction) -> None:
        self._entries.append(transaction)

    def pop(self) -> Transaction:
        if not self._entries:
            raise EmptyHistoryError()
        return self._entries.pop()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
