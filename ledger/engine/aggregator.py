"""
Category Aggregator

Per-category expense totals and counts, maintained incrementally on
every store mutation and never recomputed from scratch. Income never
touches the aggregator.

POLICY: when an undo leaves a category with a total of zero or less,
the category is deleted outright so "top categories" never shows
empty rows.
"""

from decimal import Decimal

from ledger.models.transaction import ZERO, Transaction


class CategoryAggregator:
    """Expense totals keyed by category, in first-insertion order."""

    def __init__(self):
        self._totals: dict[str, Decimal] = {}
        self._counts: dict[str, int] = {}

    def record(self, transaction: Transaction) -> None:
        """Apply a newly added transaction."""
        if transaction.is_income:
            return
        category = transaction.category
        new_total = self._totals.get(category, ZERO) + transaction.amount
        self._totals[category] = new_total
        self._counts[category] = self._counts.get(category, 0) + 1

    def reverse(self, transaction: Transaction) -> None:
        """Take back the effect of an undone transaction."""
        if transaction.is_income:
            return
        category = transaction.category
        remaining = self._totals.get(category, ZERO) - transaction.amount
        if remaining <= ZERO:
            self._totals.pop(category, None)
            self._counts.pop(category, None)
            return
        self._totals[category] = remaining
        self._counts[category] = max(self._counts.get(category, 0) - 1, 0)

    def total_for(self, category: str) -> Decimal:
        return self._totals.get(category, ZERO)

    def count_for(self, category: str) -> int:
        return self._counts.get(category, 0)

    def totals(self) -> dict[str, Decimal]:
        return dict(self._totals)

    def counts(self) -> dict[str, int]:
        return dict(self._counts)

    def __contains__(self, category: object) -> bool:
        return category in self._totals

    def __len__(self) -> int:
        return len(self._totals)
