"""
Fraud Heuristics

Two cheap signals, computed on demand over the whole ledger:

DUPLICATES: the same (amount, category, date) recorded more than once.
Income and expenses both count. Each pattern is reported once, with
how many times it occurred.

OUTLIERS: expenses larger than a multiple of the median expense. The
median is the element at index n // 2 of the sorted amounts, which for
an even count is the upper of the two middle values. This is not the
textbook median and the thresholds depend on it staying this way.
"""

from collections import Counter
from decimal import Decimal
from typing import Optional, Sequence

from ledger.models.transaction import DuplicatePattern, FraudReport, Transaction


DEFAULT_OUTLIER_MULTIPLIER = Decimal("3")


def upper_median(values: Sequence[Decimal]) -> Optional[Decimal]:
    """Element at index len // 2 of the sorted values; None when empty."""
    if not values:
        return None
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


class FraudScanner:
    """Runs the duplicate and outlier checks over a transaction list."""

    def __init__(self, outlier_multiplier: Decimal = DEFAULT_OUTLIER_MULTIPLIER):
        if outlier_multiplier <= 0:
            raise ValueError("Outlier multiplier must be positive")
        self._multiplier = Decimal(outlier_multiplier)

    @property
    def outlier_multiplier(self) -> Decimal:
        return self._multiplier

    def find_duplicates(self, transactions: Sequence[Transaction]) -> list[DuplicatePattern]:
        # Counter keeps first-seen order
        counts = Counter(
            (t.amount, t.category, t.date) for t in transactions
        )
        return [
            DuplicatePattern(amount=amount, category=category, date=on, count=count)
            for (amount, category, on), count in counts.items()
            if count > 1
        ]

    def find_outliers(
        self,
        transactions: Sequence[Transaction],
    ) -> tuple[list[Transaction], Optional[Decimal], Optional[Decimal]]:
        """
        Expenses strictly above median * multiplier.

        Returns (outliers, median, threshold); median and threshold are
        None when there are no expenses.
        """
        expenses = [t for t in transactions if not t.is_income]
        median = upper_median([t.amount for t in expenses])
        if median is None:
            return [], None, None

        threshold = median * self._multiplier
        outliers = [t for t in expenses if t.amount > threshold]
        return outliers, median, threshold

    def scan(self, transactions: Sequence[Transaction]) -> FraudReport:
        transactions = list(transactions)
        outliers, median, threshold = self.find_outliers(transactions)
        return FraudReport(
            transaction_count=len(transactions),
            duplicates=self.find_duplicates(transactions),
            outliers=outliers,
            median=median,
            threshold=threshold,
        )


def describe_report(report: FraudReport, currency_symbol: str = "$") -> list[str]:
    """
    One user-facing line per finding.

    A clean report yields a single reassurance line.
    """
    if report.is_clean:
        return ["No suspicious activity detected"]

    lines = [
        f"Duplicate pattern found: {duplicate.pattern} ({duplicate.count} times)"
        for duplicate in report.duplicates
    ]
    lines.extend(
        f"Large expense: {currency_symbol}{outlier.amount:.2f} in {outlier.category}"
        for outlier in report.outliers
    )
    return lines
