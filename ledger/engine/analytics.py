"""
Analytics Engine

Pure derivations over the current ledger. Nothing here is cached:
every call recomputes from the transactions and category totals it is
given, so results always match the live state.
"""

from collections import OrderedDict
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from ledger.models.budget import BudgetPlan, UsageLevel
from ledger.models.transaction import ZERO, CategoryTotal, Transaction


HUNDRED = Decimal("100")
DEFAULT_TOP_N = 5
DEFAULT_RECENT_LIMIT = 10


def _check_limit(n: int) -> None:
    if n < 0:
        raise ValueError(f"Limit must be non-negative, got {n}")


def top_expenses(transactions: Iterable[Transaction], n: int = DEFAULT_TOP_N) -> list[Transaction]:
    """
    Largest expenses first.

    sorted() is stable, so equal amounts keep their insertion order.
    """
    _check_limit(n)
    expenses = [t for t in transactions if not t.is_income]
    return sorted(expenses, key=lambda t: t.amount, reverse=True)[:n]


def top_categories(
    totals: Mapping[str, Decimal],
    n: int = DEFAULT_TOP_N,
    counts: Optional[Mapping[str, int]] = None,
) -> list[CategoryTotal]:
    """
    Categories with the highest expense totals.

    Ties are broken by the order the categories entered the mapping.
    """
    _check_limit(n)
    counts = counts or {}
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)[:n]
    return [
        CategoryTotal(category=category, total=total, count=counts.get(category, 0))
        for category, total in ranked
    ]


def monthly_totals(transactions: Iterable[Transaction]) -> "OrderedDict[str, Decimal]":
    """Expense sum per YYYY-MM, in order of first appearance."""
    totals: OrderedDict[str, Decimal] = OrderedDict()
    for transaction in transactions:
        if transaction.is_income:
            continue
        key = transaction.month_key
        totals[key] = totals.get(key, ZERO) + transaction.amount
    return totals


def monthly_average(transactions: Iterable[Transaction]) -> Decimal:
    """
    Average of the monthly expense sums.

    One $100 month and one $10 + $10 month average to 60, not 40.
    """
    totals = monthly_totals(transactions)
    if not totals:
        return ZERO
    return sum(totals.values(), ZERO) / len(totals)


def category_usage(spent: Decimal, budget: Decimal) -> Decimal:
    """Percentage of a budget used, capped at 100. Zero budget means 0%."""
    if budget <= ZERO:
        return ZERO
    return min(spent / budget * HUNDRED, HUNDRED)


def usage_level(
    percentage: Decimal,
    warning_above: Decimal = Decimal("70"),
    critical_above: Decimal = Decimal("90"),
) -> UsageLevel:
    if percentage > critical_above:
        return UsageLevel.CRITICAL
    if percentage > warning_above:
        return UsageLevel.WARNING
    return UsageLevel.HEALTHY


def savings_projection(plan: BudgetPlan) -> Decimal:
    """Salary minus all budgeted expenses; ignores actual transactions."""
    return plan.savings


def recent_transactions(
    transactions: Sequence[Transaction],
    n: int = DEFAULT_RECENT_LIMIT,
) -> list[Transaction]:
    """The last n transactions, newest first."""
    _check_limit(n)
    if n == 0:
        return []
    return list(reversed(transactions[-n:]))
