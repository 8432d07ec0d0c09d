"""Tests for the ledger engine: store, aggregator, undo history and facade."""

import pytest
from datetime import date
from decimal import Decimal, Overflow

from pydantic import ValidationError

from ledger.config.settings import LedgerSettings
from ledger.engine import (
    CategoryAggregator,
    EmptyHistoryError,
    Ledger,
    TransactionNotFoundError,
    TransactionStore,
    UndoHistory,
)


JAN_1 = date(2024, 1, 1)

# Largest finite magnitude the default decimal context can hold is just
# below 1E+1000000.
HUGE = Decimal("9E+999999")


def signed_sum(ledger: Ledger) -> Decimal:
    return sum((t.signed_amount for t in ledger.get_transactions()), Decimal("0"))


def snapshot(ledger: Ledger) -> tuple:
    return (
        ledger.get_transactions(),
        ledger.get_balance(),
        ledger.get_balance_history(),
        ledger.get_category_totals(),
        ledger.get_category_counts(),
        ledger.undo_available,
        ledger.next_id,
    )


class TestTransactionStore:
    """Tests for the append-only store."""

    def test_ids_start_at_one_and_increment(self):
        """Test ids are assigned 1, 2, ..."""
        store = TransactionStore()
        first = store.append(10, "Food", "a", JAN_1, False)
        second = store.append(20, "Food", "b", JAN_1, False)
        assert (first.id, second.id) == (1, 2)

    def test_balance_history_tracks_prefix_sums(self):
        """Test balance_history[k] is the balance after k transactions."""
        store = TransactionStore()
        store.append(Decimal("100"), "Salary", "pay", JAN_1, True)
        store.append(Decimal("30"), "Food", "food", JAN_1, False)
        assert store.balance == Decimal("70")
        assert store.balance_history == (Decimal("0"), Decimal("100"), Decimal("70"))
        assert len(store.balance_history) == len(store) + 1

    def test_remove_by_id(self):
        """Test removal reverts the balance and drops the last snapshot."""
        store = TransactionStore()
        store.append(100, "Salary", "pay", JAN_1, True)
        last = store.append(30, "Food", "food", JAN_1, False)
        store.remove(last)
        assert store.balance == Decimal("100")
        assert [t.id for t in store] == [1]
        assert store.balance_history == (Decimal("0"), Decimal("100"))

    def test_remove_unknown_id_raises(self):
        """Test removing a transaction twice fails the second time."""
        store = TransactionStore()
        t = store.append(5, "Food", "x", JAN_1, False)
        store.remove(t)
        with pytest.raises(TransactionNotFoundError):
            store.remove(t)

    def test_invalid_amount_leaves_store_untouched(self):
        """Test a NaN amount is refused before any state changes."""
        store = TransactionStore()
        with pytest.raises(ValidationError):
            store.append(Decimal("NaN"), "Food", "x", JAN_1, False)
        assert len(store) == 0
        assert store.balance_history == (Decimal("0"),)
        assert store.next_id == 1

    def test_balance_overflow_leaves_store_untouched(self):
        """Test an amount the decimal context cannot hold changes nothing."""
        store = TransactionStore()
        store.append(10, "Food", "a", JAN_1, False)
        with pytest.raises(Overflow):
            store.append(Decimal("1E+1000000"), "Food", "huge", JAN_1, False)
        assert len(store) == 1
        assert store.balance == Decimal("-10")
        assert store.balance_history == (Decimal("0"), Decimal("-10"))
        assert store.next_id == 2

    def test_discard_last_rewinds_everything(self):
        """Test discard_last also hands the id out again."""
        store = TransactionStore()
        store.append(100, "Salary", "pay", JAN_1, True)
        dropped = store.append(30, "Food", "food", JAN_1, False)
        assert store.discard_last() == dropped
        assert store.balance == Decimal("100")
        assert store.balance_history == (Decimal("0"), Decimal("100"))
        assert store.next_id == 2


class TestCategoryAggregator:
    """Tests for incremental category totals."""

    def test_income_is_ignored(self, ledger):
        """Test income never creates a category."""
        aggregator = CategoryAggregator()
        t = ledger.add_transaction(500, "Salary", "pay", JAN_1, True)
        aggregator.record(t)
        assert len(aggregator) == 0

    def test_record_and_reverse(self, ledger):
        """Test totals and counts move together."""
        aggregator = CategoryAggregator()
        a = ledger.add_transaction(30, "Food", "a", JAN_1, False)
        b = ledger.add_transaction(20, "Food", "b", JAN_1, False)
        aggregator.record(a)
        aggregator.record(b)
        assert aggregator.total_for("Food") == Decimal("50")
        assert aggregator.count_for("Food") == 2

        aggregator.reverse(b)
        assert aggregator.total_for("Food") == Decimal("30")
        assert aggregator.count_for("Food") == 1

    def test_zero_residual_removes_category(self, ledger):
        """Test a category reversed down to zero disappears."""
        aggregator = CategoryAggregator()
        t = ledger.add_transaction(50, "Food", "a", JAN_1, False)
        aggregator.record(t)
        aggregator.reverse(t)
        assert "Food" not in aggregator
        assert aggregator.totals() == {}
        assert aggregator.counts() == {}


class TestUndoHistory:
    """Tests for the bounded undo stack."""

    def test_pop_empty_raises(self):
        """Test popping an empty history raises EmptyHistoryError."""
        with pytest.raises(EmptyHistoryError):
            UndoHistory().pop()

    def test_depth_must_be_positive(self):
        """Test a zero depth is refused."""
        with pytest.raises(ValueError):
            UndoHistory(0)

    def test_oldest_entries_are_forgotten(self, ledger):
        """Test pushing past the depth forgets the oldest entry."""
        history = UndoHistory(depth=2)
        for i in range(3):
            history.push(ledger.add_transaction(i + 1, "Food", "x", JAN_1, False))
        assert len(history) == 2
        assert history.pop().id == 3
        assert history.pop().id == 2
        assert not history


class TestLedger:
    """Scenario tests for the engine facade."""

    def test_add_transaction_returns_record(self, ledger):
        """Test the returned record carries its id and parsed date."""
        t = ledger.add_transaction(Decimal("12.50"), "Food", "Lunch", "2024-01-02", False)
        assert t.id == 1
        assert t.date == date(2024, 1, 2)
        assert ledger.get_balance() == Decimal("-12.50")

    def test_balance_consistency(self, ledger):
        """Balance equals the signed sum through any add/undo sequence."""
        ledger.add_transaction(1000, "Salary", "pay", JAN_1, True)
        ledger.add_transaction(Decimal("45.10"), "Food", "a", JAN_1, False)
        ledger.add_transaction(Decimal("9.99"), "Fun", "b", JAN_1, False)
        assert ledger.get_balance() == signed_sum(ledger)
        ledger.undo_last()
        assert ledger.get_balance() == signed_sum(ledger)
        ledger.add_transaction(Decimal("0.01"), "Food", "c", JAN_1, False)
        ledger.undo_last()
        ledger.undo_last()
        assert ledger.get_balance() == signed_sum(ledger) == Decimal("1000")
        assert len(ledger.get_balance_history()) == len(ledger) + 1

    def test_undo_inverse_law(self, ledger):
        """add then undo restores transactions, balance and category totals."""
        ledger.add_transaction(200, "Salary", "pay", JAN_1, True)
        ledger.add_transaction(Decimal("30.30"), "Food", "a", JAN_1, False)
        before = (
            ledger.get_transactions(),
            ledger.get_balance(),
            ledger.get_category_totals(),
            ledger.get_category_counts(),
            ledger.get_balance_history(),
        )

        ledger.add_transaction(Decimal("19.70"), "Food", "b", JAN_1, False)
        undone = ledger.undo_last()

        assert undone.description == "b"
        assert (
            ledger.get_transactions(),
            ledger.get_balance(),
            ledger.get_category_totals(),
            ledger.get_category_counts(),
            ledger.get_balance_history(),
        ) == before

    def test_k_undos_restore_each_earlier_state(self, ledger):
        """Undoing k <= 5 additions one at a time walks back through each state."""
        ledger.add_transaction(5, "Rent", "permanent", JAN_1, False)
        additions = [
            (Decimal("1000"), "Salary", True),
            (Decimal("40"), "Food", False),
            (Decimal("300"), "Rent", False),
            (Decimal("15.50"), "Food", False),
            (Decimal("60"), "Travel", False),
        ]

        states = []
        for amount, category, is_income in additions:
            states.append(snapshot(ledger))
            ledger.add_transaction(amount, category, f"{category} {amount}", JAN_1, is_income)

        for expected in reversed(states):
            ledger.undo_last()
            transactions, balance, history, totals, counts, _, _ = snapshot(ledger)
            assert (transactions, balance, history, totals, counts) == expected[:5]

        assert ledger.get_category_totals() == {"Rent": Decimal("5")}
        assert ledger.get_category_counts() == {"Rent": 1}

    def test_undo_depth_bound(self, ledger):
        """After 6 additions, the 6th undo fails."""
        for i in range(6):
            ledger.add_transaction(i + 1, "Food", f"item {i}", JAN_1, False)

        for _ in range(5):
            ledger.undo_last()

        with pytest.raises(EmptyHistoryError):
            ledger.undo_last()

        # The first addition is permanent
        assert [t.id for t in ledger.get_transactions()] == [1]
        assert ledger.get_balance() == Decimal("-1")

    def test_empty_undo_leaves_state_unchanged(self, ledger):
        """Test a rejected undo changes nothing."""
        ledger.add_transaction(5, "Food", "x", JAN_1, False)
        ledger.undo_last()
        with pytest.raises(EmptyHistoryError):
            ledger.undo_last()
        assert ledger.get_balance() == Decimal("0")
        assert ledger.get_balance_history() == (Decimal("0"),)
        assert ledger.can_undo is False

    def test_undo_crosses_categories(self, ledger):
        """Undo follows insertion order, not category."""
        ledger.add_transaction(10, "Food", "a", JAN_1, False)
        ledger.add_transaction(20, "Rent", "b", JAN_1, False)
        assert ledger.undo_last().category == "Rent"
        assert ledger.undo_last().category == "Food"

    def test_ids_never_reused(self, ledger):
        """Test undo does not free the undone id."""
        ledger.add_transaction(10, "Food", "a", JAN_1, False)
        ledger.undo_last()
        t = ledger.add_transaction(10, "Food", "a", JAN_1, False)
        assert t.id == 2

    def test_category_cleanup(self, ledger):
        """Undoing the only Food expense removes Food entirely."""
        ledger.add_transaction(50, "Food", "groceries", JAN_1, False)
        ledger.undo_last()
        assert all(c.category != "Food" for c in ledger.get_top_categories())
        assert "Food" not in ledger.get_category_totals()

    def test_readded_category_ranks_as_new(self, ledger):
        """A category removed by undo and added again ties after older categories."""
        ledger.add_transaction(10, "Rent", "a", JAN_1, False)
        ledger.add_transaction(10, "Food", "b", JAN_1, False)
        ledger.undo_last()
        ledger.add_transaction(10, "Travel", "c", JAN_1, False)
        ledger.add_transaction(10, "Food", "d", JAN_1, False)
        assert [c.category for c in ledger.get_top_categories()] == ["Rent", "Travel", "Food"]

    def test_income_never_touches_categories(self, ledger):
        """Test income stays out of the category views."""
        ledger.add_transaction(500, "Salary", "pay", JAN_1, True)
        assert ledger.get_top_categories() == []

    def test_balance_overflow_is_atomic(self, ledger):
        """Test an overflowing balance leaves the whole ledger unchanged."""
        ledger.add_transaction(10, "Food", "a", JAN_1, False)
        before = snapshot(ledger)
        with pytest.raises(Overflow):
            ledger.add_transaction(Decimal("1E+1000000"), "Food", "huge", JAN_1, False)
        assert snapshot(ledger) == before
        assert len(ledger.get_balance_history()) == len(ledger) + 1
        assert ledger.undo_last().description == "a"

    def test_category_total_overflow_is_atomic(self, ledger):
        """Test an overflowing category total rolls back the stored transaction."""
        ledger.add_transaction(HUGE, "Salary", "pay", JAN_1, True)
        ledger.add_transaction(HUGE, "Food", "a", JAN_1, False)
        before = snapshot(ledger)
        with pytest.raises(Overflow):
            ledger.add_transaction(HUGE, "Food", "b", JAN_1, False)
        assert snapshot(ledger) == before
        assert ledger.add_transaction(1, "Food", "c", JAN_1, False).id == 3

    def test_undo_depth_from_settings(self):
        """Test from_settings applies the configured limits."""
        settings = LedgerSettings(undo_depth=2, top_n=3, recent_limit=4, outlier_multiplier=Decimal("2"))
        ledger = Ledger.from_settings(settings)
        assert ledger.undo_depth == 2
        for i in range(4):
            ledger.add_transaction(i + 1, f"C{i}", "x", JAN_1, False)
        assert len(ledger.get_top_categories()) == 3
        assert len(ledger.get_recent_transactions()) == 4

    def test_undo_available_counts_down(self, ledger):
        """Test undo_available tracks the remaining history."""
        for i in range(3):
            ledger.add_transaction(1, "Food", "x", JAN_1, False)
        assert ledger.undo_available == 3
        ledger.undo_last()
        assert ledger.undo_available == 2
