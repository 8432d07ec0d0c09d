"""
Session Orchestrator for Pocket Ledger

This module ties the engine, the entry validator and the audit logger
together and defines the end-to-end flows a front end drives:
1. Budget setup (figures → validate → initial entries)
2. Entry (raw form → validate → record)
3. Undo (most recent addition → reversed, or a notice)
4. Fraud scan (ledger → report → user-facing lines)
5. Dashboard (everything the main screen shows)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The engine only ever sees validated input
- Recoverable failures come back as (result, message) pairs, not exceptions
- Every user action is audited
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Mapping, Optional, Union
from uuid import UUID

from ledger.audit import AuditLogger, create_correlation_id
from ledger.config import get_settings
from ledger.config.settings import LedgerSettings
from ledger.engine import EmptyHistoryError, InvalidInputError, Ledger, LedgerError
from ledger.engine import analytics
from ledger.engine.fraud import describe_report
from ledger.models.budget import (
    INCOME_CATEGORY,
    BudgetPlan,
    CategoryUsage,
    DashboardSnapshot,
)
from ledger.models.transaction import FraudReport, Transaction, TransactionEntry, TransactionType
from ledger.services.storage import InMemoryAuditStorage
from ledger.validation import EntryValidator


class SetupAlreadyCompletedError(LedgerError):
    """Budget setup can only run once per session."""
    pass


class LedgerSession:
    """
    One user's ledger for the lifetime of one session.

    Flow:
    1. complete_setup() once, with the budget figures
    2. submit_entry() / undo() / scan_for_fraud() any number of times
    3. dashboard() whenever the screen needs redrawing

    The session owns its Ledger; dropping the session drops the data.
    """

    def __init__(
        self,
        ledger: Optional[Ledger] = None,
        validator: Optional[EntryValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
        today: Callable[[], date] = date.today,
    ):
        self._settings = settings or get_settings().ledger
        self._ledger = ledger if ledger is not None else Ledger.from_settings(self._settings)
        self._today = today
        self._validator = validator or EntryValidator(today=today)
        self._audit_logger = audit_logger
        self._plan: Optional[BudgetPlan] = None
        self._setup_date: Optional[date] = None

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def plan(self) -> Optional[BudgetPlan]:
        return self._plan

    @property
    def setup_complete(self) -> bool:
        return self._plan is not None

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    def _money(self, amount: Decimal) -> str:
        return f"{self._settings.currency_symbol}{amount:.2f}"

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def complete_setup(
        self,
        plan: Union[BudgetPlan, Mapping],
        correlation_id: Optional[UUID] = None,
    ) -> list[Transaction]:
        """
        Record the budget plan and its initial entries.

        The salary is added as income and every positive budget line as
        an expense in its category, all dated today.

        Raises:
            InvalidInputError: if raw figures fail validation
            SetupAlreadyCompletedError: if setup already ran this session
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._plan is not None:
            raise SetupAlreadyCompletedError("Budget setup has already been completed")

        if not isinstance(plan, BudgetPlan):
            try:
                plan = self._validator.parse_budget_plan(plan)
            except InvalidInputError as e:
                self._log_rejected(e, correlation_id)
                raise

        today = self._today()
        added = [
            self._ledger.add_transaction(
                plan.salary, INCOME_CATEGORY, "Monthly Salary", today, True
            )
        ]
        for category, amount in plan.allocations().items():
            if amount > 0:
                added.append(self._ledger.add_transaction(
                    amount, category.value, f"Monthly {category.value}", today, False
                ))

        self._plan = plan
        self._setup_date = today

        if self._audit_logger is not None:
            self._audit_logger.log_budget_setup(
                salary=str(plan.salary),
                total_budgeted=str(plan.total_budgeted),
                entries_added=len(added),
                correlation_id=correlation_id,
            )
            for transaction in added:
                self._audit_logger.log_transaction_added(
                    transaction=transaction,
                    balance=str(self._ledger.get_balance()),
                    correlation_id=correlation_id,
                )

        return added

    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------

    def add_entry(
        self,
        entry: TransactionEntry,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """Record an already-validated entry."""
        correlation_id = correlation_id or create_correlation_id()

        try:
            transaction = self._ledger.add_transaction(
                entry.amount,
                entry.category,
                entry.description,
                entry.date,
                entry.is_income,
            )
        except ArithmeticError as e:
            if self._audit_logger is not None:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e) or "Decimal arithmetic failed",
                    details={"amount": str(entry.amount), "category": entry.category},
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger is not None:
            self._audit_logger.log_transaction_added(
                transaction=transaction,
                balance=str(self._ledger.get_balance()),
                correlation_id=correlation_id,
            )

        return transaction

    def submit_entry(
        self,
        amount,
        category: Optional[str],
        description: Optional[str],
        entry_date: Union[str, date, None] = None,
        entry_type: Union[str, bool, TransactionType, None] = TransactionType.EXPENSE,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[Transaction], str]:
        """
        Validate and record one entry form submission.

        Returns:
            (transaction, message); transaction is None when input was rejected
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            entry = self._validator.parse_entry(
                amount, category, description, entry_date, entry_type
            )
        except InvalidInputError as e:
            self._log_rejected(e, correlation_id)
            return None, self._validator.get_user_friendly_summary(e)

        try:
            transaction = self.add_entry(entry, correlation_id=correlation_id)
        except ArithmeticError:
            return None, "Transaction could not be recorded: the ledger total is out of range"
        return transaction, "Transaction added successfully!"

    def undo(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[Transaction], str]:
        """
        Undo the most recent addition.

        Returns:
            (transaction, message); transaction is None when there was nothing to undo
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            transaction = self._ledger.undo_last()
        except EmptyHistoryError:
            if self._audit_logger is not None:
                self._audit_logger.log_undo_rejected(correlation_id=correlation_id)
            return None, "No transactions to undo!"

        if self._audit_logger is not None:
            self._audit_logger.log_transaction_undone(
                transaction=transaction,
                balance=str(self._ledger.get_balance()),
                correlation_id=correlation_id,
            )

        return transaction, "Transaction undone successfully!"

    def _log_rejected(self, error: InvalidInputError, correlation_id: UUID) -> None:
        if self._audit_logger is not None:
            self._audit_logger.log_input_rejected(
                issues=[
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in error.issues
                ],
                correlation_id=correlation_id,
            )

    # -------------------------------------------------------------------------
    # Fraud
    # -------------------------------------------------------------------------

    def scan_for_fraud(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[FraudReport, list[str]]:
        """
        Run the fraud heuristics over the whole ledger.

        Returns:
            (report, one display line per finding)
        """
        correlation_id = correlation_id or create_correlation_id()

        report = self._ledger.run_fraud_scan()

        if self._audit_logger is not None:
            self._audit_logger.log_fraud_scan(
                transaction_count=report.transaction_count,
                duplicate_count=len(report.duplicates),
                outlier_count=len(report.outliers),
                correlation_id=correlation_id,
            )

        return report, describe_report(report, self._settings.currency_symbol)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def savings_message(self) -> Optional[str]:
        """Verdict on the projected savings; None before setup."""
        if self._plan is None:
            return None
        savings = analytics.savings_projection(self._plan)
        if savings > 0:
            return f"Great! You can save {self._money(savings)} this month!"
        return f"Warning! You're overspending by {self._money(abs(savings))}"

    def category_usage(self) -> list[CategoryUsage]:
        """Usage of every budget category, in setup order."""
        if self._plan is None:
            return []

        usage = []
        for category, budget in self._plan.allocations().items():
            percentage = self._ledger.get_category_usage(category.value, budget)
            usage.append(CategoryUsage(
                category=category.value,
                budget=budget,
                spent=self._ledger.get_category_totals().get(category.value, Decimal("0")),
                percentage=percentage,
                level=analytics.usage_level(
                    percentage,
                    warning_above=self._settings.usage_warning_percent,
                    critical_above=self._settings.usage_critical_percent,
                ),
            ))
        return usage

    def dashboard(self) -> DashboardSnapshot:
        """Build a fresh snapshot of every derived view."""
        return DashboardSnapshot(
            balance=self._ledger.get_balance(),
            transaction_count=len(self._ledger),
            top_expenses=self._ledger.get_top_expenses(),
            top_categories=self._ledger.get_top_categories(),
            monthly_average=self._ledger.get_monthly_average(),
            recent_transactions=self._ledger.get_recent_transactions(),
            category_usage=self.category_usage(),
            plan=self._plan,
            savings=analytics.savings_projection(self._plan) if self._plan is not None else None,
            savings_message=self.savings_message(),
            setup_date=self._setup_date,
        )


def create_session(
    use_audit_trail: bool = True,
    today: Callable[[], date] = date.today,
) -> LedgerSession:
    """
    Factory function to create a fully wired session.

    Args:
        use_audit_trail: Keep audit events in memory for this session.
                        Set to False to log locally only.
        today: date supplier for default entry dates

    Returns:
        A new LedgerSession with an empty ledger
    """
    settings = get_settings()
    audit_settings = settings.audit

    storage = None
    if use_audit_trail and audit_settings.keep_in_memory:
        storage = InMemoryAuditStorage(max_events=audit_settings.max_events)

    audit_logger = AuditLogger(storage, enabled=audit_settings.enabled)

    return LedgerSession(
        audit_logger=audit_logger,
        settings=settings.ledger,
        today=today,
    )
