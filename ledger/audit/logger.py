"""
Audit Logger

DESIGN DECISION: Every user action against the ledger is logged.
This provides:
1. Traceability of every balance change
2. Debugging capability
3. A history the user can be shown

The audit logger:
- Always logs locally through structlog
- Gracefully handles storage failures (never breaks a ledger operation)
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from ledger.models.transaction import Transaction
from ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
        enabled: bool = True,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the audit trail.
                    If None, only logs locally.
            enabled: When False, events are dropped entirely.
        """
        self._storage = storage
        self._enabled = enabled
        self._logger = structlog.get_logger("ledger.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Appends to storage if available.

        Returns True if the storage write succeeded (or no storage configured).
        """
        if not self._enabled:
            return True

        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage is not None:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_budget_setup(
        self,
        salary: str,
        total_budgeted: str,
        entries_added: int,
        correlation_id: UUID,
    ) -> None:
        """Log completion of the budget setup step."""
        event = AuditEventBuilder.budget_setup_completed(
            salary=salary,
            total_budgeted=total_budgeted,
            entries_added=entries_added,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_transaction_added(
        self,
        transaction: Transaction,
        balance: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.transaction_added(
            transaction_id=transaction.id,
            amount=str(transaction.amount),
            category=transaction.category,
            is_income=transaction.is_income,
            balance=balance,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_transaction_undone(
        self,
        transaction: Transaction,
        balance: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.transaction_undone(
            transaction_id=transaction.id,
            amount=str(transaction.amount),
            category=transaction.category,
            balance=balance,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_undo_rejected(
        self,
        correlation_id: UUID,
    ) -> None:
        """Log an undo attempt with an empty history."""
        self.log(AuditEventBuilder.undo_rejected(correlation_id=correlation_id))

    def log_input_rejected(
        self,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log entry validation failure."""
        event = AuditEventBuilder.input_rejected(
            issues=issues,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_fraud_scan(
        self,
        transaction_count: int,
        duplicate_count: int,
        outlier_count: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.fraud_scan_completed(
            transaction_count=transaction_count,
            duplicate_count=duplicate_count,
            outlier_count=outlier_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., budget setup).
    Pass it through all subsequent operations.
    """
    return uuid4()
