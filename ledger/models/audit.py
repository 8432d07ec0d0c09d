"""
Audit Models for Pocket Ledger

Every user action against the ledger is recorded as an audit event.
This provides:
1. Traceability of how the balance got to where it is
2. Debugging information when an undo or scan surprises the user
3. A session history the front end can show

DESIGN DECISION: Audit trails are append-only. Events are never modified.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Setup
    BUDGET_SETUP_COMPLETED = "budget_setup_completed"

    # Ledger mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UNDONE = "transaction_undone"
    UNDO_REJECTED = "undo_rejected"

    # Input
    INPUT_REJECTED = "input_rejected"

    # Fraud heuristics
    FRAUD_SCAN_COMPLETED = "fraud_scan_completed"
    FRAUD_DETECTED = "fraud_detected"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'budget', 'scan')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="Ledger id of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all entries of one setup)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction, balance, correlation_id)
        event = AuditEventBuilder.undo_rejected(correlation_id)
    """

    @staticmethod
    def budget_setup_completed(
        salary: str,
        total_budgeted: str,
        entries_added: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SETUP_COMPLETED,
            entity_type="budget",
            correlation_id=correlation_id,
            description=f"Budget setup completed with {entries_added} initial entries",
            details={
                "salary": salary,
                "total_budgeted": total_budgeted,
                "entries_added": entries_added,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_added(
        transaction_id: int,
        amount: str,
        category: str,
        is_income: bool,
        balance: str,
        correlation_id: UUID
    ) -> AuditEvent:
        kind = "Income" if is_income else "Expense"
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"{kind} added: {amount} in {category}",
            details={
                "amount": amount,
                "category": category,
                "is_income": is_income,
                "balance_after": balance,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_undone(
        transaction_id: int,
        amount: str,
        category: str,
        balance: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UNDONE,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction {transaction_id} undone",
            details={
                "amount": amount,
                "category": category,
                "balance_after": balance,
            },
            is_user_action=True,
        )

    @staticmethod
    def undo_rejected(
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UNDO_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description="Undo requested with nothing to undo",
            is_user_action=True,
        )

    @staticmethod
    def input_rejected(
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INPUT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="entry",
            correlation_id=correlation_id,
            description=f"Entry rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def fraud_scan_completed(
        transaction_count: int,
        duplicate_count: int,
        outlier_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        found = duplicate_count + outlier_count
        return AuditEvent(
            event_type=(
                AuditEventType.FRAUD_DETECTED
                if found
                else AuditEventType.FRAUD_SCAN_COMPLETED
            ),
            severity=AuditSeverity.WARNING if found else AuditSeverity.INFO,
            entity_type="scan",
            correlation_id=correlation_id,
            description=f"Fraud scan over {transaction_count} transactions found {found} issues",
            details={
                "transaction_count": transaction_count,
                "duplicate_patterns": duplicate_count,
                "outliers": outlier_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
