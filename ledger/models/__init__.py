"""
Data Models Package

This package contains all Pydantic models used in Pocket Ledger.
Every record the engine stores or derives conforms to these schemas.
"""

from ledger.models.transaction import (
    CategoryTotal,
    DuplicatePattern,
    FraudReport,
    Transaction,
    TransactionEntry,
    TransactionType,
    ValidationIssue,
)
from ledger.models.budget import (
    INCOME_CATEGORY,
    BudgetCategory,
    BudgetPlan,
    CategoryUsage,
    DashboardSnapshot,
    UsageLevel,
)
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "CategoryTotal",
    "DuplicatePattern",
    "FraudReport",
    "Transaction",
    "TransactionEntry",
    "TransactionType",
    "ValidationIssue",
    # Budget models
    "INCOME_CATEGORY",
    "BudgetCategory",
    "BudgetPlan",
    "CategoryUsage",
    "DashboardSnapshot",
    "UsageLevel",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
