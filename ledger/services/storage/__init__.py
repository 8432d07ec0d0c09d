"""
Storage Services Package

Audit storage interface and its session-scoped in-memory implementation.
Nothing here outlives the process.
"""

from ledger.services.storage.interface import (
    AuditStorageInterface,
    StorageError,
)
from ledger.services.storage.memory import InMemoryAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    # Exceptions
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
]
