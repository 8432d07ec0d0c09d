"""
Abstract Audit Storage Interface

DESIGN DECISION: The audit logger writes through an interface so the
sink can be swapped (a list in memory today, a file or database later)
without touching the ledger or the session code.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from ledger.models.audit import AuditEvent


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit event storage.

    Audit trails are append-only - events are never deleted or modified.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the trail.

        Returns:
            True if stored successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID, oldest first.
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: Optional[int] = None,
    ) -> list[AuditEvent]:
        """
        Get all events for an entity type, optionally narrowed to one id.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent events, newest first.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
