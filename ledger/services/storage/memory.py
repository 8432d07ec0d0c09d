"""
In-Memory Audit Storage

Keeps the audit trail for the lifetime of one session. Bounded: once
`max_events` is reached the oldest events are dropped.
"""

from collections import deque
from typing import Optional
from uuid import UUID

from ledger.models.audit import AuditEvent
from ledger.services.storage.interface import AuditStorageInterface, StorageError


class InMemoryAuditStorage(AuditStorageInterface):
    """Session-scoped audit trail."""

    def __init__(self, max_events: int = 1000):
        if max_events < 1:
            raise StorageError(f"max_events must be at least 1, got {max_events}")
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: Optional[int] = None,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_type == entity_type
            and (entity_id is None or e.entity_id == entity_id)
        ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        if limit <= 0:
            return []
        return list(reversed(self._events))[:limit]

    def __len__(self) -> int:
        return len(self._events)
