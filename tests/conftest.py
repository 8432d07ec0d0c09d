"""Shared fixtures for Pocket Ledger tests."""

from datetime import date

import pytest

from ledger.audit import AuditLogger
from ledger.config.settings import LedgerSettings
from ledger.engine import Ledger
from ledger.orchestrator import LedgerSession
from ledger.services.storage import InMemoryAuditStorage


FIXED_TODAY = date(2024, 3, 15)


@pytest.fixture
def ledger():
    """An empty ledger with default limits."""
    return Ledger()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def session(audit_storage):
    """A session with an in-memory audit trail and a fixed 'today'."""
    return LedgerSession(
        audit_logger=AuditLogger(audit_storage),
        settings=LedgerSettings(),
        today=lambda: FIXED_TODAY,
    )
