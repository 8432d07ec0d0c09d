"""Configuration package."""

from ledger.config.settings import (
    AuditSettings,
    LedgerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AuditSettings",
    "LedgerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
