"""Input validation package."""

from ledger.validation.validator import EntryValidator

__all__ = ["EntryValidator"]
