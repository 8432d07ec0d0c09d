"""
Configuration Management for Pocket Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All tunable numbers live here.
The engine defaults (undo depth, top-N size, outlier multiplier) match the
behaviour users expect, and overriding them is an explicit act.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Ledger engine settings.

    Loads configuration from LEDGER_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Undo
    undo_depth: int = Field(
        default=5,
        ge=1,
        le=50,
        description="How many of the most recent additions can be undone"
    )

    # Analytics
    top_n: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Size of the top expenses / top categories lists"
    )
    recent_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="How many transactions the recent history shows"
    )

    # Fraud heuristics
    outlier_multiplier: Decimal = Field(
        default=Decimal("3"),
        gt=0,
        description="An expense above median * multiplier is an outlier"
    )

    # Budget usage bands (percent)
    usage_warning_percent: Decimal = Field(
        default=Decimal("70"),
        ge=0,
        le=100,
        description="Usage above this is a warning"
    )
    usage_critical_percent: Decimal = Field(
        default=Decimal("90"),
        ge=0,
        le=100,
        description="Usage above this is critical"
    )

    # Display
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol used in user-facing messages"
    )

    @model_validator(mode='after')
    def validate_usage_bands(self) -> 'LedgerSettings':
        """Warning band must sit below the critical band."""
        if self.usage_warning_percent > self.usage_critical_percent:
            raise ValueError("usage_warning_percent cannot exceed usage_critical_percent")
        return self


class AuditSettings(BaseSettings):
    """Audit trail configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_AUDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Record audit events for user actions"
    )
    keep_in_memory: bool = Field(
        default=True,
        description="Keep events in a session-scoped in-memory trail"
    )
    max_events: int = Field(
        default=1000,
        ge=1,
        description="Oldest events are dropped beyond this many"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def audit(self) -> AuditSettings:
        return AuditSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.ledger
        results["ledger"] = True
    except Exception as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)

    try:
        _ = settings.audit
        results["audit"] = True
    except Exception as e:
        results["audit"] = False
        results["audit_error"] = str(e)

    return results
