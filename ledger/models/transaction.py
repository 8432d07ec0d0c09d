"""
Core Data Models for Pocket Ledger

These models define the schemas for every record the ledger engine
stores or derives. They are designed to:
1. Be immutable once created (a transaction never changes after it is recorded)
2. Keep money exact (Decimal, never float)
3. Provide clear validation error messages
4. Be serializable for logging and the audit trail

DESIGN DECISION: The sign of a transaction lives in `is_income`, never in
`amount`. Every balance calculation goes through `signed_amount`.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


ZERO = Decimal("0")

# Largest amount a single form entry may carry. Keeps running totals well
# inside the decimal context.
MAX_ENTRY_AMOUNT = Decimal("1000000000000")

# Field names below are `date`; annotate through an alias so the name
# does not shadow the type inside the class body.
CalendarDate = date


def to_decimal(value):
    """Convert floats through their string form so 0.1 stays 0.1."""
    if isinstance(value, float):
        return Decimal(str(value))
    return value


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money flow, as chosen on the entry form."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded income or expense event.

    CRITICAL: Transactions are frozen. Undo removes a transaction,
    it never edits one.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(
        ...,
        ge=1,
        description="Monotonic id assigned by the store, never reused"
    )
    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Magnitude in currency units; the sign is is_income"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category label (e.g. Food, Rent, Salary)"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Free-form description"
    )
    date: CalendarDate = Field(
        ...,
        description="Calendar date, used for grouping only"
    )
    is_income: bool = Field(
        ...,
        description="True for inflow, False for outflow"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v):
        return to_decimal(v)

    @property
    def signed_amount(self) -> Decimal:
        """Effect of this transaction on the balance."""
        return self.amount if self.is_income else -self.amount

    @property
    def month_key(self) -> str:
        """Year-month grouping key, e.g. '2024-01'."""
        return self.date.isoformat()[:7]

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.INCOME if self.is_income else TransactionType.EXPENSE

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "id": self.id,
            "amount": str(self.amount),
            "category": self.category,
            "description": self.description,
            "date": self.date.isoformat(),
            "type": self.transaction_type.value,
        }


class TransactionEntry(BaseModel):
    """
    A validated entry from the input form, not yet recorded.

    The validator produces these; the engine trusts them.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        le=MAX_ENTRY_AMOUNT,
        allow_inf_nan=False,
        description="Positive amount"
    )
    category: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    date: CalendarDate
    is_income: bool

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v):
        return to_decimal(v)


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class CategoryTotal(BaseModel):
    """Cumulative expense total for one category."""
    model_config = ConfigDict(frozen=True)

    category: str
    total: Decimal
    count: int = Field(ge=0)


# =============================================================================
# FRAUD REPORT MODELS
# =============================================================================

class DuplicatePattern(BaseModel):
    """
    A (amount, category, date) combination seen more than once.

    Reported once per distinct pattern, with how many times it occurred.
    """
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    category: str
    date: CalendarDate
    count: int = Field(ge=2)

    @property
    def pattern(self) -> str:
        return f"{self.amount}-{self.category}-{self.date.isoformat()}"


class FraudReport(BaseModel):
    """
    Result of a fraud scan.

    A report with no findings is a valid result, not an error.
    """
    model_config = ConfigDict(frozen=True)

    scanned_at: datetime = Field(
        default_factory=datetime.utcnow
    )
    transaction_count: int = Field(
        default=0,
        ge=0,
        description="How many transactions were scanned"
    )
    duplicates: list[DuplicatePattern] = Field(default_factory=list)
    outliers: list[Transaction] = Field(default_factory=list)

    # None when there were no expenses to take a median of
    median: Optional[Decimal] = None
    threshold: Optional[Decimal] = None

    @property
    def is_clean(self) -> bool:
        """True when nothing suspicious was found."""
        return not self.duplicates and not self.outliers

    @property
    def finding_count(self) -> int:
        return len(self.duplicates) + len(self.outliers)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in user-supplied input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )
