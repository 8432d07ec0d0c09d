"""
Budget Models for Pocket Ledger

The budget plan is what the user enters during setup: a monthly salary
and an allocation per expense category. It drives the savings projection
and the per-category usage bars, independently of what was actually spent.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ledger.models.transaction import MAX_ENTRY_AMOUNT, CategoryTotal, Transaction, to_decimal


class BudgetCategory(str, Enum):
    """
    Expense categories the setup step asks about.

    The value is the label transactions are recorded under.
    Entry-form expenses may still use any free-form category.
    """
    RENT = "Rent"
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    OTHER = "Other"


INCOME_CATEGORY = "Salary"


class UsageLevel(str, Enum):
    """How close a category is to its budget."""
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class BudgetPlan(BaseModel):
    """
    Monthly budget entered during setup.

    All figures are non-negative. A zero allocation means the category
    is not budgeted and no setup expense is recorded for it.
    """
    model_config = ConfigDict(frozen=True)

    salary: Decimal = Field(..., ge=0, le=MAX_ENTRY_AMOUNT, allow_inf_nan=False, description="Monthly income")
    rent: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_ENTRY_AMOUNT, allow_inf_nan=False)
    food: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_ENTRY_AMOUNT, allow_inf_nan=False)
    transportation: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_ENTRY_AMOUNT, allow_inf_nan=False)
    entertainment: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_ENTRY_AMOUNT, allow_inf_nan=False)
    other: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_ENTRY_AMOUNT, allow_inf_nan=False)

    @field_validator('*', mode='before')
    @classmethod
    def coerce_amounts(cls, v):
        return to_decimal(v)

    def allocations(self) -> dict[BudgetCategory, Decimal]:
        """Budgeted amount per expense category, in setup order."""
        return {
            BudgetCategory.RENT: self.rent,
            BudgetCategory.FOOD: self.food,
            BudgetCategory.TRANSPORTATION: self.transportation,
            BudgetCategory.ENTERTAINMENT: self.entertainment,
            BudgetCategory.OTHER: self.other,
        }

    def budget_for(self, category: str) -> Decimal:
        """Budgeted amount for a category label; 0 if it is not a budget category."""
        for budget_category, amount in self.allocations().items():
            if budget_category.value == category:
                return amount
        return Decimal("0")

    @property
    def total_budgeted(self) -> Decimal:
        return sum(self.allocations().values(), Decimal("0"))

    @property
    def savings(self) -> Decimal:
        """Projected savings: salary minus everything budgeted."""
        return self.salary - self.total_budgeted


class CategoryUsage(BaseModel):
    """Spending against budget for one category."""
    model_config = ConfigDict(frozen=True)

    category: str
    budget: Decimal
    spent: Decimal
    percentage: Decimal = Field(ge=0, le=100)
    level: UsageLevel


class DashboardSnapshot(BaseModel):
    """
    Everything a front end needs to draw the main screen.

    Built fresh on every request; never cached.
    """
    model_config = ConfigDict(frozen=True)

    generated_at: datetime = Field(default_factory=datetime.utcnow)
    balance: Decimal
    transaction_count: int = Field(ge=0)
    top_expenses: list[Transaction] = Field(default_factory=list)
    top_categories: list[CategoryTotal] = Field(default_factory=list)
    monthly_average: Decimal
    recent_transactions: list[Transaction] = Field(default_factory=list)
    category_usage: list[CategoryUsage] = Field(default_factory=list)

    # Only present once setup has been completed
    plan: Optional[BudgetPlan] = None
    savings: Optional[Decimal] = None
    savings_message: Optional[str] = None
    setup_date: Optional[date] = None
