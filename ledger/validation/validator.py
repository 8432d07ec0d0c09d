"""
Entry Validation

The ledger engine trusts its inputs. This module is where raw form
values (strings typed by the user) are checked and turned into typed
entries before the engine ever sees them.

Checks:
- Amount present, numeric, finite, greater than zero and at most MAX_ENTRY_AMOUNT
- Category and description present
- Date present (or defaulted to today) and a real calendar date
- Type is income or expense

IMPORTANT: Validation NEVER silently fixes input. Every problem is
collected and reported together so the user can fix them in one pass.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Mapping, Optional, Union

from ledger.engine.exceptions import InvalidInputError
from ledger.models.budget import BudgetPlan
from ledger.models.transaction import (
    MAX_ENTRY_AMOUNT,
    ZERO,
    TransactionEntry,
    TransactionType,
    ValidationIssue,
    to_decimal,
)


RawAmount = Union[str, int, float, Decimal, None]

BUDGET_FIELDS = ("salary", "rent", "food", "transportation", "entertainment", "other")


class EntryValidator:
    """
    Turns raw form input into validated entries.

    Args:
        today: supplier of the current date, used when no date is given.
    """

    def __init__(self, today: Callable[[], date] = date.today):
        self._today = today

    def _check_amount(
        self,
        raw: RawAmount,
        field: str,
        issues: list[ValidationIssue],
        allow_zero: bool = False,
    ) -> Optional[Decimal]:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{field.capitalize()} is required",
                suggested_fix="Enter an amount, e.g. 25.50",
            ))
            return None

        if isinstance(raw, bool):
            value = None
        elif isinstance(raw, str):
            try:
                value = Decimal(raw.strip().replace(",", ""))
            except InvalidOperation:
                value = None
        else:
            try:
                value = Decimal(to_decimal(raw))
            except (InvalidOperation, TypeError, ValueError):
                value = None

        if value is None or not value.is_finite():
            issues.append(ValidationIssue(
                field=field,
                issue_type="not_a_number",
                message=f"{field.capitalize()} must be a number",
                suggested_fix="Use digits only, e.g. 25.50",
            ))
            return None

        if value < ZERO or (value == ZERO and not allow_zero):
            issues.append(ValidationIssue(
                field=field,
                issue_type="not_positive",
                message=(
                    f"{field.capitalize()} cannot be negative"
                    if allow_zero
                    else f"{field.capitalize()} must be greater than zero"
                ),
                suggested_fix="Choose income or expense for the direction; enter the size here",
            ))
            return None

        if value > MAX_ENTRY_AMOUNT:
            issues.append(ValidationIssue(
                field=field,
                issue_type="too_large",
                message=f"{field.capitalize()} cannot exceed {MAX_ENTRY_AMOUNT:,}",
                suggested_fix="Check the amount for extra digits",
            ))
            return None

        return value

    def _check_text(
        self,
        raw: Optional[str],
        field: str,
        issues: list[ValidationIssue],
    ) -> Optional[str]:
        text = (raw or "").strip()
        if not text:
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{field.capitalize()} is required",
            ))
            return None
        return text

    def _check_date(
        self,
        raw: Union[str, date, None],
        issues: list[ValidationIssue],
    ) -> Optional[date]:
        if isinstance(raw, datetime):
            return raw.date()
        if isinstance(raw, date):
            return raw
        text = (raw or "").strip()
        if not text:
            return self._today()
        try:
            return date.fromisoformat(text)
        except ValueError:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"'{text}' is not a valid date",
                suggested_fix="Use the YYYY-MM-DD format",
            ))
            return None

    def _check_type(
        self,
        raw: Union[str, bool, TransactionType, None],
        issues: list[ValidationIssue],
    ) -> Optional[bool]:
        if isinstance(raw, bool):
            return raw
        try:
            return TransactionType((raw or "").strip().lower()) == TransactionType.INCOME
        except (ValueError, AttributeError):
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message="Type must be 'income' or 'expense'",
            ))
            return None

    def parse_amount(self, raw: RawAmount, field: str = "amount", allow_zero: bool = False) -> Decimal:
        """
        Parse a single amount.

        Raises:
            InvalidInputError: if the amount is missing or unusable
        """
        issues: list[ValidationIssue] = []
        value = self._check_amount(raw, field, issues, allow_zero=allow_zero)
        if issues:
            raise InvalidInputError(issues)
        return value

    def parse_entry(
        self,
        amount: RawAmount,
        category: Optional[str],
        description: Optional[str],
        entry_date: Union[str, date, None] = None,
        entry_type: Union[str, bool, TransactionType, None] = TransactionType.EXPENSE,
    ) -> TransactionEntry:
        """
        Validate one entry form submission.

        Raises:
            InvalidInputError: listing every problem found
        """
        issues: list[ValidationIssue] = []

        value = self._check_amount(amount, "amount", issues)
        category_text = self._check_text(category, "category", issues)
        description_text = self._check_text(description, "description", issues)
        parsed_date = self._check_date(entry_date, issues)
        is_income = self._check_type(entry_type, issues)

        if issues:
            raise InvalidInputError(issues)

        return TransactionEntry(
            amount=value,
            category=category_text,
            description=description_text,
            date=parsed_date,
            is_income=is_income,
        )

    def parse_budget_plan(self, raw: Mapping[str, RawAmount]) -> BudgetPlan:
        """
        Validate the setup wizard's figures.

        Every step must be filled in; zero is allowed for expense lines
        and means the category is not budgeted.

        Raises:
            InvalidInputError: listing every problem found
        """
        issues: list[ValidationIssue] = []
        values = {}
        for field in BUDGET_FIELDS:
            values[field] = self._check_amount(
                raw.get(field),
                field,
                issues,
                allow_zero=field != "salary",
            )

        if issues:
            raise InvalidInputError(issues)

        return BudgetPlan(**values)

    @staticmethod
    def get_user_friendly_summary(error: InvalidInputError) -> str:
        """
        Summarize validation issues for display.
        """
        lines = ["Please fix the following:"]
        for issue in error.issues:
            lines.append(f"   • {issue.message}")
            if issue.suggested_fix:
                lines.append(f"     {issue.suggested_fix}")
        return "\n".join(lines)
