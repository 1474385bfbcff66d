"""
Core Data Models for the Expense Tracker

These models define the schemas for everything the tracker stores and derives.
They are designed to:
1. Enforce the entry invariants (positive amounts, closed category set)
2. Provide clear validation error messages
3. Round-trip through the local JSON store in the same camelCase shape
   the data has always been persisted in

DESIGN DECISION: Stored records are frozen. An expense is created once and
deleted by id; it is never edited in place.
"""

import math
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional
from uuid import uuid4

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
)
from pydantic.alias_generators import to_camel


# Expense has a field called `date`; annotations inside it use this name.
CalendarDate = date


def survives_json_number(value: Decimal) -> bool:
    """
    True if the amount reads back unchanged after being stored.

    Amounts are written as JSON numbers (doubles), so anything out of
    range or with more significant digits than a double holds would
    come back as a different value.
    """
    as_float = float(value)
    return math.isfinite(as_float) and Decimal(repr(as_float)) == value


def _require_storable(value: Decimal) -> Decimal:
    if not survives_json_number(value):
        raise ValueError("amount is too large or too precise to store")
    return value


# Amounts are Decimal in memory and plain JSON numbers on disk.
Money = Annotated[
    Decimal,
    AfterValidator(_require_storable),
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories, in display order.

    DESIGN DECISION: A closed set rather than free text, so that budget
    rules can be matched to expenses by simple label equality.
    """
    HOUSING = "Housing"
    UTILITIES = "Utilities"
    GROCERIES = "Groceries"
    TRANSPORT = "Transport"
    HEALTH = "Health"
    ENTERTAINMENT = "Entertainment"
    DINING = "Dining"
    SHOPPING = "Shopping"
    SAVINGS = "Savings"
    OTHER = "Other"


DEFAULT_CATEGORY = ExpenseCategory.OTHER


class SortKey(str, Enum):
    """Columns the expense list can be sorted by."""
    DATE = "date"
    AMOUNT = "amount"
    NAME = "name"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# =============================================================================
# STORED RECORDS
# =============================================================================

class Expense(BaseModel):
    """
    A single logged expense.

    `date` is kept as the ISO string it was entered or stored as.
    Use `calendar_date` for anything that needs real date semantics;
    it reads the leading YYYY-MM-DD (so a stored timestamp still has a
    day) and is None when there is no valid date there.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        description="Opaque unique identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name of the expense"
    )
    amount: Money = Field(
        ...,
        gt=0,
        description="Amount in currency units"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    date: str = Field(
        ...,
        description="Calendar date in ISO form (YYYY-MM-DD)"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Optional free-text notes"
    )

    @property
    def calendar_date(self) -> Optional[CalendarDate]:
        """Parsed date, or None if the stored string is malformed."""
        try:
            return date.fromisoformat(self.date[:10])
        except (TypeError, ValueError):
            return None

    def to_storage(self) -> dict:
        """Convert to the JSON shape written to the local store."""
        return self.model_dump(mode="json", by_alias=True)


class BudgetRule(BaseModel):
    """A monthly spending limit for one category."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    category: ExpenseCategory = Field(
        ...,
        description="Category this limit applies to"
    )
    monthly_limit: Money = Field(
        default=Decimal("0"),
        ge=0,
        description="Monthly limit in currency units"
    )

    def to_storage(self) -> dict:
        """Convert to the JSON shape written to the local store."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# ENTRY FORM
# =============================================================================

class ExpenseInput(BaseModel):
    """
    Raw values from the expense form, before validation.

    Everything is loosely typed on purpose: the validator decides what is
    acceptable and reports why, instead of pydantic raising on construction.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""
    amount: Any = None
    category: Any = DEFAULT_CATEGORY.value
    date: Any = Field(
        default_factory=lambda: date.today().isoformat()
    )
    notes: Optional[str] = None


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class BudgetInsight(BaseModel):
    """A budget rule together with what has been spent against it."""
    model_config = ConfigDict(frozen=True)

    category: ExpenseCategory
    monthly_limit: Decimal
    spent: Decimal
    remaining: Decimal = Field(ge=0)
    utilization: float = Field(
        ge=0.0,
        le=1.0,
        description="spent / limit, clamped to [0, 1]"
    )


class SpendingSummary(BaseModel):
    """Headline numbers for the summary cards."""
    model_config = ConfigDict(frozen=True)

    total_spent: Decimal
    largest_expense: Optional[Expense] = None
    planned_total: Decimal
    total_remaining: Decimal
    expense_count: int = Field(ge=0)
    budget_count: int = Field(ge=0)


class MonthlyGroup(BaseModel):
    """Expenses that share a year-month key."""
    model_config = ConfigDict(frozen=True)

    month: str = Field(
        ...,
        description="YYYY-MM, or empty for expenses without a valid date"
    )
    items: tuple[Expense, ...] = ()

    @property
    def is_undated(self) -> bool:
        return self.month == ""


class SortState(BaseModel):
    """Current sort column and direction of the expense table."""
    model_config = ConfigDict(frozen=True)

    key: SortKey = SortKey.DATE
    direction: SortDirection = SortDirection.DESC


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating an expense form submission.

    Errors block submission. Warnings are shown but do not block.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
