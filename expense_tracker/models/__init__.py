"""
Data Models Package

This package contains all Pydantic models used by the expense tracker.
Everything stored or derived must conform to these schemas.
"""

from expense_tracker.models.expense import (
    DEFAULT_CATEGORY,
    BudgetInsight,
    BudgetRule,
    Expense,
    ExpenseCategory,
    ExpenseInput,
    MonthlyGroup,
    SortDirection,
    SortKey,
    SortState,
    SpendingSummary,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "DEFAULT_CATEGORY",
    # Stored records
    "BudgetRule",
    "Expense",
    "ExpenseCategory",
    # Entry form
    "ExpenseInput",
    # Derived views
    "BudgetInsight",
    "MonthlyGroup",
    "SortDirection",
    "SortKey",
    "SortState",
    "SpendingSummary",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
