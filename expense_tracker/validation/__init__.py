"""Validation package."""

from expense_tracker.validation.validator import (
    ExpenseValidator,
    coerce_limit,
    parse_amount,
    parse_category,
    parse_date,
)

__all__ = [
    "ExpenseValidator",
    "coerce_limit",
    "parse_amount",
    "parse_category",
    "parse_date",
]
