"""
Activity Logger

Every change to stored state emits one structured log event:
- expense added / rejected / removed
- budgets saved
- storage failures

Events go to the local structured log only. Nothing here is persisted;
the tracker keeps no history of past states.
"""

import logging
import sys
from typing import Optional

import structlog

from expense_tracker.models.expense import BudgetRule, Expense, ValidationResult


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output to stderr at the given level.

    structlog hands rendered lines to the stdlib logger, so the
    stdlib level is what decides which events are written.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class ActivityLogger:
    """
    Central activity logging service.

    One method per kind of state change, so call sites stay short
    and event names stay consistent.
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("expense_tracker.activity")

    def log_expense_added(self, expense: Expense) -> None:
        self._logger.info(
            "expense_added",
            expense_id=expense.id,
            category=expense.category.value,
            amount=str(expense.amount),
            date=expense.date,
        )

    def log_expense_rejected(self, result: ValidationResult) -> None:
        """Log a blocked submission with the fields that failed."""
        self._logger.warning(
            "expense_rejected",
            error_count=result.error_count,
            fields=[issue.field for issue in result.issues if issue.severity == "error"],
        )

    def log_expense_removed(self, expense_id: str, found: bool) -> None:
        self._logger.info("expense_removed", expense_id=expense_id, found=found)

    def log_budgets_saved(self, rules: list[BudgetRule]) -> None:
        self._logger.info(
            "budgets_saved",
            budget_count=len(rules),
            categories=[rule.category.value for rule in rules],
        )

    def log_storage_error(self, operation: str, key: str, error: Exception) -> None:
        self._logger.error(
            "storage_error",
            operation=operation,
            key=key,
            error=str(error),
        )
