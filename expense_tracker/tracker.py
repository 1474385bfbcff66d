"""
Expense Tracker View Model

This module owns the two stored lists (expenses and budget rules) and
is the only place they change.

DESIGN DECISION: Lists are replaced, never mutated.
Each change builds a new tuple, writes it to the store, and only then
swaps it in. If validation or the write fails, the in-memory state
and the store are both left exactly as they were.

Everything the dashboard shows (month groups, budget insights, summary
totals, the filtered table) is computed on access from the current
lists, so it can never drift out of date.
"""

from typing import Iterable, Optional, Sequence, Type, TypeVar
from uuid import uuid4

import structlog
from pydantic import BaseModel, ValidationError

from expense_tracker.activity import ActivityLogger
from expense_tracker.analytics import (
    ALL_CATEGORIES,
    compute_budget_insights,
    compute_summary,
    filter_and_sort_expenses,
    group_by_month,
)
from expense_tracker.analytics.aggregation import CategoryFilter
from expense_tracker.config import get_settings
from expense_tracker.models.expense import (
    BudgetInsight,
    BudgetRule,
    Expense,
    ExpenseCategory,
    ExpenseInput,
    MonthlyGroup,
    SortDirection,
    SortKey,
    SpendingSummary,
    ValidationResult,
)
from expense_tracker.services.storage import KeyValueStore, StorageError
from expense_tracker.validation import (
    ExpenseValidator,
    coerce_limit,
    parse_amount,
    parse_category,
    parse_date,
)


logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class TrackerError(Exception):
    """Base exception for rejected tracker operations."""
    pass


class InvalidExpenseError(TrackerError):
    """Expense form input failed validation. Nothing was stored."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"Invalid expense: {messages}")


class DuplicateBudgetError(TrackerError):
    """More than one budget rule was given for the same category."""

    def __init__(self, categories: list[ExpenseCategory]):
        self.categories = categories
        names = ", ".join(category.value for category in categories)
        super().__init__(f"Duplicate budget categories: {names}")


class BudgetDraft:
    """
    Unsaved edits to the budget rules.

    The editor works on a copy; nothing is stored until the rules
    are handed to ExpenseTracker.save_budgets.
    """

    def __init__(
        self,
        rules: Iterable[BudgetRule] = (),
        categories: Sequence[ExpenseCategory] = tuple(ExpenseCategory),
    ):
        self._rules: tuple[BudgetRule, ...] = tuple(rules)
        self._categories = tuple(categories)

    @property
    def rules(self) -> list[BudgetRule]:
        return list(self._rules)

    @property
    def can_add(self) -> bool:
        return len(self._rules) < len(self._categories)

    def unused_categories(self) -> list[ExpenseCategory]:
        used = {rule.category for rule in self._rules}
        return [category for category in self._categories if category not in used]

    def add(self) -> Optional[BudgetRule]:
        """Budget the first category that has no rule yet, starting at 0."""
        unused = self.unused_categories()
        if not unused:
            return None
        rule = BudgetRule(category=unused[0])
        self._rules = self._rules + (rule,)
        return rule

    def update(self, category: ExpenseCategory, raw_limit) -> None:
        """Set a category's limit. Bad input becomes 0."""
        limit = coerce_limit(raw_limit)
        self._rules = tuple(
            BudgetRule(category=rule.category, monthly_limit=limit)
            if rule.category == category
            else rule
            for rule in self._rules
        )

    def remove(self, category: ExpenseCategory) -> None:
        self._rules = tuple(rule for rule in self._rules if rule.category != category)

    def insights(self, expenses: Sequence[Expense]) -> list[BudgetInsight]:
        """Preview how the draft limits compare to current spending."""
        return compute_budget_insights(self._rules, expenses)


class ExpenseTracker:
    """
    Holds expenses and budgets and keeps them in step with the store.

    Flow for every change:
    1. Validate → reject with no side effects
    2. Build the new list
    3. Write it to the store
    4. Swap it in memory
    5. Log the change
    """

    def __init__(
        self,
        store: KeyValueStore,
        validator: Optional[ExpenseValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
        expenses_key: Optional[str] = None,
        budgets_key: Optional[str] = None,
    ):
        if expenses_key is None or budgets_key is None:
            storage_settings = get_settings().storage
            expenses_key = expenses_key or storage_settings.expenses_key
            budgets_key = budgets_key or storage_settings.budgets_key

        self._store = store
        self._validator = validator or ExpenseValidator()
        self._activity = activity_logger or ActivityLogger()
        self._expenses_key = expenses_key
        self._budgets_key = budgets_key

        self._expenses: tuple[Expense, ...] = ()
        self._budgets: tuple[BudgetRule, ...] = ()
        self.reload()

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def reload(self) -> None:
        """Re-read both lists from the store."""
        self._expenses = tuple(self._load_records(self._expenses_key, Expense))
        self._budgets = tuple(self._dedupe_budgets(
            self._load_records(self._budgets_key, BudgetRule)
        ))

    def _load_records(self, key: str, model: Type[RecordT]) -> list[RecordT]:
        """
        Read a stored list, skipping records that no longer validate.

        A value that is not a list at all is treated as empty.
        """
        raw = self._store.get(key, [])
        if not isinstance(raw, list):
            logger.warning("stored_value_not_a_list", key=key, found=type(raw).__name__)
            return []

        records = []
        for index, item in enumerate(raw):
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "stored_record_skipped",
                    key=key,
                    index=index,
                    error_count=e.error_count(),
                )
        return records

    def _dedupe_budgets(self, rules: list[BudgetRule]) -> list[BudgetRule]:
        seen = set()
        kept = []
        for rule in rules:
            if rule.category in seen:
                logger.warning("duplicate_budget_skipped", category=rule.category.value)
                continue
            seen.add(rule.category)
            kept.append(rule)
        return kept

    # -------------------------------------------------------------------------
    # Current state
    # -------------------------------------------------------------------------

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return self._expenses

    @property
    def budgets(self) -> tuple[BudgetRule, ...]:
        return self._budgets

    @property
    def validator(self) -> ExpenseValidator:
        return self._validator

    # -------------------------------------------------------------------------
    # Changes
    # -------------------------------------------------------------------------

    def add_expense(self, form: ExpenseInput) -> Expense:
        """
        Validate form input and store it as a new expense.

        Raises:
            InvalidExpenseError: If validation found any error
            StorageError: If the store could not be written
        """
        expense, _ = self.submit_expense(form)
        return expense

    def submit_expense(self, form: ExpenseInput) -> tuple[Expense, ValidationResult]:
        """
        Same as add_expense, but also return the validation result
        so warnings can be shown next to the confirmation.
        """
        result = self._validator.validate(form)
        if not result.is_valid:
            self._activity.log_expense_rejected(result)
            raise InvalidExpenseError(result)

        notes = (form.notes or "").strip()
        expense = Expense(
            id=str(uuid4()),
            name=form.name.strip(),
            amount=parse_amount(form.amount),
            category=parse_category(form.category),
            date=parse_date(form.date).isoformat(),
            notes=notes or None,
        )

        self._commit_expenses(self._expenses + (expense,))
        self._activity.log_expense_added(expense)
        return expense, result

    def remove_expense(self, expense_id: str) -> bool:
        """
        Delete an expense by id.

        Returns False, and writes nothing, if no expense has that id.
        """
        remaining = tuple(e for e in self._expenses if e.id != expense_id)
        found = len(remaining) != len(self._expenses)
        if found:
            self._commit_expenses(remaining)
        self._activity.log_expense_removed(expense_id, found)
        return found

    def save_budgets(self, rules: Iterable[BudgetRule]) -> tuple[BudgetRule, ...]:
        """
        Replace every budget rule with the given batch.

        Raises:
            DuplicateBudgetError: If two rules share a category
            StorageError: If the store could not be written
        """
        new_rules = tuple(rules)

        seen = set()
        duplicates = []
        for rule in new_rules:
            if rule.category in seen and rule.category not in duplicates:
                duplicates.append(rule.category)
            seen.add(rule.category)
        if duplicates:
            raise DuplicateBudgetError(duplicates)

        self._write(self._budgets_key, [rule.to_storage() for rule in new_rules])
        self._budgets = new_rules
        self._activity.log_budgets_saved(list(new_rules))
        return new_rules

    def new_budget_draft(self) -> BudgetDraft:
        return BudgetDraft(self._budgets)

    def _commit_expenses(self, expenses: tuple[Expense, ...]) -> None:
        self._write(self._expenses_key, [e.to_storage() for e in expenses])
        self._expenses = expenses

    def _write(self, key: str, value: list[dict]) -> None:
        try:
            self._store.set(key, value)
        except StorageError as e:
            self._activity.log_storage_error("set", key, e)
            raise

    # -------------------------------------------------------------------------
    # Derived views (recomputed on every access)
    # -------------------------------------------------------------------------

    @property
    def monthly_groups(self) -> list[MonthlyGroup]:
        return group_by_month(self._expenses)

    @property
    def budget_insights(self) -> list[BudgetInsight]:
        return compute_budget_insights(self._budgets, self._expenses)

    @property
    def summary(self) -> SpendingSummary:
        return compute_summary(self._expenses, self._budgets)

    def filtered_expenses(
        self,
        search_term: str = "",
        category_filter: CategoryFilter = ALL_CATEGORIES,
        sort_key: SortKey = SortKey.DATE,
        sort_direction: SortDirection = SortDirection.DESC,
        expenses: Optional[Iterable[Expense]] = None,
    ) -> list[Expense]:
        """
        The expense table's rows.

        Args:
            expenses: Rows to start from (e.g. one month's group).
                      Defaults to every expense.
        """
        return filter_and_sort_expenses(
            self._expenses if expenses is None else expenses,
            search_term=search_term,
            category_filter=category_filter,
            sort_key=sort_key,
            sort_direction=sort_direction,
        )
