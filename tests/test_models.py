"""
Tests for Expense Tracker models

Test strategy:
1. Unit tests for individual components (models, validator, aggregation)
2. Tracker tests against an in-memory store
3. File store tests against pytest's tmp_path
"""

import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from expense_tracker.models.expense import (
    BudgetInsight,
    BudgetRule,
    Expense,
    ExpenseCategory,
    ExpenseInput,
    MonthlyGroup,
    SortDirection,
    SortKey,
    SortState,
    ValidationIssue,
    ValidationResult,
)

from factories import make_expense


class TestExpenseModel:
    """Tests for the Expense record."""

    def test_expense_creation(self):
        """Test Expense model creation."""
        expense = make_expense(name="Weekly shop", amount="54.20", category=ExpenseCategory.GROCERIES)
        assert expense.name == "Weekly shop"
        assert expense.amount == Decimal("54.20")
        assert expense.category == ExpenseCategory.GROCERIES
        assert expense.id

    def test_expense_ids_are_unique(self):
        """Test that generated ids differ."""
        assert make_expense().id != make_expense().id

    def test_expense_strips_whitespace(self):
        """Test that whitespace is stripped from the name."""
        expense = make_expense(name="  Rent  ")
        assert expense.name == "Rent"

    def test_expense_rejects_zero_amount(self):
        """Test that non-positive amounts are rejected."""
        with pytest.raises(ValidationError):
            make_expense(amount="0")

    def test_expense_rejects_negative_amount(self):
        with pytest.raises(ValidationError):
            make_expense(amount="-5")

    def test_expense_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            make_expense(name="   ")

    def test_expense_rejects_unknown_category(self):
        with pytest.raises(ValidationError):
            Expense(name="x", amount=Decimal("1"), category="Gambling", date="2024-01-01")

    @pytest.mark.parametrize("amount", ["1e400", "12345678901234567.89"])
    def test_expense_rejects_unstorable_amount(self, amount):
        """Amounts that would change when written as a JSON number are refused."""
        with pytest.raises(ValidationError):
            make_expense(amount=amount)

    def test_expense_is_immutable(self):
        """Test that a stored expense cannot be edited in place."""
        expense = make_expense()
        with pytest.raises(ValidationError):
            expense.amount = Decimal("99")

    def test_calendar_date_parses_iso(self):
        assert make_expense(date="2024-02-29").calendar_date == date(2024, 2, 29)

    def test_calendar_date_reads_leading_day_of_timestamp(self):
        assert make_expense(date="2024-05-15T10:00:00").calendar_date == date(2024, 5, 15)

    def test_calendar_date_none_for_malformed(self):
        """Malformed stored dates are kept but parse to None."""
        expense = make_expense(date="sometime last week")
        assert expense.date == "sometime last week"
        assert expense.calendar_date is None

    def test_to_storage_shape(self):
        """Test the JSON shape written to the store."""
        expense = make_expense(name="Bus", amount="2.50", category=ExpenseCategory.TRANSPORT,
                               date="2024-03-01", notes="to work", id="abc")
        assert expense.to_storage() == {
            "id": "abc",
            "name": "Bus",
            "amount": 2.5,
            "category": "Transport",
            "date": "2024-03-01",
            "notes": "to work",
        }

    def test_loads_stored_shape(self):
        """Test that a stored record validates back into an Expense."""
        expense = Expense.model_validate({
            "id": "abc",
            "name": "Bus",
            "amount": 2.5,
            "category": "Transport",
            "date": "2024-03-01",
            "notes": "",
        })
        assert expense.amount == Decimal("2.5")
        assert expense.category == ExpenseCategory.TRANSPORT


class TestBudgetRuleModel:
    """Tests for BudgetRule."""

    def test_budget_rule_defaults_to_zero(self):
        rule = BudgetRule(category=ExpenseCategory.HOUSING)
        assert rule.monthly_limit == Decimal("0")

    def test_budget_rule_rejects_negative_limit(self):
        with pytest.raises(ValidationError):
            BudgetRule(category=ExpenseCategory.HOUSING, monthly_limit=Decimal("-1"))

    def test_budget_rule_camel_case_storage(self):
        """Test that the limit is stored as monthlyLimit."""
        rule = BudgetRule(category=ExpenseCategory.GROCERIES, monthly_limit=Decimal("250"))
        assert rule.to_storage() == {"category": "Groceries", "monthlyLimit": 250.0}

    def test_budget_rule_accepts_both_key_styles(self):
        camel = BudgetRule.model_validate({"category": "Groceries", "monthlyLimit": 100})
        snake = BudgetRule.model_validate({"category": "Groceries", "monthly_limit": 100})
        assert camel == snake


class TestDerivedModels:
    """Tests for the derived view models."""

    def test_budget_insight_rejects_out_of_range_utilization(self):
        with pytest.raises(ValidationError):
            BudgetInsight(
                category=ExpenseCategory.DINING,
                monthly_limit=Decimal("10"),
                spent=Decimal("20"),
                remaining=Decimal("0"),
                utilization=2.0,
            )

    def test_monthly_group_undated(self):
        assert MonthlyGroup(month="").is_undated is True
        assert MonthlyGroup(month="2024-05").is_undated is False

    def test_sort_state_defaults_to_date_descending(self):
        state = SortState()
        assert state.key == SortKey.DATE
        assert state.direction == SortDirection.DESC

    def test_expense_input_defaults(self):
        form = ExpenseInput()
        assert form.category == "Other"
        assert form.date == date.today().isoformat()


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.warnings == []

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date in future",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.warnings == ["Date in future"]

    def test_validation_issue_rejects_unknown_severity(self):
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


class TestExpenseCategories:
    """Tests for the category enum."""

    def test_all_categories_exist_in_display_order(self):
        expected = [
            "Housing", "Utilities", "Groceries", "Transport", "Health",
            "Entertainment", "Dining", "Shopping", "Savings", "Other",
        ]
        assert [c.value for c in ExpenseCategory] == expected

    def test_category_compares_equal_to_label(self):
        assert ExpenseCategory.GROCERIES == "Groceries"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
