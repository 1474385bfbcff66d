"""Tests for expense form validation and limit coercion."""

from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.models.expense import ExpenseCategory, ExpenseInput
from expense_tracker.validation import (
    coerce_limit,
    parse_amount,
    parse_category,
    parse_date,
)


TODAY = date(2024, 6, 15)


def _form(**overrides):
    fields = dict(
        name="Groceries run",
        amount="42.10",
        category="Groceries",
        date="2024-06-14",
        notes=None,
    )
    fields.update(overrides)
    return ExpenseInput(**fields)


def _error_fields(result):
    return [issue.field for issue in result.issues if issue.severity == "error"]


class TestExpenseValidator:

    def test_valid_form(self, validator):
        result = validator.validate(_form(), today=TODAY)
        assert result.is_valid is True
        assert result.issues == []

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_blocks(self, validator, name):
        result = validator.validate(_form(name=name), today=TODAY)
        assert result.is_valid is False
        assert _error_fields(result) == ["name"]

    def test_overlong_name_blocks(self, validator):
        result = validator.validate(_form(name="x" * 201), today=TODAY)
        assert _error_fields(result) == ["name"]

    @pytest.mark.parametrize("amount", [0, "0", -3, "-0.01"])
    def test_non_positive_amount_blocks(self, validator, amount):
        result = validator.validate(_form(amount=amount), today=TODAY)
        assert result.is_valid is False
        assert result.issues[0].issue_type == "invalid_value"

    @pytest.mark.parametrize("amount", [None, "", "  "])
    def test_missing_amount_blocks(self, validator, amount):
        result = validator.validate(_form(amount=amount), today=TODAY)
        assert result.issues[0].issue_type == "missing"

    @pytest.mark.parametrize("amount", ["abc", "nan", float("inf"), True])
    def test_non_numeric_amount_blocks(self, validator, amount):
        result = validator.validate(_form(amount=amount), today=TODAY)
        assert result.is_valid is False
        assert _error_fields(result) == ["amount"]

    @pytest.mark.parametrize("amount", ["1e400", "12345678901234567.89"])
    def test_unstorable_amount_blocks(self, validator, amount):
        result = validator.validate(_form(amount=amount), today=TODAY)
        assert result.is_valid is False
        assert _error_fields(result) == ["amount"]

    def test_large_amount_only_warns(self, validator):
        result = validator.validate(_form(amount="5000"), today=TODAY)
        assert result.is_valid is True
        assert result.issues[0].issue_type == "suspicious_value"
        assert result.warnings

    def test_unknown_category_blocks(self, validator):
        result = validator.validate(_form(category="Gambling"), today=TODAY)
        assert _error_fields(result) == ["category"]

    def test_category_enum_accepted(self, validator):
        result = validator.validate(_form(category=ExpenseCategory.HEALTH), today=TODAY)
        assert result.is_valid is True

    @pytest.mark.parametrize("bad_date", ["2024-13-01", "15/06/2024", "yesterday"])
    def test_malformed_date_blocks(self, validator, bad_date):
        result = validator.validate(_form(date=bad_date), today=TODAY)
        assert _error_fields(result) == ["date"]
        assert result.issues[0].issue_type == "invalid_format"

    def test_missing_date_blocks(self, validator):
        result = validator.validate(_form(date=None), today=TODAY)
        assert result.issues[0].issue_type == "missing"

    def test_date_object_accepted(self, validator):
        assert validator.validate(_form(date=date(2024, 6, 1)), today=TODAY).is_valid

    def test_future_date_within_tolerance_is_clean(self, validator):
        result = validator.validate(_form(date="2024-06-20"), today=TODAY)
        assert result.issues == []

    def test_future_date_beyond_tolerance_warns(self, validator):
        result = validator.validate(_form(date="2024-07-30"), today=TODAY)
        assert result.is_valid is True
        assert result.issues[0].issue_type == "future_date"

    def test_overlong_notes_block(self, validator):
        result = validator.validate(_form(notes="n" * 1001), today=TODAY)
        assert _error_fields(result) == ["notes"]

    def test_reports_every_error_at_once(self, validator):
        result = validator.validate(
            _form(name="", amount="0", category="Nope", date="bad"),
            today=TODAY,
        )
        assert _error_fields(result) == ["name", "amount", "category", "date"]
        assert result.error_count == 4

    def test_friendly_summary(self, validator):
        ok = validator.validate(_form(), today=TODAY)
        assert validator.get_user_friendly_summary(ok) == "✅ Looks good."

        bad = validator.validate(_form(name=""), today=TODAY)
        summary = validator.get_user_friendly_summary(bad)
        assert "Please fix" in summary
        assert "Expense name is required" in summary


class TestParsers:

    def test_parse_amount(self):
        assert parse_amount("12.30") == Decimal("12.30")
        assert parse_amount(7) == Decimal("7")
        assert parse_amount(0.1) == Decimal("0.1")
        assert parse_amount("1e400x") is None
        assert parse_amount(None) is None

    def test_parse_date(self):
        assert parse_date(" 2024-01-02 ") == date(2024, 1, 2)
        assert parse_date("2024/01/02") is None
        assert parse_date(20240102) is None

    def test_parse_category(self):
        assert parse_category("Savings") == ExpenseCategory.SAVINGS
        assert parse_category("savings") is None


class TestCoerceLimit:

    @pytest.mark.parametrize("raw, expected", [
        ("250", Decimal("250")),
        (99.5, Decimal("99.5")),
        (0, Decimal("0")),
        ("-10", Decimal("0")),
        ("lots", Decimal("0")),
        ("", Decimal("0")),
        (None, Decimal("0")),
        (float("nan"), Decimal("0")),
        ("1e400", Decimal("0")),
        ("12345678901234567.89", Decimal("0")),
    ])
    def test_coerce_limit(self, raw, expected):
        assert coerce_limit(raw) == expected
