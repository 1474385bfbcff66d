"""
Expense Form Validation

DESIGN DECISION: Validation reports, it never repairs.
The form hands over raw values; the validator returns every issue it
finds so the UI can show them all at once.

ERRORS (block submission):
- Blank name
- Missing, non-numeric or non-positive amount, or one too large or
  too precise to store as a JSON number
- Category outside the fixed set
- Missing or malformed date

WARNINGS (shown, do not block):
- Unusually large amount
- Date too far in the future

Budget limits are the one place where input is coerced instead of
reported: anything that is not a non-negative number becomes 0.
"""

import math
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from expense_tracker.config import ValidationSettings, get_settings
from expense_tracker.models.expense import (
    ExpenseCategory,
    ExpenseInput,
    ValidationIssue,
    ValidationResult,
    survives_json_number,
)


# Match the field limits on the Expense model.
MAX_NAME_LENGTH = 200
MAX_NOTES_LENGTH = 1000


def parse_amount(raw: Any) -> Optional[Decimal]:
    """
    Parse a user-entered amount.

    Returns None for anything that is not a finite number.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float) and not math.isfinite(raw):
        return None
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def parse_date(raw: Any) -> Optional[date]:
    """Accept a date, a datetime, or an ISO YYYY-MM-DD string."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            return None
    return None


def parse_category(raw: Any) -> Optional[ExpenseCategory]:
    if isinstance(raw, ExpenseCategory):
        return raw
    try:
        return ExpenseCategory(raw)
    except ValueError:
        return None


def coerce_limit(raw: Any) -> Decimal:
    """
    Coerce a budget limit from the editor.

    Non-numeric, non-finite, negative and unstorable input all become 0.
    """
    value = parse_amount(raw)
    if value is None or value < 0 or not survives_json_number(value):
        return Decimal("0")
    return value


class ExpenseValidator:
    """Validates expense form input before anything is stored."""

    def __init__(self, settings: Optional[ValidationSettings] = None):
        """
        Initialize validator.

        Args:
            settings: Thresholds to check against.
                      Defaults to the configured validation settings.
        """
        self._settings = settings or get_settings().validation

    def validate(
        self,
        form: ExpenseInput,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Check a form submission.

        Args:
            form: Raw values from the expense form
            today: Reference date for the future-date check

        Returns:
            ValidationResult with all issues found
        """
        issues = []
        issues.extend(self._check_name(form))
        issues.extend(self._check_amount(form))
        issues.extend(self._check_category(form))
        issues.extend(self._check_date(form, today or date.today()))
        issues.extend(self._check_notes(form))

        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )

    def _check_name(self, form: ExpenseInput) -> list[ValidationIssue]:
        name = form.name.strip()
        if not name:
            return [ValidationIssue(
                field="name",
                issue_type="missing",
                message="Expense name is required",
                severity="error",
            )]
        if len(name) > MAX_NAME_LENGTH:
            return [ValidationIssue(
                field="name",
                issue_type="too_long",
                message=f"Expense name must be at most {MAX_NAME_LENGTH} characters",
                severity="error",
            )]
        return []

    def _check_notes(self, form: ExpenseInput) -> list[ValidationIssue]:
        if len((form.notes or "").strip()) <= MAX_NOTES_LENGTH:
            return []
        return [ValidationIssue(
            field="notes",
            issue_type="too_long",
            message=f"Notes must be at most {MAX_NOTES_LENGTH} characters",
            severity="error",
        )]

    def _check_amount(self, form: ExpenseInput) -> list[ValidationIssue]:
        if form.amount is None or (isinstance(form.amount, str) and not form.amount.strip()):
            return [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            )]

        amount = parse_amount(form.amount)
        if amount is None:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount '{form.amount}' is not a number",
                severity="error",
            )]

        if amount <= 0:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            )]

        if not survives_json_number(amount):
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount is too large or has too many digits to store",
                severity="error",
            )]

        ceiling = Decimal(str(self._settings.max_expense_amount))
        if amount > ceiling:
            return [ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({amount:,.2f}) seems unusually high",
                severity="warning",
            )]

        return []

    def _check_category(self, form: ExpenseInput) -> list[ValidationIssue]:
        if parse_category(form.category) is not None:
            return []
        return [ValidationIssue(
            field="category",
            issue_type="invalid_value",
            message=f"Unknown category '{form.category}'",
            severity="error",
        )]

    def _check_date(self, form: ExpenseInput, today: date) -> list[ValidationIssue]:
        if form.date is None or (isinstance(form.date, str) and not form.date.strip()):
            return [ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
                severity="error",
            )]

        parsed = parse_date(form.date)
        if parsed is None:
            return [ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date '{form.date}' is not a valid YYYY-MM-DD date",
                severity="error",
            )]

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if parsed > max_future_date:
            return [ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({parsed.isoformat()}) is in the future",
                severity="warning",
            )]

        return []

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Render a result as short lines for the UI."""
        if result.is_valid and not result.warnings:
            return "✅ Looks good."

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please double-check:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
