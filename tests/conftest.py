"""Shared fixtures. No test touches the real data file or the network."""

import pytest

from expense_tracker.config import ValidationSettings
from expense_tracker.services.storage import InMemoryStore
from expense_tracker.tracker import ExpenseTracker
from expense_tracker.validation import ExpenseValidator


@pytest.fixture
def validation_settings():
    return ValidationSettings(max_expense_amount=1000.0, future_date_tolerance_days=7)


@pytest.fixture
def validator(validation_settings):
    return ExpenseValidator(validation_settings)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def tracker(store, validator):
    return ExpenseTracker(
        store,
        validator=validator,
        expenses_key="expenses",
        budgets_key="budgets",
    )
