"""Configuration package."""

from expense_tracker.config.settings import (
    AppSettings,
    Settings,
    StorageSettings,
    ValidationSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "StorageSettings",
    "ValidationSettings",
    "get_settings",
    "validate_all_settings",
]
