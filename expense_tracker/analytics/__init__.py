"""Spending aggregation package."""

from expense_tracker.analytics.aggregation import (
    ALL_CATEGORIES,
    UNDATED_MONTH_KEY,
    available_categories,
    compute_budget_insight,
    compute_budget_insights,
    compute_summary,
    filter_and_sort_expenses,
    group_by_month,
    month_key,
    month_total,
    overall_utilization,
    toggle_sort,
)

__all__ = [
    "ALL_CATEGORIES",
    "UNDATED_MONTH_KEY",
    "available_categories",
    "compute_budget_insight",
    "compute_budget_insights",
    "compute_summary",
    "filter_and_sort_expenses",
    "group_by_month",
    "month_key",
    "month_total",
    "overall_utilization",
    "toggle_sort",
]
