"""
Spending Aggregation

Everything the dashboard shows is derived here from two lists:
the logged expenses and the active budget rules.

DESIGN DECISION: Every function is pure and cheap. Callers recompute
from scratch on each state change instead of keeping derived state
in sync, so there is nothing to invalidate.

Dates that cannot be parsed are never dropped:
- group_by_month puts them in an "undated" group that sorts last
- date sorting puts them after every dated expense, in either direction
"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from expense_tracker.models.expense import (
    BudgetInsight,
    BudgetRule,
    Expense,
    ExpenseCategory,
    MonthlyGroup,
    SortDirection,
    SortKey,
    SortState,
    SpendingSummary,
)


ZERO = Decimal("0")

# Month key for expenses whose date is not a valid ISO date.
# Empty string sorts below every YYYY-MM key, so the group lands last.
UNDATED_MONTH_KEY = ""

# Category filter value meaning "do not filter".
ALL_CATEGORIES = "All"

CategoryFilter = Union[ExpenseCategory, str, None]


def month_key(expense: Expense) -> str:
    """YYYY-MM for the expense date, or UNDATED_MONTH_KEY."""
    parsed = expense.calendar_date
    if parsed is None:
        return UNDATED_MONTH_KEY
    return f"{parsed.year:04d}-{parsed.month:02d}"


def group_by_month(expenses: Iterable[Expense]) -> list[MonthlyGroup]:
    """
    Partition expenses by year-month, newest month first.

    Every expense lands in exactly one group. Within a group,
    expenses keep the order they were given in.
    """
    groups: dict[str, list[Expense]] = {}
    for expense in expenses:
        groups.setdefault(month_key(expense), []).append(expense)

    return [
        MonthlyGroup(month=key, items=tuple(items))
        for key, items in sorted(groups.items(), key=lambda kv: kv[0], reverse=True)
    ]


def month_total(items: Iterable[Expense]) -> Decimal:
    """Sum of amounts, as shown next to each month heading."""
    return sum((expense.amount for expense in items), ZERO)


def compute_budget_insight(budget: BudgetRule, expenses: Iterable[Expense]) -> BudgetInsight:
    """
    Measure spending in one category against its limit.

    remaining never goes below zero, and utilization is clamped to
    [0, 1]. A zero limit always reports zero utilization.
    """
    spent = sum(
        (expense.amount for expense in expenses if expense.category == budget.category),
        ZERO,
    )
    limit = budget.monthly_limit
    remaining = max(limit - spent, ZERO)

    if limit:
        utilization = min(max(float(spent / limit), 0.0), 1.0)
    else:
        utilization = 0.0

    return BudgetInsight(
        category=budget.category,
        monthly_limit=limit,
        spent=spent,
        remaining=remaining,
        utilization=utilization,
    )


def compute_budget_insights(
    budgets: Iterable[BudgetRule],
    expenses: Sequence[Expense],
) -> list[BudgetInsight]:
    """One insight per budget rule, in rule order."""
    return [compute_budget_insight(budget, expenses) for budget in budgets]


def compute_summary(
    expenses: Sequence[Expense],
    budgets: Sequence[BudgetRule],
) -> SpendingSummary:
    """
    Headline totals for the summary cards.

    The largest expense is the first one with the highest amount;
    later expenses with an equal amount do not replace it.
    """
    total_spent = ZERO
    largest: Optional[Expense] = None
    for expense in expenses:
        total_spent += expense.amount
        if largest is None or expense.amount > largest.amount:
            largest = expense

    insights = compute_budget_insights(budgets, expenses)

    return SpendingSummary(
        total_spent=total_spent,
        largest_expense=largest,
        planned_total=sum((budget.monthly_limit for budget in budgets), ZERO),
        total_remaining=sum((insight.remaining for insight in insights), ZERO),
        expense_count=len(expenses),
        budget_count=len(budgets),
    )


def overall_utilization(summary: SpendingSummary) -> Optional[float]:
    """
    Total spent as a share of the total planned.

    None when nothing is planned. Not clamped: overspending
    shows up as a ratio above 1.
    """
    if not summary.planned_total:
        return None
    return float(summary.total_spent / summary.planned_total)


def available_categories(expenses: Iterable[Expense]) -> list[ExpenseCategory]:
    """Distinct categories present, in first-seen order."""
    return list(dict.fromkeys(expense.category for expense in expenses))


def _matches_category(expense: Expense, category_filter: CategoryFilter) -> bool:
    if category_filter is None or category_filter == ALL_CATEGORIES:
        return True
    return expense.category == category_filter


def _matches_search(expense: Expense, needle: str) -> bool:
    if not needle:
        return True
    return needle in expense.name.casefold() or needle in (expense.notes or "").casefold()


def _sort(
    expenses: list[Expense],
    sort_key: SortKey,
    descending: bool,
) -> list[Expense]:
    if sort_key == SortKey.AMOUNT:
        return sorted(expenses, key=lambda e: e.amount, reverse=descending)

    if sort_key == SortKey.NAME:
        return sorted(expenses, key=lambda e: e.name.casefold(), reverse=descending)

    # Undated expenses always trail, whatever the direction.
    dated = [e for e in expenses if e.calendar_date is not None]
    undated = [e for e in expenses if e.calendar_date is None]
    return sorted(dated, key=lambda e: e.calendar_date, reverse=descending) + undated


def filter_and_sort_expenses(
    expenses: Iterable[Expense],
    search_term: str = "",
    category_filter: CategoryFilter = ALL_CATEGORIES,
    sort_key: SortKey = SortKey.DATE,
    sort_direction: SortDirection = SortDirection.DESC,
) -> list[Expense]:
    """
    Apply the expense table's filters, then sort.

    Args:
        expenses: Expenses to filter
        search_term: Case-insensitive substring matched against name or notes.
                     Surrounding whitespace is ignored; empty matches all.
        category_filter: Category to keep, or ALL_CATEGORIES / None for all
        sort_key: date (calendar order), amount (numeric) or name
        sort_direction: asc or desc

    Returns:
        A new list. The sort is stable, so applying this twice with the
        same arguments gives the same result as applying it once.
    """
    needle = (search_term or "").strip().casefold()
    kept = [
        expense
        for expense in expenses
        if _matches_category(expense, category_filter) and _matches_search(expense, needle)
    ]
    return _sort(kept, SortKey(sort_key), SortDirection(sort_direction) == SortDirection.DESC)


def toggle_sort(state: SortState, key: SortKey) -> SortState:
    """Clicking the active column flips direction; a new column starts descending."""
    if state.key == key:
        flipped = SortDirection.ASC if state.direction == SortDirection.DESC else SortDirection.DESC
        return SortState(key=key, direction=flipped)
    return SortState(key=key, direction=SortDirection.DESC)
