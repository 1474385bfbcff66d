"""
Streamlit Frontend for the Expense Tracker

One dashboard page:
1. Summary cards (total spent, budget utilization, largest expense,
   budgets remaining)
2. Expense form
3. Expenses grouped by month, with search, category filter and sort
4. Budget editor with live spent / remaining / utilization

Every rerun rebuilds the tracker from the local store and recomputes
all numbers from scratch. Budget edits stay in session state until
"Save budgets" is pressed.
"""

from datetime import date

import streamlit as st

from expense_tracker.activity import configure_logging
from expense_tracker.analytics import (
    ALL_CATEGORIES,
    available_categories,
    month_total,
    overall_utilization,
    toggle_sort,
)
from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.formatting import (
    format_currency,
    format_expense_date,
    format_month_label,
    format_percent,
)
from expense_tracker.models import (
    DEFAULT_CATEGORY,
    ExpenseCategory,
    ExpenseInput,
    SortKey,
    SortState,
)
from expense_tracker.services.storage import JsonFileStore, StorageError
from expense_tracker.tracker import (
    DuplicateBudgetError,
    ExpenseTracker,
    InvalidExpenseError,
)


st.set_page_config(
    page_title="Expense Dashboard",
    page_icon="💸",
    layout="wide",
)


@st.cache_resource
def get_store() -> JsonFileStore:
    """Create the local store once per server process."""
    configure_logging(get_settings().app.log_level)
    return JsonFileStore()


def get_tracker() -> ExpenseTracker:
    return ExpenseTracker(get_store())


def main():
    """Main application entry point."""
    st.sidebar.title("💸 Expense Dashboard")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.caption("Local storage only. Your data stays on this machine.")

    if page == "📊 Dashboard":
        render_dashboard(get_tracker())
    else:
        render_settings_page()


def render_dashboard(tracker: ExpenseTracker):
    st.title("Expense Dashboard")
    st.markdown("Add transactions, monitor budgets, and discover spending insights.")

    render_flash_messages()
    render_summary_cards(tracker)
    st.markdown("---")

    form_col, list_col = st.columns([1, 2])
    with form_col:
        render_expense_form(tracker)
    with list_col:
        render_expense_groups(tracker)

    st.markdown("---")
    render_budget_panel(tracker)


def render_summary_cards(tracker: ExpenseTracker):
    summary = tracker.summary
    largest = summary.largest_expense

    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric("Total spent", format_currency(summary.total_spent))
        st.caption(f"{summary.expense_count} expenses logged")

    with col2:
        st.metric("Budget utilization", format_percent(overall_utilization(summary)))
        if summary.planned_total:
            st.caption(f"Of {format_currency(summary.planned_total)} planned")
        else:
            st.caption("Set budgets to track")

    with col3:
        st.metric("Largest expense", format_currency(largest.amount) if largest else "--")
        st.caption(largest.name if largest else "Add expenses to see")

    with col4:
        st.metric("Budgets remaining", format_currency(summary.total_remaining))
        st.caption(f"Across {summary.budget_count} categories")


def render_expense_form(tracker: ExpenseTracker):
    st.subheader("➕ Add expense")

    categories = list(ExpenseCategory)

    with st.form("expense_form", clear_on_submit=True):
        name = st.text_input("Expense name", placeholder="eg. Groceries")
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")
        expense_date = st.date_input("Date", value=date.today())
        category = st.selectbox(
            "Category",
            options=categories,
            index=categories.index(DEFAULT_CATEGORY),
            format_func=lambda c: c.value,
        )
        notes = st.text_input("Notes (optional)", placeholder="Add context")
        submitted = st.form_submit_button("Add expense", type="primary")

    if not submitted:
        return

    form = ExpenseInput(
        name=name,
        amount=amount,
        category=category,
        date=expense_date,
        notes=notes,
    )
    try:
        expense, result = tracker.submit_expense(form)
    except InvalidExpenseError as e:
        st.error(tracker.validator.get_user_friendly_summary(e.result))
        return
    except StorageError as e:
        st.error(f"Could not save: {e}")
        return

    # Shown after the rerun so the summary cards pick up the new expense.
    st.session_state.flash = f"Added {expense.name} ({format_currency(expense.amount)})"
    if result.warnings:
        st.session_state.flash_warning = tracker.validator.get_user_friendly_summary(result)
    st.rerun()


def render_flash_messages():
    if "flash" in st.session_state:
        st.success(st.session_state.pop("flash"))
    if "flash_warning" in st.session_state:
        st.warning(st.session_state.pop("flash_warning"))


def render_expense_filters(tracker: ExpenseTracker):
    """Search box, category filter and sort buttons shared by every month."""
    if "sort_state" not in st.session_state:
        st.session_state.sort_state = SortState()

    search_col, filter_col = st.columns([2, 1])
    with search_col:
        search_term = st.text_input("Search expenses", placeholder="Search expenses")
    with filter_col:
        options = [ALL_CATEGORIES] + [c.value for c in available_categories(tracker.expenses)]
        category_filter = st.selectbox(
            "Category",
            options=options,
            format_func=lambda c: "All categories" if c == ALL_CATEGORIES else c,
        )

    sort_state: SortState = st.session_state.sort_state
    sort_cols = st.columns(len(SortKey))
    for col, key in zip(sort_cols, SortKey):
        arrow = ""
        if sort_state.key == key:
            arrow = " ↑" if sort_state.direction.value == "asc" else " ↓"
        with col:
            if st.button(f"{key.value.title()}{arrow}", key=f"sort_{key.value}"):
                st.session_state.sort_state = toggle_sort(sort_state, key)
                st.rerun()

    return search_term, category_filter, st.session_state.sort_state


def render_expense_groups(tracker: ExpenseTracker):
    groups = tracker.monthly_groups
    if not groups:
        st.info("Start adding expenses to see your spending history.")
        return

    search_term, category_filter, sort_state = render_expense_filters(tracker)

    for group in groups:
        header_col, total_col = st.columns([3, 1])
        with header_col:
            st.subheader(format_month_label(group.month))
        with total_col:
            st.caption(f"Total: {format_currency(month_total(group.items))}")

        rows = tracker.filtered_expenses(
            search_term=search_term,
            category_filter=category_filter,
            sort_key=sort_state.key,
            sort_direction=sort_state.direction,
            expenses=group.items,
        )

        if not rows:
            st.caption("No expenses match your filters yet.")
            continue

        for expense in rows:
            date_col, name_col, cat_col, amount_col, action_col = st.columns([2, 3, 2, 2, 1])
            date_col.write(format_expense_date(expense.date))
            name_col.write(f"**{expense.name}**")
            if expense.notes:
                name_col.caption(expense.notes)
            cat_col.write(expense.category.value)
            amount_col.write(format_currency(expense.amount))
            if action_col.button("🗑️", key=f"delete_{expense.id}", help="Delete"):
                try:
                    tracker.remove_expense(expense.id)
                except StorageError as e:
                    st.error(f"Could not delete: {e}")
                else:
                    st.rerun()


def render_budget_panel(tracker: ExpenseTracker):
    st.subheader("📊 Budgets")
    st.caption("Set monthly limits and monitor progress")

    if "budget_draft" not in st.session_state:
        st.session_state.budget_draft = tracker.new_budget_draft()
    draft = st.session_state.budget_draft

    if st.button("➕ Add budget", disabled=not draft.can_add):
        draft.add()
        st.rerun()

    insights = draft.insights(tracker.expenses)
    if not insights:
        st.caption("Add a budget to begin tracking goals.")

    for insight in insights:
        category = insight.category
        with st.container(border=True):
            title_col, remove_col = st.columns([5, 1])
            title_col.markdown(f"**{category.value}**")
            if remove_col.button("Remove", key=f"remove_budget_{category.value}"):
                draft.remove(category)
                st.rerun()

            limit_col, stats_col = st.columns(2)
            with limit_col:
                new_limit = st.number_input(
                    "Monthly limit",
                    min_value=0.0,
                    step=0.01,
                    value=float(insight.monthly_limit),
                    key=f"limit_{category.value}",
                )
                if new_limit != float(insight.monthly_limit):
                    draft.update(category, new_limit)
                    st.rerun()
            with stats_col:
                spent_col, remaining_col = st.columns(2)
                spent_col.metric("Spent", format_currency(insight.spent))
                remaining_col.metric("Remaining", format_currency(insight.remaining))
                st.progress(insight.utilization, text=f"Utilization {format_percent(insight.utilization)}")

    if st.button("💾 Save budgets", type="primary"):
        try:
            tracker.save_budgets(draft.rules)
        except (DuplicateBudgetError, StorageError) as e:
            st.error(f"Could not save budgets: {e}")
        else:
            st.success("Budgets saved")


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Storage", "storage"),
        ("Validation", "validation"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if status.get("storage"):
        st.markdown(f"**Data file:** `{get_settings().storage.path}`")

    st.markdown("---")
    st.markdown(
        "Settings are read from environment variables or a `.env` file, "
        "using the `EXPENSE_TRACKER_` prefix (for example "
        "`EXPENSE_TRACKER_STORAGE_PATH` or `EXPENSE_TRACKER_CURRENCY_SYMBOL`)."
    )


if __name__ == "__main__":
    main()
