"""Display formatting for amounts, months and ratios."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from expense_tracker.config import get_settings


Number = Union[Decimal, float, int]


def format_currency(amount: Number, symbol: Optional[str] = None) -> str:
    """
    Format an amount with thousands separators and two decimals.

    Example:
        >>> format_currency(Decimal("1234.5"), symbol="$")
        '$1,234.50'
    """
    if symbol is None:
        symbol = get_settings().app.currency_symbol
    return f"{symbol}{Decimal(str(amount)):,.2f}"


def format_percent(ratio: Optional[float]) -> str:
    """
    Whole-number percentage, half rounded up; "--" when there is no ratio.

    Example:
        >>> format_percent(0.805)
        '81%'
    """
    if ratio is None:
        return "--"
    percent = (Decimal(str(ratio)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{percent}%"


def format_month_label(month: str) -> str:
    """
    Heading for a month group.

    Example:
        >>> format_month_label("2024-05")
        'May 2024'
        >>> format_month_label("")
        'Undated'
    """
    try:
        year, month_number = (int(part) for part in month.split("-"))
        return date(year, month_number, 1).strftime("%B %Y")
    except ValueError:
        return "Undated"


def format_expense_date(value: str) -> str:
    """Readable date for the table; malformed dates are shown as stored."""
    try:
        return date.fromisoformat(value).strftime("%d %b %Y")
    except ValueError:
        return value
