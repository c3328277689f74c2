"""Display formatting for salaries."""

from __future__ import annotations

CURRENCY = "₹"


def format_salary(value: int | float) -> str:
    """
    Currency symbol plus thousands grouping.

    format_salary(5000)    → "₹5,000"
    format_salary(1250.5)  → "₹1,250.5"
    """
    if float(value).is_integer():
        return f"{CURRENCY}{int(value):,}"
    return f"{CURRENCY}{round(value, 3):,}"
