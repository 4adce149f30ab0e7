"""Formatting utilities for currency and relative time display."""

from datetime import datetime
from decimal import Decimal
from typing import Union


def format_inr(amount: Union[Decimal, float, int]) -> str:
    """Format a rupee amount with thousands separators.

    Paise are only shown when the amount is not a whole number.

    Example:
        >>> format_inr(Decimal("9500"))
        '₹9,500'
        >>> format_inr(1234.5)
        '₹1,234.50'
        >>> format_inr(-200)
        '-₹200'
    """
    value = Decimal(str(amount))
    sign = "-" if value < 0 else ""
    value = abs(value)
    if value == value.to_integral_value():
        return f"{sign}₹{int(value):,}"
    return f"{sign}₹{value:,.2f}"


def relative_time_label(timestamp: datetime, now: datetime) -> str:
    """Short human label for how long ago something happened.

    Example:
        "Just now", "5m ago", "3h ago", "Yesterday", "4d ago", "12/03/2025"
    """
    diff_seconds = (now - timestamp).total_seconds()
    diff_mins = int(diff_seconds // 60)
    diff_hours = diff_mins // 60
    diff_days = diff_hours // 24

    if diff_mins < 1:
        return "Just now"
    if diff_mins < 60:
        return f"{diff_mins}m ago"
    if diff_hours < 24:
        return f"{diff_hours}h ago"
    if diff_days == 1:
        return "Yesterday"
    if diff_days < 7:
        return f"{diff_days}d ago"
    return timestamp.strftime("%d/%m/%Y")
