"""Calendar arithmetic shared by the agreement invoicing workflows."""

import calendar
from datetime import date


def add_months_clamped(value: date, months: int) -> date:
    """Advance ``value`` by whole calendar months.

    The day of month is preserved when the target month has it. Otherwise
    the result is the last day of the target month, so 2024-01-31 plus one
    month is 2024-02-29 and plus three months is 2024-04-30.

    Parameters
    ----------
    value : date
        Anchor date.
    months : int
        Number of months to add (may be negative).

    Returns
    -------
    date
        Date in the target month.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    _, last_day = calendar.monthrange(year, month)
    return date(year, month, min(value.day, last_day))


def month_label(value: date) -> str:
    """Return a human label like ``"March 2024"``."""
    return f"{calendar.month_name[value.month]} {value.year}"
