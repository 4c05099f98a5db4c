"""
Month helpers and the days-due calculation shown next to unpaid payment records.
Everything here is pure and takes "today" explicitly; nothing is cached or persisted
because the result changes as the calendar advances.
"""
from datetime import date, datetime

from app.models.enums import MONTH_CODES


def month_index(month: str) -> int:
    """0-based index of a month code (JAN=0 .. DEC=11); -1 for anything else."""
    code = (month or "").strip().upper()
    try:
        return MONTH_CODES.index(code)
    except ValueError:
        return -1


def is_valid_month(month: str) -> bool:
    return month_index(month) >= 0


def get_month_year(d: date) -> tuple[str, int]:
    """(month code, year) of the given date."""
    return MONTH_CODES[d.month - 1], d.year


def get_prev_month_year(d: date) -> tuple[str, int]:
    """(month code, year) of the calendar month before the given date; JAN rolls back to DEC of last year."""
    if d.month == 1:
        return MONTH_CODES[11], d.year - 1
    return MONTH_CODES[d.month - 2], d.year


def remaining_months(d: date) -> list[str]:
    """Month codes from d's month through DEC (payment records created at enrollment)."""
    return MONTH_CODES[d.month - 1:]


def due_label(month: str, year: int) -> str:
    """Human readable due label used in reminder messages, e.g. 'MAR 2024'."""
    return f"{month.upper()} {year}"


def calculate_days_due(month: str, today: date) -> int:
    """
    Days of delinquency for an unpaid record of `month`, both dates in today's year.
    past month: full days elapsed since the 1st of that month
    current month: today's day of month
    future month (or unknown code): 0
    """
    target = month_index(month)
    if target < 0:
        return 0
    current = today.month - 1
    if target < current:
        if isinstance(today, datetime):
            first_of_month = datetime(today.year, target + 1, 1, tzinfo=today.tzinfo)
        else:
            first_of_month = date(today.year, target + 1, 1)
        return (today - first_of_month).days
    if target == current:
        return today.day
    return 0
