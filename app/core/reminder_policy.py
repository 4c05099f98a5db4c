"""Which days of the month the reminder sweeps run."""
from datetime import date

CURRENT_MONTH_FIXED_DAYS = (5, 10, 20)
PREV_MONTH_DAYS = (1, 2)


def is_current_month_reminder_day(today: date) -> bool:
    """5th, 10th and 20th, then every second day after the 20th (22, 24, ...)."""
    day = today.day
    if day in CURRENT_MONTH_FIXED_DAYS:
        return True
    return day > 20 and (day - 20) % 2 == 0


def is_prev_month_reminder_day(today: date) -> bool:
    """Catch-up window for last month's unpaid records: 1st and 2nd only."""
    return today.day in PREV_MONTH_DAYS
