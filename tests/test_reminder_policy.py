"""Tests for reminder day rules."""

from datetime import date

import pytest

from app.core.reminder_policy import is_current_month_reminder_day, is_prev_month_reminder_day

pytestmark = pytest.mark.unit


def test_current_month_reminder_days_in_a_31_day_month():
    days = [d for d in range(1, 32) if is_current_month_reminder_day(date(2024, 3, d))]
    assert days == [5, 10, 20, 22, 24, 26, 28, 30]


def test_current_month_reminder_days_in_february_leap_year():
    days = [d for d in range(1, 30) if is_current_month_reminder_day(date(2024, 2, d))]
    assert days == [5, 10, 20, 22, 24, 26, 28]


@pytest.mark.parametrize("day", [1, 2, 15, 21, 23, 31])
def test_not_a_current_month_reminder_day(day):
    assert not is_current_month_reminder_day(date(2024, 3, day))


def test_prev_month_reminder_days():
    days = [d for d in range(1, 32) if is_prev_month_reminder_day(date(2024, 3, d))]
    assert days == [1, 2]


def test_windows_do_not_overlap():
    for d in range(1, 32):
        today = date(2024, 1, d)
        assert not (is_current_month_reminder_day(today) and is_prev_month_reminder_day(today))
