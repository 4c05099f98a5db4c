"""Tests for the daily cron timing."""

from datetime import datetime

import pytest

from app.core.cron_runner import next_run_time

pytestmark = pytest.mark.unit


def test_later_today():
    assert next_run_time(datetime(2024, 3, 14, 7, 30), 9) == datetime(2024, 3, 14, 9, 0)


def test_after_slot_rolls_to_tomorrow():
    assert next_run_time(datetime(2024, 3, 14, 10, 0), 9) == datetime(2024, 3, 15, 9, 0)


def test_exactly_at_slot_rolls_to_tomorrow():
    assert next_run_time(datetime(2024, 3, 14, 9, 0), 9) == datetime(2024, 3, 15, 9, 0)


def test_month_and_year_boundaries():
    assert next_run_time(datetime(2024, 2, 29, 23, 0), 9) == datetime(2024, 3, 1, 9, 0)
    assert next_run_time(datetime(2024, 12, 31, 12, 0), 9, 15) == datetime(2025, 1, 1, 9, 15)
