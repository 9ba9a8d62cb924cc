from __future__ import annotations

from datetime import date, datetime

import pytest

from setstatus.timefmt import format_horizon, format_time

MONDAY = date(2026, 3, 2)


@pytest.mark.parametrize(
    "dt, expected",
    [
        (datetime(2026, 3, 2, 8, 0), "8am"),
        (datetime(2026, 3, 2, 8, 30), "8:30am"),
        (datetime(2026, 3, 2, 0, 0), "12am"),
        (datetime(2026, 3, 2, 12, 0), "12pm"),
        (datetime(2026, 3, 2, 23, 5), "11:05pm"),
    ],
)
def test_format_time(dt, expected):
    assert format_time(dt) == expected


def test_horizon_within_a_week_uses_weekday_name():
    assert format_horizon(datetime(2026, 3, 6, 7, 0), MONDAY) == "Back Friday."


def test_horizon_boundary_is_inclusive_at_seven_days():
    assert format_horizon(datetime(2026, 3, 9, 7, 0), MONDAY) == "Back Monday."
    assert format_horizon(datetime(2026, 3, 10, 7, 0), MONDAY) == "Back 3/10."


def test_horizon_with_time():
    assert format_horizon(datetime(2026, 3, 6, 8, 30), MONDAY, include_time=True) == "Back Friday 8:30am."
    assert format_horizon(datetime(2026, 4, 1, 7, 0), MONDAY, include_time=True) == "Back 4/1 7am."
