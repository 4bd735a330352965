from __future__ import annotations

from datetime import date, timedelta

_SATURDAY = 5


def is_working_day(day: date) -> bool:
    """Monday through Friday. There is no holiday calendar."""
    return day.weekday() < _SATURDAY


def count_working_days(start_date: date, end_date: date) -> int:
    """Count working days from start_date to end_date, both inclusive.

    Returns 0 when end_date is before start_date.
    """
    total = 0
    current_date = start_date
    one_day = timedelta(days=1)

    while current_date <= end_date:
        if is_working_day(current_date):
            total += 1
        current_date += one_day

    return total


def count_calendar_days(start_date: date, end_date: date) -> int:
    """Count calendar days from start_date to end_date, both inclusive. 0 when reversed."""
    return max(0, (end_date - start_date).days + 1)
