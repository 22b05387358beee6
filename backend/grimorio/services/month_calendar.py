"""
Calendar helpers shared by the monthly shift generation.

Weeks here are NOT ISO weeks: they are consecutive 7-day spans counted
from the first day of the month (1-7, 8-14, 15-21, 22-28, 29-end).
"""

from datetime import date, timedelta
from typing import Iterator, Optional, Tuple

from dateutil.relativedelta import relativedelta

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def month_bounds(year: int, month: int) -> Tuple[date, date, int]:
    """Returns (first day, last day, number of days) of the month."""
    first = date(year, month, 1)
    last = first + relativedelta(months=1) - timedelta(days=1)
    return first, last, last.day


def week_index(target_date: date) -> int:
    return (target_date.day - 1) // 7


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def iter_month_weeks(month_start: date, month_end: date) -> Iterator[Tuple[int, date, date]]:
    """Yields (week index, first day, last day) clipped at month end."""
    index = 0
    week_start = month_start
    while week_start <= month_end:
        week_end = min(week_start + timedelta(days=6), month_end)
        yield index, week_start, week_end
        index += 1
        week_start = week_end + timedelta(days=1)


def generation_start_for(year: int, month: int, today: Optional[date] = None) -> date:
    """
    First date of the month that a generation run may (re)write.

    For the current month only the days after today are regenerated; the
    result can fall after the month end (e.g. generating on the last day),
    callers must check it.
    """
    today = today or date.today()
    month_start, _, _ = month_bounds(year, month)
    if today.year == year and today.month == month:
        return max(today + timedelta(days=1), month_start)
    return month_start


def weekday_name(target_date: date) -> str:
    return WEEKDAY_NAMES[target_date.weekday()]
