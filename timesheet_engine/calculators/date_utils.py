"""Date utilities for the timesheet engine.

This module provides low-level calendar helpers:
- Normalizing dates and offset-aware datetimes to calendar dates
- Month boundaries with correct month lengths
- Week boundaries for a configurable first day of the week
- Partitioning sorted items into contiguous date runs
"""

import calendar
import datetime as dt
from typing import Callable, Iterable, List, Tuple, TypeVar, Union

T = TypeVar("T")

DateLike = Union[dt.date, dt.datetime]


def as_calendar_date(value: DateLike) -> dt.date:
    """Return the calendar date of ``value``.

    An offset-aware datetime keeps its own offset, so a client's local
    "today" stays the client's today.

    Example:
        >>> as_calendar_date(dt.datetime(2024, 3, 1, 23, 30))
        datetime.date(2024, 3, 1)
    """
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month.

    Example:
        >>> days_in_month(2024, 2)
        29
    """
    return calendar.monthrange(year, month)[1]


def month_bounds(date: dt.date) -> Tuple[dt.date, dt.date]:
    """First and last date of the month containing ``date``.

    Example:
        >>> month_bounds(dt.date(2023, 2, 14))
        (datetime.date(2023, 2, 1), datetime.date(2023, 2, 28))
    """
    first = date.replace(day=1)
    last = date.replace(day=days_in_month(date.year, date.month))
    return first, last


def first_of_previous_month(date: dt.date) -> dt.date:
    """First date of the month before the one containing ``date``.

    Example:
        >>> first_of_previous_month(dt.date(2024, 1, 20))
        datetime.date(2023, 12, 1)
    """
    return (date.replace(day=1) - dt.timedelta(days=1)).replace(day=1)


def week_bounds(date: dt.date, week_starts_on: int = calendar.SUNDAY) -> Tuple[dt.date, dt.date]:
    """First and last date of the week containing ``date``.

    Args:
        date: Any date in the week
        week_starts_on: First day of the week as ``date.weekday()`` value
            (Monday is 0, Sunday is 6)

    Returns:
        Inclusive (start, end) of the seven-day week

    Example:
        >>> week_bounds(dt.date(2024, 3, 6))  # a Wednesday
        (datetime.date(2024, 3, 3), datetime.date(2024, 3, 9))
    """
    offset = (date.weekday() - week_starts_on) % 7
    start = date - dt.timedelta(days=offset)
    return start, start + dt.timedelta(days=6)


def date_range(start: dt.date, end: dt.date) -> List[dt.date]:
    """Every date from ``start`` to ``end`` inclusive (empty if inverted)."""
    return [start + dt.timedelta(days=i) for i in range((end - start).days + 1)]


def group_into_date_runs(items: Iterable[T], key: Callable[[T], dt.date]) -> List[List[T]]:
    """Partition items into runs of consecutive dates.

    Items are sorted by ``key``. An item continues the current run when its
    date equals the previous item's date or follows it by exactly one day;
    any larger gap starts a new run.

    Args:
        items: Items to partition
        key: Function returning the date of an item

    Returns:
        List of runs, each a non-empty list of items in date order

    Example:
        >>> days = [dt.date(2024, 1, d) for d in (1, 2, 4, 6, 7, 8)]
        >>> [[d.day for d in run] for run in group_into_date_runs(days, lambda d: d)]
        [[1, 2], [4], [6, 7, 8]]
    """
    runs: List[List[T]] = []
    for item in sorted(items, key=key):
        if runs and (key(item) - key(runs[-1][-1])).days <= 1:
            runs[-1].append(item)
        else:
            runs.append([item])
    return runs
