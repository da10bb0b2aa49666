"""Freeze-date window calculations.

Timesheets close month by month. Until the configured freeze day of the
current month, the previous month is still open; from the freeze day on,
only the current month can be filled. Dates outside the open window are
frozen and cannot be saved, submitted or receive duplicated efforts.
"""

import datetime as dt
import logging
from typing import Iterable, Set, Tuple

from timesheet_engine.calculators.date_utils import (
    DateLike,
    as_calendar_date,
    days_in_month,
    first_of_previous_month,
    month_bounds,
)

logger = logging.getLogger(__name__)

# Widest UTC offsets in use (UTC-12:00 .. UTC+14:00).
_MIN_UTC_OFFSET = dt.timedelta(hours=-12)
_MAX_UTC_OFFSET = dt.timedelta(hours=14)


def effective_freeze_day(reference_date: DateLike, freeze_day_of_month: int) -> int:
    """Clamp the configured freeze day to the length of the reference month.

    Example:
        >>> effective_freeze_day(dt.date(2023, 2, 10), 30)
        28
    """
    reference = as_calendar_date(reference_date)
    return min(freeze_day_of_month, days_in_month(reference.year, reference.month))


def open_window(reference_date: DateLike, freeze_day_of_month: int) -> Tuple[dt.date, dt.date]:
    """Inclusive range of dates that are not yet frozen.

    Reaching the freeze day counts as frozen: on the freeze day itself the
    previous month is already closed.

    Args:
        reference_date: The caller's current date (date or offset datetime)
        freeze_day_of_month: Configured freeze day (clamped to month length)

    Returns:
        (first open date, last open date)

    Example:
        >>> open_window(dt.date(2024, 3, 11), 12)
        (datetime.date(2024, 2, 1), datetime.date(2024, 3, 31))
        >>> open_window(dt.date(2024, 3, 12), 12)
        (datetime.date(2024, 3, 1), datetime.date(2024, 3, 31))
    """
    reference = as_calendar_date(reference_date)
    month_start, month_end = month_bounds(reference)

    if reference.day >= effective_freeze_day(reference, freeze_day_of_month):
        return month_start, month_end
    return first_of_previous_month(reference), month_end


def not_yet_frozen_dates(
    candidate_dates: Iterable[dt.date],
    reference_date: DateLike,
    freeze_day_of_month: int,
) -> Set[dt.date]:
    """Filter candidate dates down to those that can still be changed.

    Args:
        candidate_dates: Dates the caller wants to act on
        reference_date: The caller's current date (date or offset datetime)
        freeze_day_of_month: Configured freeze day

    Returns:
        The subset of candidate dates inside the open window

    Example:
        >>> sorted(not_yet_frozen_dates(
        ...     [dt.date(2024, 2, 20), dt.date(2024, 3, 5)], dt.date(2024, 3, 15), 12
        ... ))
        [datetime.date(2024, 3, 5)]
    """
    first_open, last_open = open_window(reference_date, freeze_day_of_month)
    candidates = {as_calendar_date(date) for date in candidate_dates}
    open_dates = {date for date in candidates if first_open <= date <= last_open}

    frozen_count = len(candidates) - len(open_dates)
    if frozen_count:
        logger.debug(
            f"{frozen_count} of {len(candidates)} dates are frozen "
            f"(open window {first_open} to {last_open})"
        )
    return open_dates


def is_client_current_date_valid(client_current_date: DateLike, utc_now: dt.datetime) -> bool:
    """Check that a client-reported "today" is plausible.

    The client date must fall between the UTC calendar dates at the
    extreme offsets UTC-12 and UTC+14.

    Example:
        >>> now = dt.datetime(2024, 3, 10, 20, 0)
        >>> is_client_current_date_valid(dt.date(2024, 3, 11), now)
        True
        >>> is_client_current_date_valid(dt.date(2024, 3, 12), now)
        False
    """
    client_date = as_calendar_date(client_current_date)
    if utc_now.tzinfo is not None:
        utc_now = utc_now.astimezone(dt.timezone.utc).replace(tzinfo=None)
    earliest = (utc_now + _MIN_UTC_OFFSET).date()
    latest = (utc_now + _MAX_UTC_OFFSET).date()
    return earliest <= client_date <= latest
