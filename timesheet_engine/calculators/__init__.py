"""Calculators module for timesheet date and effort rules.

This module provides pure functions and helpers for:
- Freeze windows (which dates may still be changed)
- Daily and weekly effort limits
- Calendar arithmetic (month and week bounds, contiguous date runs)
"""

from timesheet_engine.calculators.date_utils import (
    as_calendar_date,
    date_range,
    days_in_month,
    group_into_date_runs,
    month_bounds,
    week_bounds,
)
from timesheet_engine.calculators.effort_limits import EffortLimitValidator
from timesheet_engine.calculators.freeze_window import (
    effective_freeze_day,
    is_client_current_date_valid,
    not_yet_frozen_dates,
    open_window,
)

__all__ = [
    "as_calendar_date",
    "date_range",
    "days_in_month",
    "group_into_date_runs",
    "month_bounds",
    "week_bounds",
    "EffortLimitValidator",
    "effective_freeze_day",
    "is_client_current_date_valid",
    "not_yet_frozen_dates",
    "open_window",
]
