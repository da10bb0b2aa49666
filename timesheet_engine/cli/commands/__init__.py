"""CLI commands."""

from timesheet_engine.cli.commands.approvals import approve_timesheets, reject_timesheets
from timesheet_engine.cli.commands.dashboard import show_dashboard
from timesheet_engine.cli.commands.dates import frozen_dates
from timesheet_engine.cli.commands.timesheets import (
    duplicate_efforts,
    list_timesheets,
    save_timesheet,
    show_calendar,
    submit_timesheets,
)

__all__ = [
    "approve_timesheets",
    "reject_timesheets",
    "show_dashboard",
    "frozen_dates",
    "duplicate_efforts",
    "list_timesheets",
    "save_timesheet",
    "show_calendar",
    "submit_timesheets",
]
