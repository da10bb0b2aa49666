"""Manager dashboard command."""

import datetime as dt
import uuid
from typing import Optional

import click
import pandas as pd

from timesheet_engine.aggregators.dashboard import ManagerDashboard
from timesheet_engine.calculators.date_utils import month_bounds
from timesheet_engine.cli.error_handlers import with_error_handling
from timesheet_engine.cli.utils.formatters import format_info, format_table
from timesheet_engine.cli.utils.options import DATE, as_date, data_file_option, debug_options
from timesheet_engine.cli.utils.session import (
    UUID,
    load_policy,
    load_settings,
    repository_session,
    setup_logging,
)


def _runs_label(runs) -> str:
    return ", ".join(
        run[0].isoformat() if len(run) == 1 else f"{run[0].isoformat()} - {run[-1].isoformat()}"
        for run in runs
    )


@click.command(name="dashboard")
@click.option("--manager", "manager_id", type=UUID, required=True, help="Manager id")
@click.option("--start", type=DATE, default=None, help="Utilization start (default: month start)")
@click.option("--end", type=DATE, default=None, help="Utilization end (default: month end)")
@data_file_option
@debug_options
def show_dashboard(
    manager_id: uuid.UUID,
    start: Optional[dt.datetime],
    end: Optional[dt.datetime],
    data_file: Optional[str],
    verbose: bool,
    debug: bool,
):
    """Show pending requests and project utilization for a manager."""
    with with_error_handling(debug):
        settings = load_settings()
        setup_logging(settings, verbose)

        month_start, month_end = month_bounds(dt.date.today())
        start_date = as_date(start) or month_start
        end_date = as_date(end) or month_end

        with repository_session(settings, data_file, persist=False) as repository:
            dashboard = ManagerDashboard(
                repository, week_starts_on=load_policy(settings).week_starts_on
            )
            requests = dashboard.get_dashboard_requests(manager_id)
            utilization = dashboard.project_utilization(manager_id, start_date, end_date)
            weekly = dashboard.approved_weekly_hours(manager_id, start_date, end_date)

        click.echo("Pending requests")
        if requests:
            rows = [
                [
                    str(request.user_id),
                    request.number_of_days,
                    request.total_hours,
                    _runs_label(request.requested_for_dates),
                ]
                for request in requests
            ]
            click.echo(format_table(["User", "Days", "Hours", "Dates"], rows, max_width=60))
        else:
            click.echo(format_info("No pending requests"))

        click.echo()
        click.echo(f"Project utilization {start_date.isoformat()} to {end_date.isoformat()}")
        if utilization.empty:
            click.echo(format_info("No projects"))
            return
        rows = [
            [
                row.title,
                row.planned_hours,
                row.utilized_hours,
                row.remaining_hours,
                "-" if pd.isna(row.utilization_pct) else f"{row.utilization_pct:.1f}%",
            ]
            for row in utilization.itertuples(index=False)
        ]
        click.echo(format_table(["Project", "Planned", "Approved", "Remaining", "Used"], rows))

        if not weekly.empty:
            click.echo()
            click.echo("Approved hours per week")
            rows = [[str(user_id)] + list(hours) for user_id, hours in weekly.iterrows()]
            click.echo(format_table(["User"] + list(weekly.columns), rows))
