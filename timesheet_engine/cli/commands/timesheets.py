"""Commands a user runs on their own timesheet."""

import datetime as dt
import uuid
from typing import Optional, Tuple

import click

from timesheet_engine.cli.error_handlers import ProcessingError, with_error_handling
from timesheet_engine.cli.utils.formatters import (
    format_info,
    format_operation_result,
    format_success,
    format_table,
    format_warning,
    outcome_counts,
)
from timesheet_engine.cli.utils.options import (
    DATE,
    as_date,
    data_file_option,
    debug_options,
    parse_efforts,
)
from timesheet_engine.cli.utils.session import (
    UUID,
    build_service,
    load_settings,
    repository_session,
    setup_logging,
)
from timesheet_engine.models.requests import DailyEffortRequest, DuplicateEffortsRequest
from timesheet_engine.models.results import OperationResult, OperationStatus
from timesheet_engine.models.timesheet import TimesheetStatus


def _report(result: OperationResult, verb: str) -> None:
    """Print an operation result; a rolled back operation is an error."""
    if result.outcomes:
        click.echo(format_operation_result(result))
        click.echo()

    if result.status == OperationStatus.FAILED:
        raise ProcessingError(
            f"{verb.capitalize()} failed and was rolled back: {result.error}",
            recovery_hint="Nothing was written; retry the command",
        )
    if result.status == OperationStatus.NOTHING_TO_DO:
        click.echo(format_warning(f"Nothing to {verb} ({outcome_counts(result)})"))
        return
    click.echo(
        format_success(f"{verb.capitalize()}: {len(result.timesheets)} timesheet(s)")
    )


@click.command(name="calendar")
@click.option("--user", "user_id", type=UUID, required=True, help="User id")
@click.option("--start", type=DATE, required=True, help="First date (YYYY-MM-DD)")
@click.option("--end", type=DATE, required=True, help="Last date (YYYY-MM-DD)")
@data_file_option
@debug_options
def show_calendar(
    user_id: uuid.UUID,
    start: dt.datetime,
    end: dt.datetime,
    data_file: Optional[str],
    verbose: bool,
    debug: bool,
):
    """Show the tasks a user can fill per day, with filled hours."""
    with with_error_handling(debug):
        settings = load_settings()
        setup_logging(settings, verbose)
        with repository_session(settings, data_file, persist=False) as repository:
            days = build_service(repository, settings).get_timesheets(
                user_id, start.date(), end.date()
            )

        rows = [
            [day.date.isoformat(), project.title, task.task_title, task.hours, task.status.name]
            for day in days
            for project in day.projects
            for task in project.tasks
        ]
        if not rows:
            click.echo(format_info("No projects in this date range"))
            return
        click.echo(format_table(["Date", "Project", "Task", "Hours", "Status"], rows))


@click.command(name="list")
@click.option("--user", "user_id", type=UUID, required=True, help="User id")
@click.option(
    "--status",
    type=click.Choice([s.name.lower() for s in TimesheetStatus], case_sensitive=False),
    default="saved",
    help="Status to list (default: saved)",
)
@data_file_option
@debug_options
def list_timesheets(
    user_id: uuid.UUID, status: str, data_file: Optional[str], verbose: bool, debug: bool
):
    """List a user's timesheets in one status, ordered by date."""
    with with_error_handling(debug):
        settings = load_settings()
        setup_logging(settings, verbose)
        with repository_session(settings, data_file, persist=False) as repository:
            entries = build_service(repository, settings).get_timesheets_by_status(
                user_id, TimesheetStatus[status.upper()]
            )

        if not entries:
            click.echo(format_info(f"No {status.lower()} timesheets"))
            return
        rows = [
            [str(e.id), e.date.isoformat(), e.task_title, e.hours, e.manager_comments]
            for e in entries
        ]
        click.echo(format_table(["Id", "Date", "Task", "Hours", "Comment"], rows))


@click.command(name="save")
@click.option("--user", "user_id", type=UUID, required=True, help="User id")
@click.option("--date", "date", type=DATE, required=True, help="Date to fill (YYYY-MM-DD)")
@click.option(
    "--effort",
    "efforts",
    multiple=True,
    required=True,
    help="Hours on a task as TASK_ID:HOURS (repeatable)",
)
@click.option("--client-date", type=DATE, default=None, help="The user's local today")
@data_file_option
@debug_options
def save_timesheet(
    user_id: uuid.UUID,
    date: dt.datetime,
    efforts: Tuple[str, ...],
    client_date: Optional[dt.datetime],
    data_file: Optional[str],
    verbose: bool,
    debug: bool,
):
    """Save hours against tasks for one date.

    Example:
        timesheet-cli save --user <id> --date 2024-03-05 --effort <task>:6
    """
    with with_error_handling(debug):
        settings = load_settings()
        setup_logging(settings, verbose)
        day = DailyEffortRequest(date=date.date(), efforts=parse_efforts(efforts))
        with repository_session(settings, data_file) as repository:
            result = build_service(repository, settings).save_timesheets(
                user_id, [day], as_date(client_date)
            )
            _report(result, "save")


@click.command(name="submit")
@click.option("--user", "user_id", type=UUID, required=True, help="User id")
@click.option("--date", "reference", type=DATE, default=None, help="Reference date (default: today)")
@data_file_option
@debug_options
def submit_timesheets(
    user_id: uuid.UUID,
    reference: Optional[dt.datetime],
    data_file: Optional[str],
    verbose: bool,
    debug: bool,
):
    """Submit every saved, not yet frozen timesheet for approval."""
    with with_error_handling(debug):
        settings = load_settings()
        setup_logging(settings, verbose)
        with repository_session(settings, data_file) as repository:
            result = build_service(repository, settings).submit_timesheets(
                user_id, as_date(reference)
            )
            _report(result, "submit")


@click.command(name="duplicate")
@click.option("--user", "user_id", type=UUID, required=True, help="User id")
@click.option("--source", type=DATE, required=True, help="Date to copy from")
@click.option("--target", "targets", type=DATE, multiple=True, required=True, help="Date to copy to (repeatable)")
@click.option("--client-date", type=DATE, default=None, help="The user's local today")
@data_file_option
@debug_options
def duplicate_efforts(
    user_id: uuid.UUID,
    source: dt.datetime,
    targets: Tuple[dt.datetime, ...],
    client_date: Optional[dt.datetime],
    data_file: Optional[str],
    verbose: bool,
    debug: bool,
):
    """Copy one date's efforts onto other dates."""
    with with_error_handling(debug):
        settings = load_settings()
        setup_logging(settings, verbose)
        request = DuplicateEffortsRequest(
            source_date=source.date(), target_dates=[t.date() for t in targets]
        )
        with repository_session(settings, data_file) as repository:
            result = build_service(repository, settings).duplicate_efforts(
                user_id, request, as_date(client_date)
            )
            _report(result, "duplicate")
