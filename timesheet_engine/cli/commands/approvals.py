"""Manager commands: approve or reject submitted timesheets."""

import uuid
from typing import Optional, Tuple

import click

from timesheet_engine.cli.error_handlers import ProcessingError, with_error_handling
from timesheet_engine.cli.utils.formatters import format_success, format_table
from timesheet_engine.cli.utils.options import data_file_option, debug_options
from timesheet_engine.cli.utils.session import (
    UUID,
    build_service,
    load_settings,
    repository_session,
    setup_logging,
)
from timesheet_engine.models.requests import ApprovalRequest
from timesheet_engine.models.results import OperationStatus
from timesheet_engine.models.timesheet import TimesheetStatus


def _decide(
    status: TimesheetStatus,
    manager_id: uuid.UUID,
    timesheet_ids: Tuple[uuid.UUID, ...],
    comment: str,
    notify: bool,
    data_file: Optional[str],
    verbose: bool,
    debug: bool,
) -> None:
    with with_error_handling(debug):
        settings = load_settings()
        setup_logging(settings, verbose)
        with repository_session(settings, data_file) as repository:
            service = build_service(repository, settings, notify=notify)
            timesheets = service.get_submitted_timesheets_by_ids(manager_id, timesheet_ids)
            if timesheets is None:
                raise ProcessingError(
                    "Some timesheets are not submitted on projects you manage",
                    recovery_hint="Check the ids with the dashboard command; only submitted "
                    "timesheets on your own projects can be decided",
                )
            approvals = [
                ApprovalRequest(timesheet_id=entry.id, status=status, manager_comments=comment)
                for entry in timesheets
            ]
            result = service.approve_or_reject(timesheets, approvals, status)
            if result.status == OperationStatus.FAILED:
                raise ProcessingError(
                    f"Could not record the decision: {result.error}",
                    recovery_hint="Nothing was changed; retry the command",
                )

        rows = [
            [str(e.id), e.date.isoformat(), e.task_title, e.hours, e.status.name]
            for e in sorted(result.timesheets, key=lambda e: e.date)
        ]
        click.echo(format_table(["Id", "Date", "Task", "Hours", "Status"], rows))
        click.echo(
            format_success(f"{status.name.capitalize()} {len(result.timesheets)} timesheet(s)")
        )


def _decision_options(f):
    f = debug_options(f)
    f = data_file_option(f)
    f = click.option(
        "--notify/--no-notify",
        default=False,
        help="Send notification cards to the users' bot conversations",
    )(f)
    f = click.option(
        "--timesheet-id",
        "timesheet_ids",
        type=UUID,
        multiple=True,
        required=True,
        help="Submitted timesheet id (repeatable)",
    )(f)
    f = click.option("--manager", "manager_id", type=UUID, required=True, help="Manager id")(f)
    return f


@click.command(name="approve")
@_decision_options
def approve_timesheets(
    manager_id: uuid.UUID,
    timesheet_ids: Tuple[uuid.UUID, ...],
    notify: bool,
    data_file: Optional[str],
    verbose: bool,
    debug: bool,
):
    """Approve submitted timesheets."""
    _decide(
        TimesheetStatus.APPROVED, manager_id, timesheet_ids, "", notify, data_file, verbose, debug
    )


@click.command(name="reject")
@_decision_options
@click.option("--comment", default="", help="Reason shown to the user (max 100 characters)")
def reject_timesheets(
    manager_id: uuid.UUID,
    timesheet_ids: Tuple[uuid.UUID, ...],
    notify: bool,
    data_file: Optional[str],
    verbose: bool,
    debug: bool,
    comment: str,
):
    """Reject submitted timesheets with a comment."""
    if len(comment) > 100:
        raise click.BadParameter("at most 100 characters", param_hint="--comment")
    _decide(
        TimesheetStatus.REJECTED,
        manager_id,
        timesheet_ids,
        comment,
        notify,
        data_file,
        verbose,
        debug,
    )
