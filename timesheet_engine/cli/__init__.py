"""Timesheet CLI.

This module provides a command-line interface over a JSON data file for
filling, submitting, duplicating and approving timesheets.
"""

import click

from timesheet_engine import __version__
from timesheet_engine.cli.commands import (
    approve_timesheets,
    duplicate_efforts,
    frozen_dates,
    list_timesheets,
    reject_timesheets,
    save_timesheet,
    show_calendar,
    show_dashboard,
    submit_timesheets,
)


@click.group(help="Timesheet CLI - Fill, submit and approve timesheets")
@click.version_option(version=__version__)
def cli():
    """Timesheet CLI main entry point."""
    pass


cli.add_command(frozen_dates)
cli.add_command(show_calendar)
cli.add_command(list_timesheets)
cli.add_command(save_timesheet)
cli.add_command(submit_timesheets)
cli.add_command(duplicate_efforts)
cli.add_command(approve_timesheets)
cli.add_command(reject_timesheets)
cli.add_command(show_dashboard)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
