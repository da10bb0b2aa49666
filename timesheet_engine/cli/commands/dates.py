"""Freeze window command."""

import datetime as dt
from typing import Optional

import click

from timesheet_engine.calculators.freeze_window import effective_freeze_day, open_window
from timesheet_engine.cli.error_handlers import with_error_handling
from timesheet_engine.cli.utils.formatters import format_info, format_success
from timesheet_engine.cli.utils.options import DATE, as_date, debug_options
from timesheet_engine.cli.utils.session import load_settings, setup_logging


@click.command(name="frozen-dates")
@click.option("--date", "reference", type=DATE, default=None, help="Reference date (default: today)")
@click.option(
    "--freeze-day",
    type=click.IntRange(1, 31),
    default=None,
    help="Freeze day of month (default: TIMESHEET_FREEZE_DAY_OF_MONTH setting)",
)
@debug_options
def frozen_dates(
    reference: Optional[dt.datetime], freeze_day: Optional[int], verbose: bool, debug: bool
):
    """Show which dates can still be filled.

    Example:
        timesheet-cli frozen-dates --date 2024-03-11
    """
    with with_error_handling(debug):
        settings = load_settings()
        setup_logging(settings, verbose)

        reference_date = as_date(reference) or dt.date.today()
        day = freeze_day or settings.timesheet_freeze_day_of_month
        first_open, last_open = open_window(reference_date, day)

        click.echo(
            format_info(
                f"Freeze day {effective_freeze_day(reference_date, day)} "
                f"applied to {reference_date.isoformat()}"
            )
        )
        click.echo(format_success(f"Open from {first_open.isoformat()} to {last_open.isoformat()}"))
        click.echo(f"Dates before {first_open.isoformat()} are frozen")
