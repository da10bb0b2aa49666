"""Options shared by CLI commands."""

import datetime as dt
import uuid
from typing import Optional, Tuple

import click

from timesheet_engine.models.requests import TaskEffort

DATE = click.DateTime(formats=["%Y-%m-%d"])


def data_file_option(f):
    return click.option(
        "--data-file",
        type=click.Path(dir_okay=False),
        default=None,
        help="JSON data file (default: TIMESHEET_DATA_FILE setting)",
    )(f)


def debug_options(f):
    f = click.option("--debug", is_flag=True, help="Show full stack traces on errors")(f)
    f = click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")(f)
    return f


def as_date(value: Optional[dt.datetime]) -> Optional[dt.date]:
    return value.date() if value is not None else None


def parse_effort(value: str) -> TaskEffort:
    """Parse a TASK_ID:HOURS effort argument.

    Raises:
        click.BadParameter: If the value is not a task UUID and whole hours
    """
    task_part, sep, hours_part = value.rpartition(":")
    if not sep:
        raise click.BadParameter(f"Expected TASK_ID:HOURS, got {value!r}")
    try:
        return TaskEffort(task_id=uuid.UUID(task_part), hours=int(hours_part))
    except ValueError as e:
        raise click.BadParameter(f"Invalid effort {value!r}: {e}") from e


def parse_efforts(values: Tuple[str, ...]) -> list:
    return [parse_effort(value) for value in values]
