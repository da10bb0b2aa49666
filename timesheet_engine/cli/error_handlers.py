"""Error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click

from timesheet_engine.cli.utils.formatters import format_error, format_warning
from timesheet_engine.exceptions import (
    ApprovalMismatchError,
    InvalidStatusTransitionError,
    InvalidTimesheetRequestError,
    TransactionError,
)


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""


class DataFileError(CLIError):
    """The JSON data file could not be read."""


class ProcessingError(CLIError):
    """An operation could not be carried out: unknown ids or a rolled back transaction."""


def _echo_cli_error(label: str, error: CLIError) -> None:
    click.echo(format_error(f"{label}: {error.message}"))
    if error.recovery_hint:
        click.echo(format_warning(f"Hint: {error.recovery_hint}"))


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Print a user-friendly message for an error and choose an exit code.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code (1-7 for known error types, 130 on abort, 255 otherwise)
    """
    if isinstance(error, ConfigurationError):
        _echo_cli_error("Configuration Error", error)
        return 1

    elif isinstance(error, DataFileError):
        _echo_cli_error("Data File Error", error)
        return 2

    elif isinstance(error, InvalidTimesheetRequestError):
        click.echo(format_error(f"Invalid Request: {error}"))
        if error.report.issues:
            click.echo(error.report.format())
        return 3

    elif isinstance(error, ProcessingError):
        _echo_cli_error("Processing Error", error)
        return 4

    elif isinstance(error, ApprovalMismatchError):
        click.echo(format_error(f"Approval Mismatch: {error}"))
        click.echo(
            format_warning("Hint: Pass each submitted timesheet id exactly once")
        )
        return 5

    elif isinstance(error, InvalidStatusTransitionError):
        click.echo(format_error(f"Invalid Status Change: {error}"))
        return 6

    elif isinstance(error, TransactionError):
        click.echo(format_error(f"Transaction Error: {error}"))
        return 7

    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130

    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(traceback.format_exc())
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return 255


def with_error_handling(debug: bool = False):
    """
    Context manager adding standardized error handling to CLI commands.

    Example:
        @click.command()
        @click.option('--debug', is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                ...
    """

    class ErrorHandler:
        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is None or isinstance(
                exc_val, (click.exceptions.Exit, click.ClickException)
            ):
                return False
            sys.exit(handle_cli_error(exc_val, self.show_debug))

    return ErrorHandler(debug)
