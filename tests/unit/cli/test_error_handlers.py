"""Unit tests for CLI error handling."""

import click
import pytest

from timesheet_engine.cli.error_handlers import (
    CLIError,
    ConfigurationError,
    DataFileError,
    ProcessingError,
    handle_cli_error,
    with_error_handling,
)
from timesheet_engine.exceptions import (
    ApprovalMismatchError,
    InvalidStatusTransitionError,
    InvalidTimesheetRequestError,
    TransactionError,
)
from timesheet_engine.validators import ValidationReport


class TestHandleCliError:
    """Test suite for handle_cli_error exit codes and messages."""

    @pytest.mark.parametrize(
        "error,code",
        [
            (ConfigurationError("bad settings"), 1),
            (DataFileError("corrupt"), 2),
            (InvalidTimesheetRequestError("bad request"), 3),
            (ProcessingError("rolled back"), 4),
            (ApprovalMismatchError("mismatch"), 5),
            (InvalidStatusTransitionError("locked"), 6),
            (TransactionError("nested"), 7),
            (click.Abort(), 130),
            (RuntimeError("boom"), 255),
        ],
    )
    def test_exit_codes(self, error, code):
        assert handle_cli_error(error) == code

    def test_recovery_hint_shown(self, capsys):
        handle_cli_error(ConfigurationError("bad settings", recovery_hint="Check .env"))
        output = capsys.readouterr().out
        assert "Configuration Error: bad settings" in output
        assert "Hint: Check .env" in output

    def test_validation_report_shown(self, capsys):
        report = ValidationReport()
        report.add_error("days", "Timesheets to save are null or empty", [])
        handle_cli_error(InvalidTimesheetRequestError.from_report(report))
        assert "[ERROR] days: Timesheets to save are null or empty" in capsys.readouterr().out

    def test_unexpected_error_suggests_debug(self, capsys):
        handle_cli_error(RuntimeError("boom"))
        assert "--debug" in capsys.readouterr().out

    def test_unexpected_error_with_debug_shows_trace(self, capsys):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            handle_cli_error(e, debug=True)
        assert "Full stack trace" in capsys.readouterr().out

    def test_cli_error_keeps_message(self):
        error = CLIError("message", recovery_hint="hint")
        assert (str(error), error.recovery_hint) == ("message", "hint")


class TestWithErrorHandling:
    """Test suite for the with_error_handling context manager."""

    def test_errors_become_exit_codes(self):
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise ProcessingError("rolled back")
        assert exc_info.value.code == 4

    def test_click_exceptions_pass_through(self):
        with pytest.raises(click.BadParameter):
            with with_error_handling():
                raise click.BadParameter("bad")

    def test_no_error(self):
        with with_error_handling():
            value = 1
        assert value == 1
