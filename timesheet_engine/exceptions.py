"""Exceptions raised by the timesheet engine."""

from typing import Optional

from timesheet_engine.validators.validation_report import ValidationReport


class TimesheetEngineError(Exception):
    """Base exception for the timesheet engine."""


class InvalidTimesheetRequestError(TimesheetEngineError):
    """The caller supplied a malformed request; nothing was attempted.

    Attributes:
        report: Validation issues that caused the rejection
    """

    def __init__(self, message: str, report: Optional[ValidationReport] = None):
        self.report = report if report is not None else ValidationReport()
        super().__init__(message)

    @classmethod
    def from_report(cls, report: ValidationReport) -> "InvalidTimesheetRequestError":
        """Build the error from a report containing at least one error."""
        messages = "; ".join(issue.message for issue in report.get_errors())
        return cls(f"Invalid timesheet request: {messages}", report)


class NoSourceProjectsError(InvalidTimesheetRequestError):
    """Duplicate efforts was asked to copy a date that has no projects."""


class ApprovalMismatchError(TimesheetEngineError, LookupError):
    """Approval decisions do not correspond one-to-one to the entries."""


class InvalidStatusTransitionError(TimesheetEngineError):
    """An entry was asked to move to a state its lifecycle does not allow."""


class TransactionError(TimesheetEngineError):
    """The unit of work was misused or wrote an unexpected number of rows."""
