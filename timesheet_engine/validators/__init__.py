"""Validation layer for timesheet service requests."""

from timesheet_engine.validators.request_validator import TimesheetRequestValidator
from timesheet_engine.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)

__all__ = [
    "TimesheetRequestValidator",
    "ValidationReport",
    "ValidationIssue",
    "ValidationSeverity",
]
