"""CLI utility functions."""

from timesheet_engine.cli.utils.formatters import (
    format_error,
    format_info,
    format_operation_result,
    format_success,
    format_table,
    format_warning,
    outcome_counts,
)

__all__ = [
    "format_error",
    "format_info",
    "format_operation_result",
    "format_success",
    "format_table",
    "format_warning",
    "outcome_counts",
]
