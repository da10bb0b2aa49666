"""Shared utilities."""

from timesheet_engine.utils.logging_utils import (
    ContextFilter,
    LogContext,
    get_log_context,
    log_function_call,
)

__all__ = ["ContextFilter", "LogContext", "get_log_context", "log_function_call"]
