"""Output formatting utilities for CLI."""

from typing import List, Sequence

import click

from timesheet_engine.models.results import OperationResult, OutcomeStatus


def _styled(symbol: str, message: str, **style) -> str:
    return click.style(f"{symbol} {message}", **style)


def format_success(message: str) -> str:
    """Format a success message in green."""
    return _styled("✓", message, fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message in red."""
    return _styled("✗", message, fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message in yellow."""
    return _styled("⚠", message, fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message in blue."""
    return _styled("ℹ", message, fg="blue")


def format_table(headers: List[str], rows: Sequence[Sequence[object]], max_width: int = 40) -> str:
    """Format data as an ASCII table.

    Args:
        headers: Column headers
        rows: Data rows, one list of cell values per row
        max_width: Maximum width of a column; longer cells are truncated

    Returns:
        The table as a string (empty if there are no headers)
    """
    if not headers:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(str(cell)))
    widths = [min(w, max_width) for w in widths]

    def line(cells: Sequence[object]) -> str:
        return "|" + "|".join(
            f" {str(cell)[: widths[i]]:<{widths[i]}} " for i, cell in enumerate(cells[: len(widths)])
        ) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [separator, line(headers), separator]
    if rows:
        lines.extend(line(row) for row in rows)
        lines.append(separator)
    return "\n".join(lines)


def format_operation_result(result: OperationResult) -> str:
    """Render the per-date outcomes of an operation as a table.

    Example:
        >>> print(format_operation_result(result))
        +------------+----------+----------------------+------+
        | Date       | Outcome  | Reason               | Task |
        ...
    """
    rows = [
        [
            outcome.date.isoformat(),
            outcome.status.value,
            outcome.reason.value if outcome.reason else "",
            str(outcome.task_id)[:8] if outcome.task_id else "",
        ]
        for outcome in sorted(result.outcomes, key=lambda o: o.date)
    ]
    return format_table(["Date", "Outcome", "Reason", "Task"], rows)


def outcome_counts(result: OperationResult) -> str:
    counts = {status: 0 for status in OutcomeStatus}
    for outcome in result.outcomes:
        counts[outcome.status] += 1
    return ", ".join(f"{counts[status]} {status.value}" for status in OutcomeStatus)
