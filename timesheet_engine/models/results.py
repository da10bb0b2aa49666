"""Result types returned by the timesheet service.

Every batch operation reports, per date (and where relevant per task),
whether the item was accepted, skipped for a business reason, or lost to a
persistence failure, so callers can tell why fewer dates came back than
were requested.
"""

import datetime as dt
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from timesheet_engine.models.timesheet import TimesheetEntry


class OutcomeStatus(str, Enum):
    """Outcome of a single date or entry within a batch."""

    ACCEPTED = "accepted"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason(str, Enum):
    """Business rule that excluded a date or task from a batch."""

    FROZEN = "frozen"
    DAILY_LIMIT_EXCEEDED = "daily_limit_exceeded"
    WEEKLY_LIMIT_EXCEEDED = "weekly_limit_exceeded"
    OUTSIDE_VALIDITY_WINDOW = "outside_validity_window"
    TASK_NOT_AVAILABLE = "task_not_available"
    ENTRY_LOCKED = "entry_locked"
    NO_EFFORTS = "no_efforts"


class OperationStatus(str, Enum):
    """Overall status of a batch operation."""

    COMPLETED = "completed"
    NOTHING_TO_DO = "nothing_to_do"
    FAILED = "failed"


@dataclass
class DateOutcome:
    """What happened to one date (or one task on a date) of a batch.

    Attributes:
        date: The date concerned
        status: Accepted, skipped or failed
        reason: Why the item was skipped, if it was
        task_id: Task concerned, when the outcome is narrower than the date
        message: Human-readable detail
    """

    date: dt.date
    status: OutcomeStatus
    reason: Optional[SkipReason] = None
    task_id: Optional[uuid.UUID] = None
    message: str = ""

    @classmethod
    def accepted(cls, date: dt.date) -> "DateOutcome":
        return cls(date=date, status=OutcomeStatus.ACCEPTED)

    @classmethod
    def skipped(
        cls,
        date: dt.date,
        reason: SkipReason,
        message: str = "",
        task_id: Optional[uuid.UUID] = None,
    ) -> "DateOutcome":
        return cls(
            date=date,
            status=OutcomeStatus.SKIPPED,
            reason=reason,
            task_id=task_id,
            message=message,
        )


@dataclass
class OperationResult:
    """Result of a save, submit, duplicate or approval batch.

    On persistence failure ``timesheets`` is empty and ``error`` explains
    what went wrong; the outcomes of dates that would have been written are
    marked FAILED.

    Example:
        >>> result = OperationResult(status=OperationStatus.NOTHING_TO_DO)
        >>> result.succeeded
        False
    """

    status: OperationStatus
    timesheets: List[TimesheetEntry] = field(default_factory=list)
    outcomes: List[DateOutcome] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """True when the batch committed at least one change."""
        return self.status == OperationStatus.COMPLETED

    @property
    def accepted_dates(self) -> List[dt.date]:
        """Dates that were written, in the order they were processed."""
        return [
            outcome.date
            for outcome in self.outcomes
            if outcome.status == OutcomeStatus.ACCEPTED
        ]

    @property
    def skipped(self) -> List[DateOutcome]:
        """Outcomes excluded by a business rule."""
        return [
            outcome
            for outcome in self.outcomes
            if outcome.status == OutcomeStatus.SKIPPED
        ]

    @classmethod
    def failure(cls, error: str, outcomes: List[DateOutcome]) -> "OperationResult":
        """Build a failed result, demoting accepted outcomes to FAILED."""
        failed_outcomes = [
            DateOutcome(
                date=outcome.date,
                status=OutcomeStatus.FAILED,
                task_id=outcome.task_id,
                message=error,
            )
            if outcome.status == OutcomeStatus.ACCEPTED
            else outcome
            for outcome in outcomes
        ]
        return cls(
            status=OperationStatus.FAILED,
            timesheets=[],
            outcomes=failed_outcomes,
            error=error,
        )
