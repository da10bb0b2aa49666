"""Request models accepted by the timesheet service.

These are transient inputs; they are validated and turned into
TimesheetEntry mutations but never stored themselves.
"""

import datetime as dt
import uuid
from typing import List, Optional

from pydantic import Field

from timesheet_engine.models.base import BaseDataModel
from timesheet_engine.models.timesheet import TimesheetStatus


class TaskEffort(BaseDataModel):
    """Hours the user wants recorded for one task."""

    task_id: uuid.UUID
    hours: int = Field(..., ge=0)


class DailyEffortRequest(BaseDataModel):
    """All efforts a user fills for one calendar date.

    Example:
        >>> request = DailyEffortRequest(
        ...     date=dt.date(2024, 3, 4),
        ...     efforts=[TaskEffort(task_id=uuid.uuid4(), hours=5)],
        ... )
        >>> request.total_hours
        5
    """

    date: dt.date
    efforts: List[TaskEffort] = Field(default_factory=list)

    @property
    def total_hours(self) -> int:
        """Sum of hours across all efforts of the day."""
        return sum(effort.hours for effort in self.efforts)


class DuplicateEffortsRequest(BaseDataModel):
    """Copy the efforts of ``source_date`` onto each of ``target_dates``."""

    source_date: dt.date
    target_dates: List[dt.date] = Field(default_factory=list)


class ApprovalRequest(BaseDataModel):
    """A manager's decision on one submitted timesheet entry.

    Attributes:
        timesheet_id: Entry the decision applies to
        status: Optional decision; when given it must match the operation
        manager_comments: Reason for rejection (ignored on approval)
    """

    timesheet_id: uuid.UUID
    status: Optional[TimesheetStatus] = None
    manager_comments: str = Field("", max_length=100)
