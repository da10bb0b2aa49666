"""Timesheet data model for the timesheet engine.

This module defines the TimesheetEntry model, a user's hours against a single
task on a single date, and the TimesheetStatus lifecycle it moves through.
"""

import datetime as dt
import uuid
from enum import IntEnum
from typing import Optional

from pydantic import Field, field_validator

from timesheet_engine.models.base import BaseDataModel


class TimesheetStatus(IntEnum):
    """Lifecycle states of a timesheet entry."""

    NONE = 0
    SAVED = 1
    SUBMITTED = 2
    APPROVED = 3
    REJECTED = 4

    @property
    def is_editable(self) -> bool:
        """Whether save and duplicate may overwrite an entry in this state.

        Rejected entries are editable so the user can correct and re-save
        them; submitted and approved entries are locked.
        """
        return self in (
            TimesheetStatus.NONE,
            TimesheetStatus.SAVED,
            TimesheetStatus.REJECTED,
        )

    def can_transition_to(self, target: "TimesheetStatus") -> bool:
        """Check whether moving from this state to ``target`` is allowed.

        Args:
            target: Requested next state

        Returns:
            True if the transition is part of the lifecycle
        """
        return target in _TRANSITIONS[self]


_TRANSITIONS = {
    TimesheetStatus.NONE: {TimesheetStatus.SAVED, TimesheetStatus.NONE},
    TimesheetStatus.SAVED: {
        TimesheetStatus.SAVED,
        TimesheetStatus.NONE,
        TimesheetStatus.SUBMITTED,
    },
    TimesheetStatus.SUBMITTED: {TimesheetStatus.APPROVED, TimesheetStatus.REJECTED},
    TimesheetStatus.APPROVED: set(),
    TimesheetStatus.REJECTED: {TimesheetStatus.SAVED, TimesheetStatus.NONE},
}


class TimesheetEntry(BaseDataModel):
    """Represents the hours a user logged for one task on one date.

    There is at most one entry per (user, task, date). Entries are never
    deleted; setting hours to zero moves the entry back to ``NONE``.

    Attributes:
        id: Entry identifier
        user_id: Object id of the user who filled the timesheet
        task_id: Task the hours are logged against
        task_title: Task title at the time of filling
        date: Calendar date of the effort
        hours: Whole hours logged
        status: Lifecycle state
        manager_comments: Comments left by the manager on rejection
        submitted_on: When the entry was submitted for approval
        last_modified_on: When the entry was last changed

    Example:
        >>> entry = TimesheetEntry(
        ...     user_id=uuid.uuid4(),
        ...     task_id=uuid.uuid4(),
        ...     date=dt.date(2024, 3, 4),
        ...     hours=6,
        ...     status=TimesheetStatus.SAVED,
        ... )
        >>> entry.status.name
        'SAVED'
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4, description="Entry id")
    user_id: uuid.UUID = Field(..., description="User object id")
    task_id: uuid.UUID = Field(..., description="Task id")
    task_title: str = Field("", description="Task title")
    date: dt.date = Field(..., description="Date of the effort")
    hours: int = Field(..., ge=0, description="Hours logged")
    status: TimesheetStatus = Field(TimesheetStatus.NONE, description="Status")
    manager_comments: str = Field("", max_length=100, description="Comments")
    submitted_on: Optional[dt.datetime] = Field(None, description="Submitted at")
    last_modified_on: Optional[dt.datetime] = Field(None, description="Modified at")

    @field_validator("manager_comments", mode="before")
    @classmethod
    def default_comments(cls, v):
        """Treat missing comments as empty text."""
        return "" if v is None else v
