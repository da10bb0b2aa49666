"""Calendar read model: what a user sees when filling a timesheet.

For each day the user gets the projects active on that day, and for each
project the tasks they may log against with whatever they already filled.
"""

import datetime as dt
import uuid
from typing import List

from pydantic import Field

from timesheet_engine.models.base import BaseDataModel
from timesheet_engine.models.timesheet import TimesheetStatus


class TaskTimesheet(BaseDataModel):
    """A task row of the calendar, with filled hours if any."""

    task_id: uuid.UUID
    task_title: str
    is_added_by_member: bool = False
    start_date: dt.date
    end_date: dt.date
    hours: int = 0
    status: TimesheetStatus = TimesheetStatus.NONE
    manager_comments: str = ""


class ProjectTimesheet(BaseDataModel):
    """A project active on a calendar day, with its loggable tasks."""

    project_id: uuid.UUID
    title: str
    start_date: dt.date
    end_date: dt.date
    tasks: List[TaskTimesheet] = Field(default_factory=list)


class DayTimesheet(BaseDataModel):
    """One calendar day of a user's timesheet."""

    date: dt.date
    projects: List[ProjectTimesheet] = Field(default_factory=list)

    @property
    def total_hours(self) -> int:
        """Hours filled across every project of the day."""
        return sum(task.hours for project in self.projects for task in project.tasks)
