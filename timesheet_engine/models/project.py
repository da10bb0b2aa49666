"""Project data models for the timesheet engine.

This module defines Project, Task and Member. A project bounds the dates on
which its tasks may receive efforts; a task narrows that window further; a
member links a user to a project.
"""

import datetime as dt
import uuid
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from timesheet_engine.models.base import BaseDataModel


class Member(BaseDataModel):
    """Associates a user with a project.

    Attributes:
        id: Member mapping id
        project_id: Project the user belongs to
        user_id: Object id of the user
        is_billable: Whether the user's hours are billable
        is_removed: Whether the user was removed from the project
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    project_id: uuid.UUID
    user_id: uuid.UUID
    is_billable: bool = True
    is_removed: bool = False


class Task(BaseDataModel):
    """A unit of work inside a project that efforts are logged against.

    Attributes:
        id: Task id
        project_id: Owning project
        title: Task title
        start_date: First date efforts may be logged
        end_date: Last date efforts may be logged
        is_removed: Whether the task was removed by the manager
        is_added_by_member: Whether a project member created the task
        member_mapping_id: Member who created the task, if member-added
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    project_id: uuid.UUID
    title: str = Field(..., min_length=1)
    start_date: dt.date
    end_date: dt.date
    is_removed: bool = False
    is_added_by_member: bool = False
    member_mapping_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def validate_dates(self) -> "Task":
        """Ensure the task window is not inverted."""
        if self.end_date < self.start_date:
            raise ValueError(
                f"Task end_date ({self.end_date}) must not be before "
                f"start_date ({self.start_date})"
            )
        return self

    def covers(self, date: dt.date) -> bool:
        """Check whether efforts may be logged on ``date``."""
        return self.start_date <= date <= self.end_date


class Project(BaseDataModel):
    """Represents a project owned by the manager who created it.

    Attributes:
        id: Project id
        title: Project title
        client_name: Client the project is delivered for
        billable_hours: Planned billable hours
        non_billable_hours: Planned non-billable hours
        start_date: First date of the project
        end_date: Last date of the project
        created_by: Object id of the manager who created the project
        created_on: Creation timestamp
        members: Users mapped to the project
        tasks: Tasks of the project

    Example:
        >>> project = Project(
        ...     title="Intranet",
        ...     start_date=dt.date(2024, 1, 1),
        ...     end_date=dt.date(2024, 6, 30),
        ...     created_by=uuid.uuid4(),
        ... )
        >>> project.covers(dt.date(2024, 2, 1))
        True
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    title: str = Field(..., min_length=1)
    client_name: str = ""
    billable_hours: int = Field(0, ge=0)
    non_billable_hours: int = Field(0, ge=0)
    start_date: dt.date
    end_date: dt.date
    created_by: uuid.UUID
    created_on: Optional[dt.datetime] = None
    members: List[Member] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Reject whitespace-only titles."""
        if not v.strip():
            raise ValueError("title cannot be empty or whitespace")
        return v.strip()

    @model_validator(mode="after")
    def validate_windows(self) -> "Project":
        """Validate the project window and that every task fits inside it.

        Raises:
            ValueError: If the project window is inverted, a task belongs to
                another project, or a task window leaves the project window
        """
        if self.end_date < self.start_date:
            raise ValueError(
                f"Project end_date ({self.end_date}) must not be before "
                f"start_date ({self.start_date})"
            )
        for task in self.tasks:
            if task.project_id != self.id:
                raise ValueError(f"Task {task.id} belongs to another project")
            if task.start_date < self.start_date or task.end_date > self.end_date:
                raise ValueError(
                    f"Task '{task.title}' window {task.start_date}..{task.end_date} "
                    f"is outside project window {self.start_date}..{self.end_date}"
                )
        return self

    @property
    def planned_hours(self) -> int:
        """Total planned hours, billable and non-billable."""
        return self.billable_hours + self.non_billable_hours

    def covers(self, date: dt.date) -> bool:
        """Check whether ``date`` lies inside the project window."""
        return self.start_date <= date <= self.end_date

    def active_member(self, user_id: uuid.UUID) -> Optional[Member]:
        """Return the user's member mapping unless the user was removed."""
        for member in self.members:
            if member.user_id == user_id and not member.is_removed:
                return member
        return None

    def visible_tasks(self, member: Member) -> List[Task]:
        """Tasks ``member`` can see, whatever their dates.

        Removed tasks are excluded, and tasks added by a member are only
        visible to that member.
        """
        return [
            task
            for task in self.tasks
            if not task.is_removed
            and (not task.is_added_by_member or task.member_mapping_id == member.id)
        ]

    def loggable_tasks(self, member: Member, date: dt.date) -> List[Task]:
        """Visible tasks ``member`` may log efforts against on ``date``."""
        return [task for task in self.visible_tasks(member) if task.covers(date)]
