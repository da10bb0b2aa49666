"""Data-access contract consumed by the timesheet service.

Implementations provide timesheet, project and conversation queries plus a
unit of work: ``begin`` opens a transaction, ``add``/``update`` stage
changes, ``save_changes`` writes them and reports how many rows were
affected, and ``commit``/``rollback`` end the transaction.

Entities handed out by a repository are detached copies; callers change
them and pass them back through ``update``.
"""

import datetime as dt
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, Optional

from timesheet_engine.models.conversation import ConversationReference
from timesheet_engine.models.project import Project
from timesheet_engine.models.timesheet import TimesheetEntry, TimesheetStatus


class TimesheetRepository(ABC):
    """Repository and unit of work over timesheets, projects and conversations."""

    # Unit of work

    @abstractmethod
    def begin(self) -> None:
        """Open a transaction."""

    @abstractmethod
    def commit(self) -> None:
        """Make every change saved since ``begin`` permanent."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every change staged or saved since ``begin``."""

    @abstractmethod
    def save_changes(self) -> int:
        """Write staged changes and return the number of rows affected."""

    # Timesheets

    @abstractmethod
    def add(self, entry: TimesheetEntry) -> None:
        """Stage a new timesheet entry."""

    @abstractmethod
    def update(self, entry: TimesheetEntry) -> None:
        """Stage changes to an existing timesheet entry."""

    def update_many(self, entries: Iterable[TimesheetEntry]) -> None:
        """Stage changes to several entries."""
        for entry in entries:
            self.update(entry)

    @abstractmethod
    def find(self, predicate: Callable[[TimesheetEntry], bool]) -> List[TimesheetEntry]:
        """All timesheet entries matching ``predicate``."""

    @abstractmethod
    def get_timesheets_in_range(
        self, start_date: dt.date, end_date: dt.date, user_id: uuid.UUID
    ) -> List[TimesheetEntry]:
        """The user's entries dated within ``start_date``..``end_date``."""

    @abstractmethod
    def get_timesheets_for_tasks_on_date(
        self, date: dt.date, task_ids: Iterable[uuid.UUID], user_id: uuid.UUID
    ) -> List[TimesheetEntry]:
        """The user's entries on ``date`` for the given tasks."""

    @abstractmethod
    def get_submitted_timesheets_by_ids(
        self, manager_id: uuid.UUID, timesheet_ids: Iterable[uuid.UUID]
    ) -> List[TimesheetEntry]:
        """Submitted entries among ``timesheet_ids`` on the manager's projects."""

    @abstractmethod
    def get_timesheets_by_manager(
        self, manager_id: uuid.UUID, status: TimesheetStatus
    ) -> Dict[uuid.UUID, List[TimesheetEntry]]:
        """Entries with ``status`` on the manager's projects, keyed by user."""

    @abstractmethod
    def get_timesheets_for_projects(
        self,
        project_ids: Iterable[uuid.UUID],
        status: TimesheetStatus,
        start_date: dt.date,
        end_date: dt.date,
    ) -> List[TimesheetEntry]:
        """Entries with ``status`` on tasks of the given projects in a date range."""

    # Projects

    @abstractmethod
    def get_projects_in_range(
        self, start_date: dt.date, end_date: dt.date, user_id: uuid.UUID
    ) -> List[Project]:
        """Projects overlapping the range in which the user is an active member."""

    @abstractmethod
    def get_projects_for_tasks(self, task_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, Project]:
        """The owning project of each task id."""

    @abstractmethod
    def get_projects_created_by(self, manager_id: uuid.UUID) -> List[Project]:
        """Projects created by the manager."""

    # Conversations

    @abstractmethod
    def get_conversation(self, user_id: uuid.UUID) -> Optional[ConversationReference]:
        """The stored bot conversation of the user, if the bot is installed."""
