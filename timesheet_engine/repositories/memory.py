"""In-memory implementation of the timesheet repository.

Backs the CLI (through the JSON store) and stands in for a database in
tests. Reads see changes staged in the current transaction, so limits
checked later in a batch account for dates written earlier in it.
Not thread-safe.
"""

import datetime as dt
import logging
import uuid
from typing import Callable, Dict, Iterable, List, Optional

from timesheet_engine.exceptions import TransactionError
from timesheet_engine.models.conversation import ConversationReference
from timesheet_engine.models.project import Project
from timesheet_engine.models.timesheet import TimesheetEntry, TimesheetStatus
from timesheet_engine.repositories.base import TimesheetRepository

logger = logging.getLogger(__name__)


class InMemoryTimesheetRepository(TimesheetRepository):
    """Dictionary-backed repository with snapshot transactions.

    Example:
        >>> repository = InMemoryTimesheetRepository()
        >>> repository.begin()
        >>> repository.add(entry)
        >>> repository.save_changes()
        1
        >>> repository.commit()
    """

    def __init__(
        self,
        projects: Iterable[Project] = (),
        timesheets: Iterable[TimesheetEntry] = (),
        conversations: Iterable[ConversationReference] = (),
    ):
        self._projects: Dict[uuid.UUID, Project] = {}
        self._timesheets: Dict[uuid.UUID, TimesheetEntry] = {}
        self._conversations: Dict[uuid.UUID, ConversationReference] = {}
        self._pending: Dict[uuid.UUID, TimesheetEntry] = {}
        self._snapshot: Optional[Dict[uuid.UUID, TimesheetEntry]] = None

        for project in projects:
            self.add_project(project)
        for entry in timesheets:
            self._timesheets[entry.id] = entry.model_copy(deep=True)
        for conversation in conversations:
            self.add_conversation(conversation)

    # Seeding and inspection

    def add_project(self, project: Project) -> None:
        self._projects[project.id] = project.model_copy(deep=True)

    def add_conversation(self, conversation: ConversationReference) -> None:
        self._conversations[conversation.user_id] = conversation.model_copy(deep=True)

    def all_projects(self) -> List[Project]:
        return [project.model_copy(deep=True) for project in self._projects.values()]

    def all_timesheets(self) -> List[TimesheetEntry]:
        return [entry.model_copy(deep=True) for entry in self._current().values()]

    def all_conversations(self) -> List[ConversationReference]:
        return [c.model_copy(deep=True) for c in self._conversations.values()]

    @property
    def in_transaction(self) -> bool:
        return self._snapshot is not None

    # Unit of work

    def begin(self) -> None:
        if self._snapshot is not None:
            raise TransactionError("A transaction is already in progress")
        self._snapshot = dict(self._timesheets)
        logger.debug("Transaction started")

    def commit(self) -> None:
        if self._snapshot is None:
            raise TransactionError("No transaction in progress")
        if self._pending:
            logger.warning(
                f"Committing with {len(self._pending)} unsaved changes; they stay staged"
            )
        self._snapshot = None
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        if self._snapshot is None:
            raise TransactionError("No transaction in progress")
        self._timesheets = self._snapshot
        self._snapshot = None
        self._pending.clear()
        logger.debug("Transaction rolled back")

    def save_changes(self) -> int:
        affected = len(self._pending)
        self._timesheets.update(self._pending)
        self._pending.clear()
        return affected

    # Timesheets

    def _current(self) -> Dict[uuid.UUID, TimesheetEntry]:
        if not self._pending:
            return self._timesheets
        merged = dict(self._timesheets)
        merged.update(self._pending)
        return merged

    def add(self, entry: TimesheetEntry) -> None:
        if entry.id in self._current():
            raise ValueError(f"Timesheet {entry.id} already exists")
        self._pending[entry.id] = entry.model_copy(deep=True)

    def update(self, entry: TimesheetEntry) -> None:
        if entry.id not in self._current():
            raise KeyError(f"Timesheet {entry.id} does not exist")
        self._pending[entry.id] = entry.model_copy(deep=True)

    def find(self, predicate: Callable[[TimesheetEntry], bool]) -> List[TimesheetEntry]:
        return [
            entry.model_copy(deep=True)
            for entry in self._current().values()
            if predicate(entry)
        ]

    def get_timesheets_in_range(
        self, start_date: dt.date, end_date: dt.date, user_id: uuid.UUID
    ) -> List[TimesheetEntry]:
        return self.find(
            lambda entry: entry.user_id == user_id and start_date <= entry.date <= end_date
        )

    def get_timesheets_for_tasks_on_date(
        self, date: dt.date, task_ids: Iterable[uuid.UUID], user_id: uuid.UUID
    ) -> List[TimesheetEntry]:
        wanted = set(task_ids)
        return self.find(
            lambda entry: entry.user_id == user_id
            and entry.date == date
            and entry.task_id in wanted
        )

    def _project_of_task(self) -> Dict[uuid.UUID, Project]:
        return {
            task.id: project
            for project in self._projects.values()
            for task in project.tasks
        }

    def get_submitted_timesheets_by_ids(
        self, manager_id: uuid.UUID, timesheet_ids: Iterable[uuid.UUID]
    ) -> List[TimesheetEntry]:
        wanted = set(timesheet_ids)
        projects = self._project_of_task()
        return self.find(
            lambda entry: entry.id in wanted
            and entry.status == TimesheetStatus.SUBMITTED
            and entry.task_id in projects
            and projects[entry.task_id].created_by == manager_id
        )

    def get_timesheets_by_manager(
        self, manager_id: uuid.UUID, status: TimesheetStatus
    ) -> Dict[uuid.UUID, List[TimesheetEntry]]:
        projects = self._project_of_task()
        grouped: Dict[uuid.UUID, List[TimesheetEntry]] = {}
        for entry in self.find(
            lambda e: e.status == status
            and e.task_id in projects
            and projects[e.task_id].created_by == manager_id
        ):
            grouped.setdefault(entry.user_id, []).append(entry)
        return grouped

    def get_timesheets_for_projects(
        self,
        project_ids: Iterable[uuid.UUID],
        status: TimesheetStatus,
        start_date: dt.date,
        end_date: dt.date,
    ) -> List[TimesheetEntry]:
        wanted = set(project_ids)
        projects = self._project_of_task()
        return self.find(
            lambda entry: entry.status == status
            and start_date <= entry.date <= end_date
            and entry.task_id in projects
            and projects[entry.task_id].id in wanted
        )

    # Projects

    def get_projects_in_range(
        self, start_date: dt.date, end_date: dt.date, user_id: uuid.UUID
    ) -> List[Project]:
        return [
            project.model_copy(deep=True)
            for project in self._projects.values()
            if project.start_date <= end_date
            and project.end_date >= start_date
            and project.active_member(user_id) is not None
        ]

    def get_projects_for_tasks(self, task_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, Project]:
        projects = self._project_of_task()
        return {
            task_id: projects[task_id].model_copy(deep=True)
            for task_id in set(task_ids)
            if task_id in projects
        }

    def get_projects_created_by(self, manager_id: uuid.UUID) -> List[Project]:
        return [
            project.model_copy(deep=True)
            for project in self._projects.values()
            if project.created_by == manager_id
        ]

    # Conversations

    def get_conversation(self, user_id: uuid.UUID) -> Optional[ConversationReference]:
        conversation = self._conversations.get(user_id)
        return conversation.model_copy(deep=True) if conversation else None
