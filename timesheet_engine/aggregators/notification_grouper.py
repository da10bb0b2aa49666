"""Grouping of approved or rejected timesheets into notification cards.

A manager decision can cover many users, projects and dates. Users get one
card per project per run of consecutive dates rather than one message per
entry.
"""

import datetime as dt
import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping

from timesheet_engine.calculators.date_utils import group_into_date_runs
from timesheet_engine.models.project import Project
from timesheet_engine.models.timesheet import TimesheetEntry, TimesheetStatus

logger = logging.getLogger(__name__)


@dataclass
class NotificationCard:
    """Summary of one run of consecutive dates for one user and project.

    Attributes:
        user_id: User the card is sent to
        project_id: Project the hours were logged on
        project_title: Title shown on the card
        start_date: First date of the run
        end_date: Last date of the run
        total_hours: Hours across every entry of the run
        status: APPROVED or REJECTED
        comment: Manager comment of the run's first entry (rejections only)
        timesheet_ids: Entries summarized by the card

    Example:
        >>> card = NotificationCard(
        ...     user_id=uuid.uuid4(), project_id=uuid.uuid4(), project_title="Intranet",
        ...     start_date=dt.date(2024, 3, 5), end_date=dt.date(2024, 3, 6),
        ...     total_hours=12, status=TimesheetStatus.APPROVED,
        ... )
        >>> card.date_label
        '2024-03-05 - 2024-03-06'
    """

    user_id: uuid.UUID
    project_id: uuid.UUID
    project_title: str
    start_date: dt.date
    end_date: dt.date
    total_hours: int
    status: TimesheetStatus
    comment: str = ""
    timesheet_ids: List[uuid.UUID] = field(default_factory=list)

    @property
    def is_single_date(self) -> bool:
        return self.start_date == self.end_date

    @property
    def date_label(self) -> str:
        """The date, or "start - end" for a multi-day run."""
        if self.is_single_date:
            return self.start_date.isoformat()
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"


@dataclass
class UserNotifications:
    """All cards due to one user."""

    user_id: uuid.UUID
    cards: List[NotificationCard] = field(default_factory=list)


class ApprovalNotificationGrouper:
    """Builds notification cards from committed approval decisions.

    The grouper:
    1. Ignores entries with zero hours
    2. Groups entries by user, then by project
    3. Splits each group into runs of consecutive dates
    4. Produces one NotificationCard per run
    """

    def group(
        self,
        entries: Iterable[TimesheetEntry],
        projects_by_task: Mapping[uuid.UUID, Project],
        status: TimesheetStatus,
    ) -> List[UserNotifications]:
        """Group entries into per-user notification cards.

        Args:
            entries: Entries that were just approved or rejected
            projects_by_task: Owning project of each entry's task
            status: The decision applied to the entries

        Returns:
            One UserNotifications per user, in order of first appearance
        """
        by_user: Dict[uuid.UUID, Dict[uuid.UUID, List[TimesheetEntry]]] = OrderedDict()

        for entry in entries:
            if entry.hours <= 0:
                continue
            project = projects_by_task.get(entry.task_id)
            if project is None:
                logger.warning(
                    f"No project found for task {entry.task_id}; "
                    f"timesheet {entry.id} will not be notified"
                )
                continue
            by_user.setdefault(entry.user_id, OrderedDict()).setdefault(
                project.id, []
            ).append(entry)

        result: List[UserNotifications] = []
        for user_id, by_project in by_user.items():
            notifications = UserNotifications(user_id=user_id)
            for project_id, project_entries in by_project.items():
                project = projects_by_task[project_entries[0].task_id]
                for run in group_into_date_runs(project_entries, key=lambda e: e.date):
                    notifications.cards.append(self._build_card(run, project, status))
            result.append(notifications)

        logger.info(
            f"Grouped decisions into {sum(len(n.cards) for n in result)} cards "
            f"for {len(result)} users"
        )
        return result

    @staticmethod
    def _build_card(
        run: List[TimesheetEntry], project: Project, status: TimesheetStatus
    ) -> NotificationCard:
        first, last = run[0], run[-1]
        return NotificationCard(
            user_id=first.user_id,
            project_id=project.id,
            project_title=project.title,
            start_date=first.date,
            end_date=last.date,
            total_hours=sum(entry.hours for entry in run),
            status=status,
            comment=first.manager_comments if status == TimesheetStatus.REJECTED else "",
            timesheet_ids=[entry.id for entry in run],
        )
