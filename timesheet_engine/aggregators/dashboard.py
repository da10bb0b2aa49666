"""Manager dashboard: pending approval requests and project utilization.

This module builds the read models a project manager works from:
- Pending requests per reportee, with submitted dates grouped into runs
- Planned versus approved hours per project as a pandas DataFrame
- A user-by-week matrix of logged hours
"""

import datetime as dt
import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from timesheet_engine.calculators.date_utils import group_into_date_runs, week_bounds
from timesheet_engine.models.timesheet import TimesheetEntry, TimesheetStatus
from timesheet_engine.repositories.base import TimesheetRepository

logger = logging.getLogger(__name__)

UTILIZATION_COLUMNS = [
    "project_id",
    "title",
    "billable_hours",
    "non_billable_hours",
    "planned_hours",
    "utilized_hours",
    "remaining_hours",
    "utilization_pct",
]


@dataclass
class DashboardRequest:
    """Submitted timesheets of one reportee awaiting a decision.

    Attributes:
        user_id: Reportee who submitted the timesheets
        number_of_days: Distinct dates with submitted hours
        total_hours: Hours across every submitted entry
        status: Always SUBMITTED for pending requests
        requested_for_dates: Submitted dates grouped into consecutive runs
        submitted_timesheet_ids: Entries the manager is asked to decide on

    Example:
        >>> request.requested_for_dates
        [[datetime.date(2024, 3, 5), datetime.date(2024, 3, 6)], [datetime.date(2024, 3, 8)]]
    """

    user_id: uuid.UUID
    number_of_days: int
    total_hours: int
    status: TimesheetStatus = TimesheetStatus.SUBMITTED
    requested_for_dates: List[List[dt.date]] = field(default_factory=list)
    submitted_timesheet_ids: List[uuid.UUID] = field(default_factory=list)


class ManagerDashboard:
    """Builds dashboard views over a repository for one manager.

    Example:
        >>> dashboard = ManagerDashboard(repository)
        >>> requests = dashboard.get_dashboard_requests(manager_id)
        >>> df = dashboard.project_utilization(manager_id, start, end)
        >>> print(df[["title", "utilization_pct"]])
    """

    def __init__(self, repository: TimesheetRepository, week_starts_on: int = 6):
        self.repository = repository
        self.week_starts_on = week_starts_on

    def get_dashboard_requests(self, manager_id: uuid.UUID) -> List[DashboardRequest]:
        """Pending requests of every reportee on the manager's projects.

        Args:
            manager_id: Manager whose projects are inspected

        Returns:
            One DashboardRequest per user with submitted entries, ordered by
            user id
        """
        by_user = self.repository.get_timesheets_by_manager(
            manager_id, TimesheetStatus.SUBMITTED
        )

        requests: List[DashboardRequest] = []
        for user_id in sorted(by_user, key=str):
            entries = by_user[user_id]
            distinct_dates = sorted({entry.date for entry in entries})
            requests.append(
                DashboardRequest(
                    user_id=user_id,
                    number_of_days=len(distinct_dates),
                    total_hours=sum(entry.hours for entry in entries),
                    requested_for_dates=group_into_date_runs(distinct_dates, key=lambda d: d),
                    submitted_timesheet_ids=[entry.id for entry in entries],
                )
            )

        logger.info(f"Manager {manager_id} has {len(requests)} pending requests")
        return requests

    def project_utilization(
        self, manager_id: uuid.UUID, start_date: dt.date, end_date: dt.date
    ) -> pd.DataFrame:
        """Planned versus approved hours for each of the manager's projects.

        Args:
            manager_id: Manager whose projects are reported
            start_date: First date of approved hours to count
            end_date: Last date of approved hours to count

        Returns:
            DataFrame with one row per project and UTILIZATION_COLUMNS;
            ``utilization_pct`` is NaN for projects without planned hours
        """
        projects = self.repository.get_projects_created_by(manager_id)
        if not projects:
            logger.info(f"Manager {manager_id} has no projects")
            return pd.DataFrame(columns=UTILIZATION_COLUMNS)

        approved = self.repository.get_timesheets_for_projects(
            [project.id for project in projects],
            TimesheetStatus.APPROVED,
            start_date,
            end_date,
        )
        project_of_task = {
            task.id: project.id for project in projects for task in project.tasks
        }
        utilized: Dict[uuid.UUID, int] = defaultdict(int)
        for entry in approved:
            utilized[project_of_task[entry.task_id]] += entry.hours

        rows = [
            {
                "project_id": project.id,
                "title": project.title,
                "billable_hours": project.billable_hours,
                "non_billable_hours": project.non_billable_hours,
                "planned_hours": project.planned_hours,
                "utilized_hours": utilized[project.id],
            }
            for project in projects
        ]
        df = pd.DataFrame(rows)
        df["remaining_hours"] = df["planned_hours"] - df["utilized_hours"]
        planned = df["planned_hours"].where(df["planned_hours"] > 0)
        df["utilization_pct"] = (df["utilized_hours"] / planned * 100).round(1)

        logger.info(
            f"Computed utilization for {len(df)} projects "
            f"from {len(approved)} approved timesheets"
        )
        return df[UTILIZATION_COLUMNS]

    def approved_weekly_hours(
        self, manager_id: uuid.UUID, start_date: dt.date, end_date: dt.date
    ) -> pd.DataFrame:
        """Approved hours per reportee per week on the manager's projects."""
        projects = self.repository.get_projects_created_by(manager_id)
        approved = self.repository.get_timesheets_for_projects(
            [project.id for project in projects],
            TimesheetStatus.APPROVED,
            start_date,
            end_date,
        )
        return self.weekly_hours_matrix(approved)

    def weekly_hours_matrix(
        self,
        entries: Iterable[TimesheetEntry],
        statuses: Optional[Iterable[TimesheetStatus]] = None,
    ) -> pd.DataFrame:
        """Hours per user per week.

        Args:
            entries: Entries to tabulate
            statuses: Only count entries in these statuses (all when None)

        Returns:
            DataFrame with user ids as index and week start dates
            ("YYYY-MM-DD") as sorted columns; weeks without hours are 0
        """
        wanted = set(statuses) if statuses is not None else None
        totals: Dict[Tuple[uuid.UUID, str], int] = defaultdict(int)

        for entry in entries:
            if wanted is not None and entry.status not in wanted:
                continue
            week_start, _ = week_bounds(entry.date, self.week_starts_on)
            totals[(entry.user_id, week_start.isoformat())] += entry.hours

        if not totals:
            logger.info("No entries to tabulate, returning empty DataFrame")
            return pd.DataFrame()

        matrix_data: Dict[uuid.UUID, Dict[str, int]] = defaultdict(dict)
        for (user_id, week_label), hours in totals.items():
            matrix_data[user_id][week_label] = hours

        df = pd.DataFrame.from_dict(matrix_data, orient="index")
        df = df.reindex(sorted(df.columns), axis=1).fillna(0).astype(int)

        logger.info(f"Generated matrix with {len(df)} users and {len(df.columns)} weeks")
        return df
