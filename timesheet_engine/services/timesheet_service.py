"""Timesheet service: save, submit, duplicate and approve/reject orchestration.

Every mutating operation runs as one unit of work against the repository:
the full batch is staged, written with ``save_changes`` and committed, or
rolled back as a whole on any exception. Business-rule exclusions (frozen
dates, effort limits, validity windows, locked entries) never fail a batch;
they are reported per date as skipped outcomes.
"""

import datetime as dt
import logging
import uuid
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from timesheet_engine.aggregators.notification_grouper import ApprovalNotificationGrouper
from timesheet_engine.calculators.date_utils import DateLike, as_calendar_date, date_range
from timesheet_engine.calculators.effort_limits import EffortLimitValidator
from timesheet_engine.calculators.freeze_window import not_yet_frozen_dates
from timesheet_engine.config.effort_policy import EffortPolicy
from timesheet_engine.exceptions import (
    ApprovalMismatchError,
    InvalidStatusTransitionError,
    InvalidTimesheetRequestError,
    NoSourceProjectsError,
    TransactionError,
)
from timesheet_engine.models.calendar import DayTimesheet, ProjectTimesheet, TaskTimesheet
from timesheet_engine.models.project import Project, Task
from timesheet_engine.models.requests import (
    ApprovalRequest,
    DailyEffortRequest,
    DuplicateEffortsRequest,
    TaskEffort,
)
from timesheet_engine.models.results import (
    DateOutcome,
    OperationResult,
    OperationStatus,
    SkipReason,
)
from timesheet_engine.models.timesheet import TimesheetEntry, TimesheetStatus
from timesheet_engine.repositories.base import TimesheetRepository
from timesheet_engine.services.notification_service import ApprovalNotifier
from timesheet_engine.utils.logging_utils import LogContext, log_function_call
from timesheet_engine.validators.request_validator import TimesheetRequestValidator

logger = logging.getLogger(__name__)

TaskIndex = Dict[uuid.UUID, Tuple[Project, Task]]


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class TimesheetService:
    """Orchestrates timesheet operations for users and managers.

    Args:
        repository: Data access and unit of work
        policy: Effort limits, freeze day and first day of the week
        notifier: Delivers approval/rejection notices after commit; no
            notices are sent when omitted
        validator: Request validator
        clock: Returns the current UTC time

    Example:
        >>> service = TimesheetService(repository, EffortPolicy())
        >>> result = service.save_timesheets(user_id, [
        ...     DailyEffortRequest(date=dt.date(2024, 3, 5),
        ...                        efforts=[TaskEffort(task_id=task_id, hours=6)]),
        ... ])
        >>> result.accepted_dates
        [datetime.date(2024, 3, 5)]
    """

    def __init__(
        self,
        repository: TimesheetRepository,
        policy: EffortPolicy,
        notifier: Optional[ApprovalNotifier] = None,
        validator: Optional[TimesheetRequestValidator] = None,
        clock: Callable[[], dt.datetime] = utc_now,
    ):
        self.repository = repository
        self.policy = policy
        self.notifier = notifier
        self.validator = validator or TimesheetRequestValidator()
        self.limits = EffortLimitValidator(policy)
        self.grouper = ApprovalNotificationGrouper()
        self.clock = clock

    # Helpers

    def _reference_date(self, client_local_date: Optional[DateLike]) -> dt.date:
        if client_local_date is not None:
            return as_calendar_date(client_local_date)
        return self.clock().date()

    def _open_dates(
        self, dates: Sequence[dt.date], reference: dt.date, outcomes: List[DateOutcome]
    ) -> List[dt.date]:
        """Not-yet-frozen dates in order; frozen ones are recorded as skipped."""
        open_dates = not_yet_frozen_dates(dates, reference, self.policy.freeze_day_of_month)
        for date in sorted(set(dates) - open_dates):
            outcomes.append(
                DateOutcome.skipped(date, SkipReason.FROZEN, "Date is frozen")
            )
        return sorted(open_dates)

    @staticmethod
    def _index_visible_tasks(projects: Sequence[Project], user_id: uuid.UUID) -> TaskIndex:
        index: TaskIndex = {}
        for project in projects:
            member = project.active_member(user_id)
            if member is None:
                continue
            for task in project.visible_tasks(member):
                index[task.id] = (project, task)
        return index

    @staticmethod
    def _task_skip_reason(
        task_id: uuid.UUID, date: dt.date, index: TaskIndex
    ) -> Optional[SkipReason]:
        if task_id not in index:
            return SkipReason.TASK_NOT_AVAILABLE
        project, task = index[task_id]
        if not (project.covers(date) and task.covers(date)):
            return SkipReason.OUTSIDE_VALIDITY_WINDOW
        return None

    def _write_and_commit(self, expected_rows: int) -> None:
        rows = self.repository.save_changes()
        if rows != expected_rows:
            raise TransactionError(
                f"Expected {expected_rows} rows to be written but {rows} were affected"
            )
        self.repository.commit()

    def _fail(
        self, operation: str, error: Exception, outcomes: List[DateOutcome]
    ) -> OperationResult:
        self.repository.rollback()
        logger.exception(f"{operation} failed, transaction rolled back: {error}")
        return OperationResult.failure(str(error), outcomes)

    def _stage(
        self,
        user_id: uuid.UUID,
        task: Task,
        date: dt.date,
        hours: int,
        existing: Optional[TimesheetEntry],
        now: dt.datetime,
    ) -> Optional[TimesheetEntry]:
        """Create or update the entry for (user, task, date).

        New entries are only created for positive hours. An existing entry
        set to zero hours goes back to NONE.
        """
        if existing is None:
            if hours <= 0:
                return None
            entry = TimesheetEntry(
                user_id=user_id,
                task_id=task.id,
                task_title=task.title,
                date=date,
                hours=hours,
                status=TimesheetStatus.SAVED,
                last_modified_on=now,
            )
            self.repository.add(entry)
            return entry

        target = TimesheetStatus.SAVED if hours > 0 else TimesheetStatus.NONE
        if not existing.status.can_transition_to(target):
            raise InvalidStatusTransitionError(
                f"Timesheet {existing.id} cannot move from "
                f"{existing.status.name} to {target.name}"
            )
        existing.hours = hours
        existing.status = target
        existing.last_modified_on = now
        self.repository.update(existing)
        return existing

    # Reads

    @log_function_call
    def get_timesheets(
        self, user_id: uuid.UUID, start_date: dt.date, end_date: dt.date
    ) -> List[DayTimesheet]:
        """Calendar view of the user's timesheets between two dates.

        Each day lists the projects active that day in which the user is a
        member, with their loggable tasks and the hours already filled.
        Tasks no longer loggable still appear on days they hold an entry.

        Raises:
            InvalidTimesheetRequestError: If start_date is after end_date
        """
        report = self.validator.validate_date_range(start_date, end_date)
        if report.has_errors():
            raise InvalidTimesheetRequestError.from_report(report)

        projects = self.repository.get_projects_in_range(start_date, end_date, user_id)
        entries = {
            (entry.task_id, entry.date): entry
            for entry in self.repository.get_timesheets_in_range(start_date, end_date, user_id)
        }

        days: List[DayTimesheet] = []
        for date in date_range(start_date, end_date):
            day = DayTimesheet(date=date)
            for project in projects:
                member = project.active_member(user_id)
                if member is None or not project.covers(date):
                    continue
                loggable = {task.id for task in project.loggable_tasks(member, date)}
                tasks = [
                    task
                    for task in project.tasks
                    if task.id in loggable or (task.id, date) in entries
                ]
                if not tasks:
                    continue
                project_day = ProjectTimesheet(
                    project_id=project.id,
                    title=project.title,
                    start_date=project.start_date,
                    end_date=project.end_date,
                )
                for task in tasks:
                    entry = entries.get((task.id, date))
                    project_day.tasks.append(
                        TaskTimesheet(
                            task_id=task.id,
                            task_title=task.title,
                            is_added_by_member=task.is_added_by_member,
                            start_date=task.start_date,
                            end_date=task.end_date,
                            hours=entry.hours if entry else 0,
                            status=entry.status if entry else TimesheetStatus.NONE,
                            manager_comments=entry.manager_comments if entry else "",
                        )
                    )
                day.projects.append(project_day)
            days.append(day)
        return days

    def get_timesheets_by_status(
        self, user_id: uuid.UUID, status: TimesheetStatus
    ) -> List[TimesheetEntry]:
        """The user's entries in ``status``, ordered by date."""
        entries = self.repository.find(
            lambda entry: entry.user_id == user_id and entry.status == status
        )
        return sorted(entries, key=lambda entry: (entry.date, entry.task_title))

    def get_submitted_timesheets_by_ids(
        self, manager_id: uuid.UUID, timesheet_ids: Sequence[uuid.UUID]
    ) -> Optional[List[TimesheetEntry]]:
        """Submitted entries on the manager's projects, all or nothing.

        Returns:
            The entries when every id is a submitted entry on a project
            created by the manager, otherwise None
        """
        wanted = set(timesheet_ids)
        if not wanted:
            return None
        entries = self.repository.get_submitted_timesheets_by_ids(manager_id, wanted)
        if len(entries) != len(wanted):
            logger.warning(
                f"Manager {manager_id} requested {len(wanted)} timesheets "
                f"but only {len(entries)} are submitted on their projects"
            )
            return None
        return entries

    # Mutations

    @log_function_call
    def save_timesheets(
        self,
        user_id: uuid.UUID,
        days: Sequence[DailyEffortRequest],
        client_local_date: Optional[DateLike] = None,
    ) -> OperationResult:
        """Save efforts for several dates in one transaction.

        Dates are processed in order. Each date is skipped as a whole if it
        is frozen or would exceed the daily or weekly limit; single efforts
        are skipped if their task is unavailable, outside its validity
        window or locked by a submitted or approved entry.

        Args:
            user_id: User filling the timesheet
            days: Efforts per date
            client_local_date: The client's "today"; defaults to today in UTC

        Returns:
            COMPLETED with the written entries, NOTHING_TO_DO when every date
            was skipped, or FAILED (no entries) when the write was rolled back

        Raises:
            InvalidTimesheetRequestError: If the request is malformed
        """
        with LogContext(user_id=str(user_id), operation="save_timesheets"):
            now = self.clock()
            report = self.validator.validate_save_request(days, client_local_date, now)
            if report.has_errors():
                raise InvalidTimesheetRequestError.from_report(report)

            outcomes: List[DateOutcome] = []
            efforts_by_date: Dict[dt.date, List[TaskEffort]] = {}
            for day in days:
                if day.efforts:
                    efforts_by_date[day.date] = list(day.efforts)
                else:
                    outcomes.append(
                        DateOutcome.skipped(day.date, SkipReason.NO_EFFORTS, "No efforts")
                    )

            open_dates = self._open_dates(
                list(efforts_by_date), self._reference_date(client_local_date), outcomes
            )
            if not open_dates:
                logger.info("No timesheet dates left to save")
                return OperationResult(status=OperationStatus.NOTHING_TO_DO, outcomes=outcomes)

            projects = self.repository.get_projects_in_range(
                open_dates[0], open_dates[-1], user_id
            )
            index = self._index_visible_tasks(projects, user_id)

            written: List[TimesheetEntry] = []
            self.repository.begin()
            try:
                for date in open_dates:
                    written.extend(
                        self._save_day(user_id, date, efforts_by_date[date], index, now, outcomes)
                    )
                if not written:
                    self.repository.rollback()
                    return OperationResult(
                        status=OperationStatus.NOTHING_TO_DO, outcomes=outcomes
                    )
                self._write_and_commit(len(written))
            except Exception as e:
                return self._fail("Saving timesheets", e, outcomes)

            logger.info(f"Saved {len(written)} timesheets for user {user_id}")
            return OperationResult(
                status=OperationStatus.COMPLETED, timesheets=written, outcomes=outcomes
            )

    def _save_day(
        self,
        user_id: uuid.UUID,
        date: dt.date,
        efforts: List[TaskEffort],
        index: TaskIndex,
        now: dt.datetime,
        outcomes: List[DateOutcome],
    ) -> List[TimesheetEntry]:
        existing_by_task = {
            entry.task_id: entry
            for entry in self.repository.get_timesheets_for_tasks_on_date(
                date, [effort.task_id for effort in efforts], user_id
            )
        }

        accepted: List[TaskEffort] = []
        for effort in efforts:
            reason = self._task_skip_reason(effort.task_id, date, index)
            existing = existing_by_task.get(effort.task_id)
            if reason is None and existing is not None and not existing.status.is_editable:
                reason = SkipReason.ENTRY_LOCKED
            if reason is not None:
                outcomes.append(DateOutcome.skipped(date, reason, task_id=effort.task_id))
                continue
            accepted.append(effort)

        if not accepted:
            return []

        week_start, week_end = self.limits.week_of(date)
        week_entries = self.repository.get_timesheets_in_range(week_start, week_end, user_id)
        accepted_ids = {effort.task_id for effort in accepted}
        existing_hours = sum(
            entry.hours
            for entry in week_entries
            if entry.date == date and entry.task_id not in accepted_ids
        )
        proposed_hours = sum(effort.hours for effort in accepted)

        reason = self.limits.check(date, existing_hours, proposed_hours, week_entries)
        if reason is not None:
            outcomes.append(DateOutcome.skipped(date, reason))
            return []

        written = []
        for effort in accepted:
            _, task = index[effort.task_id]
            entry = self._stage(
                user_id, task, date, effort.hours, existing_by_task.get(effort.task_id), now
            )
            if entry is not None:
                written.append(entry)

        if written:
            outcomes.append(DateOutcome.accepted(date))
        else:
            outcomes.append(
                DateOutcome.skipped(
                    date, SkipReason.NO_EFFORTS, "Only zero hours for tasks without entries"
                )
            )
        return written

    @log_function_call
    def submit_timesheets(
        self, user_id: uuid.UUID, reference_date: Optional[DateLike] = None
    ) -> OperationResult:
        """Submit every saved, not yet frozen entry of the user for approval.

        Args:
            user_id: User submitting the timesheet
            reference_date: The client's "today"; defaults to today in UTC

        Returns:
            COMPLETED with the submitted entries, NOTHING_TO_DO when there is
            nothing saved in the open window, or FAILED on rollback

        Raises:
            InvalidTimesheetRequestError: If reference_date is not a
                plausible current date
        """
        with LogContext(user_id=str(user_id), operation="submit_timesheets"):
            now = self.clock()
            report = self.validator.validate_submit_request(reference_date, now)
            if report.has_errors():
                raise InvalidTimesheetRequestError.from_report(report)

            outcomes: List[DateOutcome] = []
            saved = self.repository.find(
                lambda entry: entry.user_id == user_id
                and entry.status == TimesheetStatus.SAVED
            )
            open_dates = set(
                self._open_dates(
                    [entry.date for entry in saved],
                    self._reference_date(reference_date),
                    outcomes,
                )
            )
            to_submit = sorted(
                (entry for entry in saved if entry.date in open_dates),
                key=lambda entry: entry.date,
            )
            if not to_submit:
                logger.info(f"No saved timesheets to submit for user {user_id}")
                return OperationResult(status=OperationStatus.NOTHING_TO_DO, outcomes=outcomes)

            for entry in to_submit:
                entry.status = TimesheetStatus.SUBMITTED
                entry.submitted_on = now
                entry.last_modified_on = now
            outcomes.extend(DateOutcome.accepted(date) for date in sorted(open_dates))

            self.repository.begin()
            try:
                self.repository.update_many(to_submit)
                self._write_and_commit(len(to_submit))
            except Exception as e:
                return self._fail("Submitting timesheets", e, outcomes)

            logger.info(f"Submitted {len(to_submit)} timesheets for user {user_id}")
            return OperationResult(
                status=OperationStatus.COMPLETED, timesheets=to_submit, outcomes=outcomes
            )

    @log_function_call
    def duplicate_efforts(
        self,
        user_id: uuid.UUID,
        request: DuplicateEffortsRequest,
        client_local_date: Optional[DateLike] = None,
    ) -> OperationResult:
        """Copy the efforts of a source date onto several target dates.

        Each target date is checked against the freeze window and the weekly
        limit only; tasks outside their project or task window on a target
        date, and entries locked by submission or approval, are skipped.

        Raises:
            InvalidTimesheetRequestError: If the request is malformed
            NoSourceProjectsError: If the user has no projects on the source date
        """
        with LogContext(user_id=str(user_id), operation="duplicate_efforts"):
            now = self.clock()
            report = self.validator.validate_duplicate_request(request, client_local_date, now)
            if report.has_errors():
                raise InvalidTimesheetRequestError.from_report(report)

            source_date = request.source_date
            source_projects = self.repository.get_projects_in_range(
                source_date, source_date, user_id
            )
            if not source_projects:
                raise NoSourceProjectsError(
                    f"No projects found for user {user_id} on {source_date}"
                )

            index = self._index_visible_tasks(source_projects, user_id)
            source_entries = [
                entry
                for entry in self.repository.get_timesheets_in_range(
                    source_date, source_date, user_id
                )
                if entry.hours > 0
            ]

            outcomes: List[DateOutcome] = []
            targets = sorted(set(request.target_dates) - {source_date})
            open_targets = self._open_dates(
                targets, self._reference_date(client_local_date), outcomes
            )
            if not source_entries:
                outcomes.extend(
                    DateOutcome.skipped(date, SkipReason.NO_EFFORTS, "Source date has no efforts")
                    for date in open_targets
                )
                return OperationResult(status=OperationStatus.NOTHING_TO_DO, outcomes=outcomes)
            if not open_targets:
                return OperationResult(status=OperationStatus.NOTHING_TO_DO, outcomes=outcomes)

            written: List[TimesheetEntry] = []
            self.repository.begin()
            try:
                for target in open_targets:
                    written.extend(
                        self._duplicate_onto(user_id, target, source_entries, index, now, outcomes)
                    )
                if not written:
                    self.repository.rollback()
                    return OperationResult(
                        status=OperationStatus.NOTHING_TO_DO, outcomes=outcomes
                    )
                self._write_and_commit(len(written))
            except Exception as e:
                return self._fail("Duplicating efforts", e, outcomes)

            logger.info(
                f"Duplicated efforts of {source_date} onto "
                f"{len(set(e.date for e in written))} dates for user {user_id}"
            )
            return OperationResult(
                status=OperationStatus.COMPLETED, timesheets=written, outcomes=outcomes
            )

    def _duplicate_onto(
        self,
        user_id: uuid.UUID,
        target: dt.date,
        source_entries: List[TimesheetEntry],
        index: TaskIndex,
        now: dt.datetime,
        outcomes: List[DateOutcome],
    ) -> List[TimesheetEntry]:
        existing_by_task = {
            entry.task_id: entry
            for entry in self.repository.get_timesheets_for_tasks_on_date(
                target, [source.task_id for source in source_entries], user_id
            )
        }

        copyable: List[TimesheetEntry] = []
        for source in source_entries:
            reason = self._task_skip_reason(source.task_id, target, index)
            existing = existing_by_task.get(source.task_id)
            if reason is None and existing is not None and not existing.status.is_editable:
                reason = SkipReason.ENTRY_LOCKED
            if reason is not None:
                outcomes.append(DateOutcome.skipped(target, reason, task_id=source.task_id))
                continue
            copyable.append(source)

        if not copyable:
            return []

        week_start, week_end = self.limits.week_of(target)
        week_entries = self.repository.get_timesheets_in_range(week_start, week_end, user_id)
        copied_ids = {source.task_id for source in copyable}
        existing_hours = sum(
            entry.hours
            for entry in week_entries
            if entry.date == target and entry.task_id not in copied_ids
        )
        proposed_hours = sum(source.hours for source in copyable)

        reason = self.limits.check(
            target, existing_hours, proposed_hours, week_entries, check_daily=False
        )
        if reason is not None:
            outcomes.append(DateOutcome.skipped(target, reason))
            return []

        written = []
        for source in copyable:
            _, task = index[source.task_id]
            entry = self._stage(
                user_id, task, target, source.hours, existing_by_task.get(source.task_id), now
            )
            if entry is not None:
                written.append(entry)
        outcomes.append(DateOutcome.accepted(target))
        return written

    @log_function_call(level="INFO")
    def approve_or_reject(
        self,
        timesheets: Sequence[TimesheetEntry],
        approvals: Sequence[ApprovalRequest],
        status: TimesheetStatus,
    ) -> OperationResult:
        """Apply a manager's decision to submitted timesheets.

        Every entry must have exactly one decision and vice versa. Comments
        are kept on rejection and cleared on approval. After commit the
        users are notified; notification problems never affect the result.

        Args:
            timesheets: Submitted entries, usually from
                get_submitted_timesheets_by_ids
            approvals: One decision per entry
            status: APPROVED or REJECTED

        Raises:
            InvalidTimesheetRequestError: If the decisions are malformed
            ApprovalMismatchError: If entries and decisions do not match 1:1
            InvalidStatusTransitionError: If an entry is not SUBMITTED
        """
        with LogContext(operation=f"approve_or_reject:{status.name.lower()}"):
            report = self.validator.validate_approval_request(approvals, status)
            if report.has_errors():
                raise InvalidTimesheetRequestError.from_report(report)

            decisions = {approval.timesheet_id: approval for approval in approvals}
            timesheet_ids = [entry.id for entry in timesheets]
            unmatched = set(timesheet_ids) ^ set(decisions)
            if unmatched or len(timesheet_ids) != len(decisions):
                raise ApprovalMismatchError(
                    f"{len(timesheets)} timesheets do not match {len(approvals)} decisions; "
                    f"unmatched ids: {sorted(str(i) for i in unmatched)}"
                )

            for entry in timesheets:
                if not entry.status.can_transition_to(status):
                    raise InvalidStatusTransitionError(
                        f"Timesheet {entry.id} is {entry.status.name} and cannot be "
                        f"{status.name.lower()}"
                    )

            now = self.clock()
            updated = [entry.model_copy(deep=True) for entry in timesheets]
            for entry in updated:
                entry.status = status
                entry.manager_comments = (
                    decisions[entry.id].manager_comments
                    if status == TimesheetStatus.REJECTED
                    else ""
                )
                entry.last_modified_on = now

            outcomes = [DateOutcome.accepted(date) for date in sorted({e.date for e in updated})]
            self.repository.begin()
            try:
                self.repository.update_many(updated)
                self._write_and_commit(len(updated))
            except Exception as e:
                return self._fail(f"Setting timesheets to {status.name}", e, outcomes)

            logger.info(f"{status.name.capitalize()} {len(updated)} timesheets")
            self._notify(updated, status)
            return OperationResult(
                status=OperationStatus.COMPLETED, timesheets=updated, outcomes=outcomes
            )

    def _notify(self, entries: List[TimesheetEntry], status: TimesheetStatus) -> None:
        if self.notifier is None:
            return
        try:
            projects = self.repository.get_projects_for_tasks(e.task_id for e in entries)
            self.notifier.notify(self.grouper.group(entries, projects, status))
        except Exception:
            logger.exception(f"Sending {status.name.lower()} notifications failed")
