"""Validation of requests before the timesheet service acts on them.

Problems found here are caller errors: the request is rejected as a whole
and nothing is written. Business-rule exclusions (frozen dates, effort
limits, validity windows) are not validation failures and are handled by
the service as per-date skips.
"""

import datetime as dt
from collections import Counter
from typing import Optional, Sequence

from timesheet_engine.calculators.freeze_window import is_client_current_date_valid
from timesheet_engine.models.requests import (
    ApprovalRequest,
    DailyEffortRequest,
    DuplicateEffortsRequest,
)
from timesheet_engine.models.timesheet import TimesheetStatus
from timesheet_engine.validators.validation_report import ValidationReport


class TimesheetRequestValidator:
    """Validates service requests and collects issues into a report.

    Example:
        >>> validator = TimesheetRequestValidator()
        >>> report = validator.validate_save_request([], None, dt.datetime(2024, 3, 4))
        >>> report.is_valid()
        False
    """

    @staticmethod
    def validate_client_date(
        client_local_date: Optional[dt.date],
        utc_now: dt.datetime,
        report: ValidationReport,
    ) -> None:
        """Reject a client "today" that no timezone could produce."""
        if client_local_date is None:
            return
        if not is_client_current_date_valid(client_local_date, utc_now):
            report.add_error(
                "client_local_date",
                "The provided current date is invalid",
                client_local_date,
            )

    def validate_save_request(
        self,
        days: Sequence[DailyEffortRequest],
        client_local_date: Optional[dt.date],
        utc_now: dt.datetime,
    ) -> ValidationReport:
        """Validate a batch of daily efforts to save.

        Days without efforts are allowed (they are dropped), but the batch
        must contain at least one effort, each date at most once, and each
        task at most once per date.
        """
        report = ValidationReport()
        self.validate_client_date(client_local_date, utc_now, report)

        if not days:
            report.add_error("days", "Timesheets to save are null or empty", days)
            return report

        if not any(day.efforts for day in days):
            report.add_error("days", "No efforts were provided for any date", len(days))

        for date, count in Counter(day.date for day in days).items():
            if count > 1:
                report.add_error("date", "Date appears more than once in the batch", date)

        for index, day in enumerate(days):
            task_counts = Counter(effort.task_id for effort in day.efforts)
            for task_id, count in task_counts.items():
                if count > 1:
                    report.add_error(
                        "task_id",
                        "Task appears more than once for the same date",
                        task_id,
                        context={"day": index, "date": day.date.isoformat()},
                    )

        return report

    def validate_submit_request(
        self, reference_date: Optional[dt.date], utc_now: dt.datetime
    ) -> ValidationReport:
        """A submit reference date must be a plausible client "today"."""
        report = ValidationReport()
        self.validate_client_date(reference_date, utc_now, report)
        return report

    def validate_duplicate_request(
        self,
        request: DuplicateEffortsRequest,
        client_local_date: Optional[dt.date],
        utc_now: dt.datetime,
    ) -> ValidationReport:
        """Validate a duplicate-efforts request."""
        report = ValidationReport()
        self.validate_client_date(client_local_date, utc_now, report)

        if not request.target_dates:
            report.add_error("target_dates", "At least one target date is required", [])
            return report

        if request.source_date in request.target_dates:
            report.add_warning(
                "target_dates",
                "The source date is among the target dates and will be ignored",
                request.source_date,
            )

        if len(set(request.target_dates)) != len(request.target_dates):
            report.add_info("target_dates", "Repeated target dates are merged", None)

        return report

    def validate_approval_request(
        self,
        approvals: Sequence[ApprovalRequest],
        status: TimesheetStatus,
    ) -> ValidationReport:
        """Validate manager decisions for an approve or reject batch."""
        report = ValidationReport()

        if status not in (TimesheetStatus.APPROVED, TimesheetStatus.REJECTED):
            report.add_error(
                "status",
                "Timesheets can only be approved or rejected",
                status.name,
            )

        if not approvals:
            report.add_error("approvals", "Timesheets to update are null or empty", approvals)
            return report

        for timesheet_id, count in Counter(a.timesheet_id for a in approvals).items():
            if count > 1:
                report.add_error(
                    "timesheet_id",
                    "Timesheet appears more than once in the batch",
                    timesheet_id,
                )

        for approval in approvals:
            if approval.status is not None and approval.status != status:
                report.add_error(
                    "status",
                    f"Decision {approval.status.name} does not match {status.name}",
                    approval.timesheet_id,
                )
            if status == TimesheetStatus.REJECTED and not approval.manager_comments.strip():
                report.add_warning(
                    "manager_comments",
                    "Rejection without a comment",
                    approval.timesheet_id,
                )

        return report

    @staticmethod
    def validate_date_range(start_date: dt.date, end_date: dt.date) -> ValidationReport:
        """The start of a calendar range may not be after its end."""
        report = ValidationReport()
        if start_date > end_date:
            report.add_error(
                "start_date",
                "The start date must be less than or equal to end date",
                start_date,
                context={"end_date": end_date.isoformat()},
            )
        return report
