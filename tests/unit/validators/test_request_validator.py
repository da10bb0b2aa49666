"""Unit tests for service request validation."""

import datetime as dt
import uuid

import pytest

from timesheet_engine.models import (
    ApprovalRequest,
    DailyEffortRequest,
    DuplicateEffortsRequest,
    TaskEffort,
    TimesheetStatus,
)
from timesheet_engine.validators import (
    TimesheetRequestValidator,
    ValidationSeverity,
)

UTC_NOW = dt.datetime(2024, 3, 20, 12, 0)


@pytest.fixture
def validator():
    return TimesheetRequestValidator()


def day(date, *efforts):
    return DailyEffortRequest(
        date=date, efforts=[TaskEffort(task_id=task_id, hours=hours) for task_id, hours in efforts]
    )


class TestSaveRequestValidation:
    """Tests for validate_save_request."""

    def test_valid_request(self, validator):
        report = validator.validate_save_request(
            [day(dt.date(2024, 3, 18), (uuid.uuid4(), 4))], dt.date(2024, 3, 20), UTC_NOW
        )
        assert report.is_valid()

    def test_empty_batch(self, validator):
        report = validator.validate_save_request([], None, UTC_NOW)
        assert report.has_errors()

    def test_batch_without_any_effort(self, validator):
        report = validator.validate_save_request([day(dt.date(2024, 3, 18))], None, UTC_NOW)
        assert report.has_errors()

    def test_day_without_effort_allowed_next_to_filled_day(self, validator):
        report = validator.validate_save_request(
            [day(dt.date(2024, 3, 18)), day(dt.date(2024, 3, 19), (uuid.uuid4(), 2))],
            None,
            UTC_NOW,
        )
        assert report.is_valid()

    def test_duplicate_date(self, validator):
        task_id = uuid.uuid4()
        report = validator.validate_save_request(
            [day(dt.date(2024, 3, 18), (task_id, 2)), day(dt.date(2024, 3, 18), (task_id, 3))],
            None,
            UTC_NOW,
        )
        assert [i.field for i in report.get_errors()] == ["date"]

    def test_duplicate_task_on_same_date(self, validator):
        task_id = uuid.uuid4()
        report = validator.validate_save_request(
            [day(dt.date(2024, 3, 18), (task_id, 2), (task_id, 3))], None, UTC_NOW
        )
        assert [i.field for i in report.get_errors()] == ["task_id"]

    def test_implausible_client_date(self, validator):
        report = validator.validate_save_request(
            [day(dt.date(2024, 3, 18), (uuid.uuid4(), 2))], dt.date(2024, 3, 25), UTC_NOW
        )
        assert [i.field for i in report.get_errors()] == ["client_local_date"]


class TestDuplicateRequestValidation:
    """Tests for validate_duplicate_request."""

    def test_requires_targets(self, validator):
        request = DuplicateEffortsRequest(source_date=dt.date(2024, 3, 18), target_dates=[])
        assert validator.validate_duplicate_request(request, None, UTC_NOW).has_errors()

    def test_source_among_targets_is_a_warning(self, validator):
        request = DuplicateEffortsRequest(
            source_date=dt.date(2024, 3, 18),
            target_dates=[dt.date(2024, 3, 18), dt.date(2024, 3, 19)],
        )
        report = validator.validate_duplicate_request(request, None, UTC_NOW)
        assert report.is_valid()
        assert report.warning_count == 1

    def test_repeated_targets_are_info(self, validator):
        request = DuplicateEffortsRequest(
            source_date=dt.date(2024, 3, 18),
            target_dates=[dt.date(2024, 3, 19), dt.date(2024, 3, 19)],
        )
        report = validator.validate_duplicate_request(request, None, UTC_NOW)
        assert report.info_count == 1


class TestSubmitRequestValidation:
    """Tests for validate_submit_request."""

    def test_no_reference_date(self, validator):
        assert validator.validate_submit_request(None, UTC_NOW).is_valid()

    def test_reference_date_in_a_past_month(self, validator):
        report = validator.validate_submit_request(dt.date(2024, 2, 15), UTC_NOW)
        assert [i.field for i in report.get_errors()] == ["client_local_date"]


class TestApprovalRequestValidation:
    """Tests for validate_approval_request."""

    def test_only_approve_or_reject(self, validator):
        approvals = [ApprovalRequest(timesheet_id=uuid.uuid4())]
        report = validator.validate_approval_request(approvals, TimesheetStatus.SAVED)
        assert report.has_errors()

    def test_empty_approvals(self, validator):
        assert validator.validate_approval_request([], TimesheetStatus.APPROVED).has_errors()

    def test_repeated_timesheet(self, validator):
        timesheet_id = uuid.uuid4()
        approvals = [ApprovalRequest(timesheet_id=timesheet_id)] * 2
        report = validator.validate_approval_request(approvals, TimesheetStatus.APPROVED)
        assert report.has_errors()

    def test_decision_must_match_operation(self, validator):
        approvals = [ApprovalRequest(timesheet_id=uuid.uuid4(), status=TimesheetStatus.REJECTED)]
        report = validator.validate_approval_request(approvals, TimesheetStatus.APPROVED)
        assert report.has_errors()

    def test_rejection_without_comment_warns(self, validator):
        approvals = [ApprovalRequest(timesheet_id=uuid.uuid4())]
        report = validator.validate_approval_request(approvals, TimesheetStatus.REJECTED)
        assert report.is_valid()
        assert report.get_warnings()[0].severity == ValidationSeverity.WARNING


class TestDateRangeValidation:
    """Tests for validate_date_range."""

    def test_inverted_range(self):
        report = TimesheetRequestValidator.validate_date_range(dt.date(2024, 3, 5), dt.date(2024, 3, 4))
        assert report.has_errors()

    def test_single_day_range(self):
        report = TimesheetRequestValidator.validate_date_range(dt.date(2024, 3, 5), dt.date(2024, 3, 5))
        assert report.is_valid()
