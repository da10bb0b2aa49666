"""Unit tests for timesheet entries, requests and status lifecycle."""

import datetime as dt
import uuid

import pytest
from pydantic import ValidationError

from timesheet_engine.models import (
    ApprovalRequest,
    DailyEffortRequest,
    TaskEffort,
    TimesheetEntry,
    TimesheetStatus,
)


class TestTimesheetStatus:
    """Tests for the status lifecycle."""

    def test_values_match_stored_codes(self):
        assert [s.value for s in TimesheetStatus] == [0, 1, 2, 3, 4]

    @pytest.mark.parametrize(
        "status,editable",
        [
            (TimesheetStatus.NONE, True),
            (TimesheetStatus.SAVED, True),
            (TimesheetStatus.SUBMITTED, False),
            (TimesheetStatus.APPROVED, False),
            (TimesheetStatus.REJECTED, True),
        ],
    )
    def test_editable_states(self, status, editable):
        assert status.is_editable is editable

    def test_saved_can_be_submitted(self):
        assert TimesheetStatus.SAVED.can_transition_to(TimesheetStatus.SUBMITTED)

    def test_submitted_can_be_approved_or_rejected(self):
        assert TimesheetStatus.SUBMITTED.can_transition_to(TimesheetStatus.APPROVED)
        assert TimesheetStatus.SUBMITTED.can_transition_to(TimesheetStatus.REJECTED)
        assert not TimesheetStatus.SUBMITTED.can_transition_to(TimesheetStatus.SAVED)

    def test_approved_is_final(self):
        assert not any(
            TimesheetStatus.APPROVED.can_transition_to(target) for target in TimesheetStatus
        )

    def test_none_cannot_skip_to_submitted(self):
        assert not TimesheetStatus.NONE.can_transition_to(TimesheetStatus.SUBMITTED)

    def test_rejected_can_be_saved_again(self):
        assert TimesheetStatus.REJECTED.can_transition_to(TimesheetStatus.SAVED)


class TestTimesheetEntry:
    """Tests for TimesheetEntry validation."""

    def test_defaults(self):
        entry = TimesheetEntry(user_id=uuid.uuid4(), task_id=uuid.uuid4(), date=dt.date(2024, 3, 4), hours=3)
        assert entry.status == TimesheetStatus.NONE
        assert entry.manager_comments == ""
        assert isinstance(entry.id, uuid.UUID)

    def test_negative_hours_rejected(self):
        with pytest.raises(ValidationError):
            TimesheetEntry(user_id=uuid.uuid4(), task_id=uuid.uuid4(), date=dt.date(2024, 3, 4), hours=-1)

    def test_none_comments_become_empty(self):
        entry = TimesheetEntry(
            user_id=uuid.uuid4(),
            task_id=uuid.uuid4(),
            date=dt.date(2024, 3, 4),
            hours=3,
            manager_comments=None,
        )
        assert entry.manager_comments == ""

    def test_comment_longer_than_100_rejected(self):
        with pytest.raises(ValidationError):
            TimesheetEntry(
                user_id=uuid.uuid4(),
                task_id=uuid.uuid4(),
                date=dt.date(2024, 3, 4),
                hours=3,
                manager_comments="x" * 101,
            )

    def test_assignment_is_validated(self):
        entry = TimesheetEntry(user_id=uuid.uuid4(), task_id=uuid.uuid4(), date=dt.date(2024, 3, 4), hours=3)
        with pytest.raises(ValidationError):
            entry.hours = -2

    def test_status_accepts_stored_integer(self):
        entry = TimesheetEntry(
            user_id=uuid.uuid4(), task_id=uuid.uuid4(), date="2024-03-04", hours=3, status=2
        )
        assert entry.status == TimesheetStatus.SUBMITTED
        assert entry.date == dt.date(2024, 3, 4)

    def test_json_round_trip_keeps_status(self):
        entry = TimesheetEntry(
            user_id=uuid.uuid4(),
            task_id=uuid.uuid4(),
            date=dt.date(2024, 3, 4),
            hours=3,
            status=TimesheetStatus.REJECTED,
            manager_comments="Wrong task",
        )
        restored = TimesheetEntry.model_validate_json(entry.model_dump_json())
        assert restored == entry


class TestRequests:
    """Tests for request models."""

    def test_daily_total_hours(self):
        request = DailyEffortRequest(
            date=dt.date(2024, 3, 4),
            efforts=[TaskEffort(task_id=uuid.uuid4(), hours=5), TaskEffort(task_id=uuid.uuid4(), hours=2)],
        )
        assert request.total_hours == 7

    def test_task_effort_rejects_negative_hours(self):
        with pytest.raises(ValidationError):
            TaskEffort(task_id=uuid.uuid4(), hours=-3)

    def test_approval_comment_limit(self):
        with pytest.raises(ValidationError):
            ApprovalRequest(timesheet_id=uuid.uuid4(), manager_comments="x" * 101)

    def test_unknown_fields_forbidden(self):
        with pytest.raises(ValidationError):
            TaskEffort(task_id=uuid.uuid4(), hours=1, note="extra")
