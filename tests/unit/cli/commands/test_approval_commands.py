"""Unit tests for the manager commands."""

import json
import uuid
from unittest.mock import patch

import pytest

from timesheet_engine.cli.commands import approve_timesheets, reject_timesheets, show_dashboard
from timesheet_engine.models import TimesheetEntry, TimesheetStatus


@pytest.fixture
def submitted(cli_task, user_id, utc_today):
    return TimesheetEntry(
        user_id=user_id,
        task_id=cli_task.id,
        task_title=cli_task.title,
        date=utc_today,
        hours=6,
        status=TimesheetStatus.SUBMITTED,
    )


def stored_statuses(path):
    data = json.loads(path.read_text(encoding="utf-8"))
    return [(item["status"], item["manager_comments"]) for item in data["timesheets"]]


class TestApproveCommand:
    """Test suite for approve."""

    def test_approve(self, runner, cli_env, seed_data_file, submitted, manager_id):
        path = seed_data_file(submitted)
        result = runner.invoke(
            approve_timesheets,
            ["--manager", str(manager_id), "--timesheet-id", str(submitted.id), "--data-file", str(path)],
        )

        assert result.exit_code == 0, result.output
        assert "Approved 1 timesheet(s)" in result.output
        assert stored_statuses(path) == [(TimesheetStatus.APPROVED.value, "")]

    def test_unknown_timesheet_is_not_found(self, runner, cli_env, seed_data_file, submitted, manager_id):
        path = seed_data_file(submitted)
        result = runner.invoke(
            approve_timesheets,
            [
                "--manager", str(manager_id),
                "--timesheet-id", str(submitted.id),
                "--timesheet-id", str(uuid.uuid4()),
                "--data-file", str(path),
            ],
        )

        assert result.exit_code == 4
        assert "Processing Error" in result.output
        assert "Approval Mismatch" not in result.output
        assert stored_statuses(path) == [(TimesheetStatus.SUBMITTED.value, "")]

    def test_other_managers_cannot_approve(self, runner, cli_env, seed_data_file, submitted):
        path = seed_data_file(submitted)
        result = runner.invoke(
            approve_timesheets,
            ["--manager", str(uuid.uuid4()), "--timesheet-id", str(submitted.id), "--data-file", str(path)],
        )
        assert result.exit_code == 4
        assert "projects you manage" in result.output
        assert stored_statuses(path) == [(TimesheetStatus.SUBMITTED.value, "")]

    def test_notify_sends_card(self, runner, cli_env, seed_data_file, submitted, manager_id):
        path = seed_data_file(submitted)
        with patch("timesheet_engine.cli.utils.session.HttpNotificationSender") as sender_class:
            result = runner.invoke(
                approve_timesheets,
                [
                    "--manager", str(manager_id),
                    "--timesheet-id", str(submitted.id),
                    "--notify",
                    "--data-file", str(path),
                ],
            )

        assert result.exit_code == 0, result.output
        sender = sender_class.return_value
        sender.send_approval_notice.assert_called_once()
        card = sender.send_approval_notice.call_args[0][1]
        assert card.total_hours == 6


class TestRejectCommand:
    """Test suite for reject."""

    def test_reject_with_comment(self, runner, cli_env, seed_data_file, submitted, manager_id):
        path = seed_data_file(submitted)
        result = runner.invoke(
            reject_timesheets,
            [
                "--manager", str(manager_id),
                "--timesheet-id", str(submitted.id),
                "--comment", "Wrong task",
                "--data-file", str(path),
            ],
        )

        assert result.exit_code == 0, result.output
        assert stored_statuses(path) == [(TimesheetStatus.REJECTED.value, "Wrong task")]

    def test_comment_too_long(self, runner, cli_env, seed_data_file, submitted, manager_id):
        path = seed_data_file(submitted)
        result = runner.invoke(
            reject_timesheets,
            [
                "--manager", str(manager_id),
                "--timesheet-id", str(submitted.id),
                "--comment", "x" * 101,
                "--data-file", str(path),
            ],
        )
        assert result.exit_code == 2
        assert stored_statuses(path) == [(TimesheetStatus.SUBMITTED.value, "")]


class TestDashboardCommand:
    """Test suite for dashboard."""

    def test_dashboard(self, runner, cli_env, seed_data_file, submitted, manager_id, user_id):
        path = seed_data_file(submitted)
        result = runner.invoke(show_dashboard, ["--manager", str(manager_id), "--data-file", str(path)])

        assert result.exit_code == 0, result.output
        assert "Pending requests" in result.output
        assert str(user_id) in result.output
        assert "Intranet Revamp" in result.output

    def test_dashboard_without_projects(self, runner, cli_env, seed_data_file):
        path = seed_data_file()
        result = runner.invoke(show_dashboard, ["--manager", str(uuid.uuid4()), "--data-file", str(path)])

        assert result.exit_code == 0
        assert "No pending requests" in result.output
        assert "No projects" in result.output
