"""Fixtures for CLI tests: a runner and a JSON data file around today."""

import datetime as dt
import uuid

import pytest
from click.testing import CliRunner

from timesheet_engine.models import Member, Project, Task
from timesheet_engine.repositories import InMemoryTimesheetRepository, save_repository


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_env(mock_env, monkeypatch):
    """Test settings with quiet logging so command output stays readable."""
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return mock_env


@pytest.fixture
def utc_today():
    """Today in UTC: the CLI service runs on the real clock."""
    return dt.datetime.now(dt.timezone.utc).date()


@pytest.fixture
def cli_project(utc_today, user_id, manager_id):
    project_id = uuid.uuid4()
    start = utc_today - dt.timedelta(days=60)
    end = utc_today + dt.timedelta(days=60)
    return Project(
        id=project_id,
        title="Intranet Revamp",
        billable_hours=100,
        start_date=start,
        end_date=end,
        created_by=manager_id,
        members=[Member(project_id=project_id, user_id=user_id)],
        tasks=[Task(project_id=project_id, title="Development", start_date=start, end_date=end)],
    )


@pytest.fixture
def cli_task(cli_project):
    return cli_project.tasks[0]


@pytest.fixture
def seed_data_file(tmp_path, cli_project, conversation):
    """Write a data file with the project, the conversation and ``entries``."""

    def _seed(*entries):
        path = tmp_path / "timesheets.json"
        repository = InMemoryTimesheetRepository(
            projects=[cli_project], timesheets=entries, conversations=[conversation]
        )
        save_repository(repository, path)
        return path

    return _seed
