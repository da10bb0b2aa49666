"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import uuid
from typing import Dict

import pytest

from timesheet_engine.config import EffortPolicy, TimesheetEngineConfig, reload_config
from timesheet_engine.config.logging_config import reset_logging
from timesheet_engine.models import (
    ConversationReference,
    Member,
    Project,
    Task,
    TimesheetEntry,
    TimesheetStatus,
)
from timesheet_engine.repositories import InMemoryTimesheetRepository

MANAGER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000aa")
USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
OTHER_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")

# Wednesday 2024-03-20: past the default freeze day, so February is frozen.
TODAY = dt.date(2024, 3, 20)


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'DAILY_EFFORTS_LIMIT': '9',
        'WEEKLY_EFFORTS_LIMIT': '15',
        'TIMESHEET_FREEZE_DAY_OF_MONTH': '12',
        'WEEK_STARTS_ON': 'sunday',
        'ENVIRONMENT': 'testing',
        'DEBUG': 'false',
        'LOG_LEVEL': 'DEBUG'
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)

    # Clear the global config to force reload with test values
    import timesheet_engine.config.settings
    timesheet_engine.config.settings._config = None

    yield test_env_vars

    timesheet_engine.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> TimesheetEngineConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def user_id() -> uuid.UUID:
    return USER_ID


@pytest.fixture
def other_user_id() -> uuid.UUID:
    return OTHER_USER_ID


@pytest.fixture
def manager_id() -> uuid.UUID:
    return MANAGER_ID


@pytest.fixture
def today() -> dt.date:
    return TODAY


@pytest.fixture
def policy() -> EffortPolicy:
    """Limits used throughout the tests: 9 hours a day, 15 a week."""
    return EffortPolicy(
        daily_efforts_limit=9,
        weekly_efforts_limit=15,
        freeze_day_of_month=12,
    )


@pytest.fixture
def clock():
    """Fixed UTC clock at noon on TODAY."""
    now = dt.datetime.combine(TODAY, dt.time(12, 0), tzinfo=dt.timezone.utc)
    return lambda: now


@pytest.fixture
def project() -> Project:
    """Project from February to April 2024 with USER_ID as member and two tasks."""
    project_id = uuid.uuid4()
    return Project(
        id=project_id,
        title="Intranet Revamp",
        client_name="Contoso",
        billable_hours=100,
        non_billable_hours=20,
        start_date=dt.date(2024, 2, 1),
        end_date=dt.date(2024, 4, 30),
        created_by=MANAGER_ID,
        members=[Member(project_id=project_id, user_id=USER_ID)],
        tasks=[
            Task(
                project_id=project_id,
                title="Development",
                start_date=dt.date(2024, 2, 1),
                end_date=dt.date(2024, 4, 30),
            ),
            Task(
                project_id=project_id,
                title="Design",
                start_date=dt.date(2024, 3, 1),
                end_date=dt.date(2024, 3, 22),
            ),
        ],
    )


@pytest.fixture
def dev_task(project) -> Task:
    return project.tasks[0]


@pytest.fixture
def design_task(project) -> Task:
    return project.tasks[1]


@pytest.fixture
def conversation() -> ConversationReference:
    return ConversationReference(
        user_id=USER_ID,
        conversation_id="a:1Xyz",
        service_url="https://smba.trafficmanager.net/emea/",
    )


@pytest.fixture
def repository(project, conversation) -> InMemoryTimesheetRepository:
    """Repository seeded with the project and the user's conversation."""
    return InMemoryTimesheetRepository(projects=[project], conversations=[conversation])


@pytest.fixture
def make_entry():
    """Factory for timesheet entries of USER_ID."""

    def _make(task, date, hours, status=TimesheetStatus.SAVED, user_id=USER_ID, **kwargs):
        return TimesheetEntry(
            user_id=user_id,
            task_id=task.id,
            task_title=task.title,
            date=date,
            hours=hours,
            status=status,
            **kwargs,
        )

    return _make


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Remove handlers installed by CLI commands after each test."""
    yield
    reset_logging()


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
