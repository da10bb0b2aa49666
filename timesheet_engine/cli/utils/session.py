"""Shared setup for CLI commands: configuration, logging and the data file."""

import json
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click
import pydantic

from timesheet_engine.cli.error_handlers import ConfigurationError, DataFileError
from timesheet_engine.config.effort_policy import EffortPolicy
from timesheet_engine.config.logging_config import LoggingConfig, configure_logging
from timesheet_engine.config.settings import TimesheetEngineConfig, get_config
from timesheet_engine.repositories.json_store import load_repository, save_repository
from timesheet_engine.repositories.memory import InMemoryTimesheetRepository
from timesheet_engine.services.http_sender import HttpNotificationSender
from timesheet_engine.services.notification_service import ApprovalNotifier
from timesheet_engine.services.timesheet_service import TimesheetService


def load_settings() -> TimesheetEngineConfig:
    """The global configuration, with validation errors as ConfigurationError."""
    try:
        return get_config()
    except pydantic.ValidationError as e:
        raise ConfigurationError(
            f"Invalid settings: {e.error_count()} problem(s)\n{e}",
            recovery_hint="Check the timesheet variables in your environment or .env file",
        ) from e


def setup_logging(settings: TimesheetEngineConfig, verbose: bool = False) -> None:
    """Log warnings and above unless verbose or DEBUG is set."""
    default_level = "DEBUG" if verbose or settings.debug else "WARNING"
    configure_logging(LoggingConfig.from_env(default_level=default_level))


@contextmanager
def repository_session(
    settings: TimesheetEngineConfig, data_file: Optional[str], persist: bool = True
) -> Iterator[InMemoryTimesheetRepository]:
    """Load the data file, yield the repository and write it back on success."""
    path = Path(data_file or settings.data_file)
    try:
        repository = load_repository(path)
    except (json.JSONDecodeError, pydantic.ValidationError) as e:
        raise DataFileError(
            f"Cannot read {path}: {e}",
            recovery_hint="Restore the file from a backup or fix the reported fields",
        ) from e

    yield repository

    if persist:
        save_repository(repository, path)


def load_policy(settings: TimesheetEngineConfig) -> EffortPolicy:
    try:
        return settings.effort_policy()
    except pydantic.ValidationError as e:
        raise ConfigurationError(
            f"Invalid effort policy: {e}",
            recovery_hint="WEEKLY_EFFORTS_LIMIT must be at least DAILY_EFFORTS_LIMIT",
        ) from e


def build_service(
    repository: InMemoryTimesheetRepository,
    settings: TimesheetEngineConfig,
    notify: bool = False,
) -> TimesheetService:
    """Create the service, with HTTP notifications when ``notify`` is set."""
    policy = load_policy(settings)

    notifier = None
    if notify:
        sender = HttpNotificationSender(
            timeout=settings.notification_timeout,
            access_token=settings.bot_access_token,
            manifest_id=settings.teams_manifest_id,
        )
        notifier = ApprovalNotifier(repository, sender)
    return TimesheetService(repository, policy, notifier=notifier)


class UUIDParamType(click.ParamType):
    name = "uuid"

    def convert(self, value, param, ctx):
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(value)
        except ValueError:
            self.fail(f"{value!r} is not a valid UUID", param, ctx)


UUID = UUIDParamType()
