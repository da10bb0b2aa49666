"""Repositories: the data-access contract and its in-memory implementation."""

from timesheet_engine.repositories.base import TimesheetRepository
from timesheet_engine.repositories.json_store import (
    StoreSnapshot,
    load_repository,
    save_repository,
)
from timesheet_engine.repositories.memory import InMemoryTimesheetRepository

__all__ = [
    "TimesheetRepository",
    "InMemoryTimesheetRepository",
    "StoreSnapshot",
    "load_repository",
    "save_repository",
]
