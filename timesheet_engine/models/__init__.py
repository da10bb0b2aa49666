"""Data models for the timesheet engine.

This package contains Pydantic models for all business entities:
- BaseDataModel: Base class with common configuration
- TimesheetEntry / TimesheetStatus: Filled efforts and their lifecycle
- Project, Task, Member: Validity windows and membership
- ConversationReference: Where notifications are delivered
- Request models and the calendar read model
- Operation result types
"""

from timesheet_engine.models.base import BaseDataModel
from timesheet_engine.models.calendar import (
    DayTimesheet,
    ProjectTimesheet,
    TaskTimesheet,
)
from timesheet_engine.models.conversation import ConversationReference
from timesheet_engine.models.project import Member, Project, Task
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
    OutcomeStatus,
    SkipReason,
)
from timesheet_engine.models.timesheet import TimesheetEntry, TimesheetStatus

__all__ = [
    "BaseDataModel",
    "TimesheetEntry",
    "TimesheetStatus",
    "Project",
    "Task",
    "Member",
    "ConversationReference",
    "TaskEffort",
    "DailyEffortRequest",
    "DuplicateEffortsRequest",
    "ApprovalRequest",
    "TaskTimesheet",
    "ProjectTimesheet",
    "DayTimesheet",
    "DateOutcome",
    "OperationResult",
    "OperationStatus",
    "OutcomeStatus",
    "SkipReason",
]
