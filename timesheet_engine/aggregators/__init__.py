"""Aggregators that summarize timesheets for notifications and dashboards."""

from timesheet_engine.aggregators.dashboard import (
    UTILIZATION_COLUMNS,
    DashboardRequest,
    ManagerDashboard,
)
from timesheet_engine.aggregators.notification_grouper import (
    ApprovalNotificationGrouper,
    NotificationCard,
    UserNotifications,
)

__all__ = [
    "UTILIZATION_COLUMNS",
    "DashboardRequest",
    "ManagerDashboard",
    "ApprovalNotificationGrouper",
    "NotificationCard",
    "UserNotifications",
]
