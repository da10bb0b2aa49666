"""Services: timesheet orchestration and notification delivery."""

from timesheet_engine.services.error_classifier import ErrorClassifier, ErrorType
from timesheet_engine.services.http_sender import HttpNotificationSender
from timesheet_engine.services.notification_cards import (
    build_adaptive_card,
    build_attachment,
)
from timesheet_engine.services.notification_service import (
    ApprovalNotifier,
    DeliveryReport,
    NotificationSender,
)
from timesheet_engine.services.timesheet_service import TimesheetService

__all__ = [
    "ErrorClassifier",
    "ErrorType",
    "HttpNotificationSender",
    "build_adaptive_card",
    "build_attachment",
    "ApprovalNotifier",
    "DeliveryReport",
    "NotificationSender",
    "TimesheetService",
]
