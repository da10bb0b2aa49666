"""Delivery of approval and rejection notices to users.

Notices are best effort: they go out after the approval transaction has
committed, a failed card is logged and never retried, and users without a
stored bot conversation are skipped.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from timesheet_engine.aggregators.notification_grouper import (
    NotificationCard,
    UserNotifications,
)
from timesheet_engine.models.conversation import ConversationReference
from timesheet_engine.models.timesheet import TimesheetStatus
from timesheet_engine.repositories.base import TimesheetRepository
from timesheet_engine.services.error_classifier import ErrorClassifier

logger = logging.getLogger(__name__)


class NotificationSender(ABC):
    """Transport that delivers cards into a user's bot conversation.

    Implementations raise on delivery failure.
    """

    @abstractmethod
    def send_approval_notice(
        self, conversation: ConversationReference, card: NotificationCard
    ) -> None:
        """Tell the user a run of timesheets was approved."""

    @abstractmethod
    def send_rejection_notice(
        self, conversation: ConversationReference, card: NotificationCard
    ) -> None:
        """Tell the user a run of timesheets was rejected, with the comment."""


@dataclass
class DeliveryReport:
    """What happened to a batch of notifications.

    Attributes:
        sent: Number of cards delivered
        failed: Number of cards whose delivery raised
        users_without_conversation: Users skipped for lack of a conversation
        errors: Description of each failed delivery
    """

    sent: int = 0
    failed: int = 0
    users_without_conversation: List[uuid.UUID] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class ApprovalNotifier:
    """Sends grouped approval notifications through a NotificationSender.

    Example:
        >>> notifier = ApprovalNotifier(repository, HttpNotificationSender())
        >>> report = notifier.notify(grouper.group(entries, projects, status))
        >>> report.sent
        3
    """

    def __init__(
        self,
        repository: TimesheetRepository,
        sender: NotificationSender,
        classifier: Optional[ErrorClassifier] = None,
    ):
        self.repository = repository
        self.sender = sender
        self.classifier = classifier or ErrorClassifier()

    def _deliver(self, conversation: ConversationReference, card: NotificationCard) -> None:
        if card.status == TimesheetStatus.REJECTED:
            self.sender.send_rejection_notice(conversation, card)
        else:
            self.sender.send_approval_notice(conversation, card)

    def notify(self, notifications: List[UserNotifications]) -> DeliveryReport:
        """Deliver every card; failures are recorded, not raised."""
        report = DeliveryReport()

        for user_notifications in notifications:
            conversation = self.repository.get_conversation(user_notifications.user_id)
            if conversation is None:
                logger.info(
                    f"User {user_notifications.user_id} has no bot conversation, "
                    f"skipping {len(user_notifications.cards)} notices"
                )
                report.users_without_conversation.append(user_notifications.user_id)
                continue

            for card in user_notifications.cards:
                try:
                    self._deliver(conversation, card)
                except Exception as e:
                    error_type = self.classifier.classify(e)
                    description = self.classifier.describe(e)
                    logger.error(
                        f"Failed to notify user {card.user_id} about "
                        f"{card.project_title} ({card.date_label}): {description}"
                    )
                    report.failed += 1
                    report.errors.append(f"{error_type.value}: {description}")
                else:
                    report.sent += 1

        logger.info(
            f"Notifications delivered: {report.sent} sent, {report.failed} failed, "
            f"{len(report.users_without_conversation)} users without conversation"
        )
        return report
