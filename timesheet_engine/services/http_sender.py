"""Notification sender posting activities to the Bot Framework connector."""

import logging
from typing import Any, Dict, Optional

import requests

from timesheet_engine.aggregators.notification_grouper import NotificationCard
from timesheet_engine.models.conversation import ConversationReference
from timesheet_engine.services.notification_cards import build_attachment
from timesheet_engine.services.notification_service import NotificationSender

logger = logging.getLogger(__name__)


class HttpNotificationSender(NotificationSender):
    """Posts message activities carrying an adaptive card over HTTP.

    Args:
        session: Session used for every request
        timeout: Request timeout in seconds
        access_token: Bearer token for the connector, if it requires one
        manifest_id: Teams app manifest id used for the card's tab link
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        access_token: Optional[str] = None,
        manifest_id: Optional[str] = None,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.access_token = access_token
        self.manifest_id = manifest_id

    @staticmethod
    def activities_url(conversation: ConversationReference) -> str:
        base = conversation.service_url.rstrip("/")
        return f"{base}/v3/conversations/{conversation.conversation_id}/activities"

    def send_approval_notice(
        self, conversation: ConversationReference, card: NotificationCard
    ) -> None:
        self._post(conversation, build_attachment(card, self.manifest_id))

    def send_rejection_notice(
        self, conversation: ConversationReference, card: NotificationCard
    ) -> None:
        self._post(conversation, build_attachment(card, self.manifest_id))

    def _post(self, conversation: ConversationReference, attachment: Dict[str, Any]) -> None:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        activity = {"type": "message", "attachments": [attachment]}
        response = self.session.post(
            self.activities_url(conversation),
            json=activity,
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        logger.debug(f"Posted notification to conversation {conversation.conversation_id}")
