"""Adaptive card payloads for approval and rejection notices."""

import datetime as dt
from typing import Any, Dict, List, Optional

from timesheet_engine.aggregators.notification_grouper import NotificationCard
from timesheet_engine.models.timesheet import TimesheetStatus

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"
ADAPTIVE_CARD_SCHEMA = "http://adaptivecards.io/schemas/adaptive-card.json"
ADAPTIVE_CARD_VERSION = "1.2"

_TITLES = {
    TimesheetStatus.APPROVED: "Timesheet approved",
    TimesheetStatus.REJECTED: "Timesheet rejected",
}


def teams_date(date: dt.date) -> str:
    """Date macro rendered by Teams in the reader's locale.

    Example:
        >>> teams_date(dt.date(2024, 3, 5))
        '{{DATE(2024-03-05T00:00:00Z)}}'
    """
    return "{{DATE(" + date.strftime("%Y-%m-%dT00:00:00Z") + ")}}"


def card_date_text(card: NotificationCard) -> str:
    if card.is_single_date:
        return teams_date(card.start_date)
    return f"{teams_date(card.start_date)} - {teams_date(card.end_date)}"


def timesheet_tab_url(manifest_id: str) -> str:
    return f"https://teams.microsoft.com/l/entity/{manifest_id}/timesheet"


def build_adaptive_card(
    card: NotificationCard, manifest_id: Optional[str] = None
) -> Dict[str, Any]:
    """Build the adaptive card body for a notification.

    Args:
        card: Grouped notification to render
        manifest_id: Teams app manifest id; adds a "View timesheet" button
            linking to the timesheet tab when given

    Returns:
        Adaptive card JSON as a dictionary

    Raises:
        ValueError: If the card status is neither APPROVED nor REJECTED
    """
    if card.status not in _TITLES:
        raise ValueError(f"No notification card for status {card.status.name}")

    facts: List[Dict[str, str]] = [
        {"title": "Project", "value": card.project_title},
        {"title": "Hours", "value": str(card.total_hours)},
        {"title": "Status", "value": card.status.name.capitalize()},
    ]
    if card.status == TimesheetStatus.REJECTED and card.comment:
        facts.append({"title": "Comment", "value": card.comment})

    payload: Dict[str, Any] = {
        "$schema": ADAPTIVE_CARD_SCHEMA,
        "type": "AdaptiveCard",
        "version": ADAPTIVE_CARD_VERSION,
        "body": [
            {
                "type": "TextBlock",
                "text": _TITLES[card.status],
                "weight": "Bolder",
                "size": "Medium",
                "wrap": True,
            },
            {"type": "TextBlock", "text": card_date_text(card), "wrap": True},
            {"type": "FactSet", "facts": facts},
        ],
    }
    if manifest_id:
        payload["actions"] = [
            {
                "type": "Action.OpenUrl",
                "title": "View timesheet",
                "url": timesheet_tab_url(manifest_id),
            }
        ]
    return payload


def build_attachment(card: NotificationCard, manifest_id: Optional[str] = None) -> Dict[str, Any]:
    """Wrap a card as a bot activity attachment."""
    return {
        "contentType": ADAPTIVE_CARD_CONTENT_TYPE,
        "content": build_adaptive_card(card, manifest_id),
    }
