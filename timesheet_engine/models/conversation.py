"""Stored bot conversation of a user, used to deliver notifications."""

import datetime as dt
import uuid
from typing import Optional

from pydantic import Field

from timesheet_engine.models.base import BaseDataModel


class ConversationReference(BaseDataModel):
    """Where to post proactive messages for a user.

    Attributes:
        user_id: Object id of the user
        conversation_id: Personal conversation id with the bot
        service_url: Bot service endpoint for the user's tenant
        bot_installed_on: When the bot was installed for the user
    """

    user_id: uuid.UUID
    conversation_id: str = Field(..., min_length=1)
    service_url: str = Field(..., min_length=1)
    bot_installed_on: Optional[dt.datetime] = None
