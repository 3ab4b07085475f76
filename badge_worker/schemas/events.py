"""
Push-delivery schemas.

Envelope (HTTP body):
    {"message": {"data": "<base64 JSON>", "messageId": "...", "publishTime": "..."},
     "subscription": "..."}

Decoded `data`:
    {"eventType": "JOURNAL_ENTRY_CREATED", "userId": "<uuid>",
     "checkInId": "<uuid>", "timestamp": "<ISO-8601>"}

Only eventType and userId drive evaluation; the other fields are accepted
and ignored.
"""
from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from badge_worker.services.rule_catalogue import ActivityDomain


class ActivityEventType(str, enum.Enum):
    journal_entry_created = "JOURNAL_ENTRY_CREATED"
    flip_feel_entry_created = "FLIP_FEEL_ENTRY_CREATED"
    mood_checkin_created = "MOOD_CHECKIN_CREATED"
    gratitude_entry_created = "GRATITUDE_ENTRY_CREATED"


EVENT_DOMAINS: dict[ActivityEventType, ActivityDomain] = {
    ActivityEventType.journal_entry_created: ActivityDomain.journal,
    ActivityEventType.flip_feel_entry_created: ActivityDomain.flip_feel,
    ActivityEventType.mood_checkin_created: ActivityDomain.mood_check_in,
    ActivityEventType.gratitude_entry_created: ActivityDomain.gratitude,
}


class PushMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data: Optional[str] = Field(default=None, description="Base64-encoded JSON payload.")
    message_id: Optional[str] = Field(default=None, alias="messageId")
    publish_time: Optional[str] = Field(default=None, alias="publishTime")


class PushEnvelope(BaseModel):
    """Body of a push-subscription delivery.

    `message` is optional at the schema level so a missing message is
    reported as INVALID_MESSAGE (400) rather than a generic 422.
    """
    model_config = ConfigDict(extra="ignore")

    message: Optional[PushMessage] = None
    subscription: Optional[str] = None


class ActivityPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event_type: Optional[str] = Field(default=None, alias="eventType")
    user_id: Optional[str] = Field(default=None, alias="userId")
    # Carried by publishers but never read here; any JSON value is accepted.
    check_in_id: Any = Field(default=None, alias="checkInId")
    timestamp: Any = None
