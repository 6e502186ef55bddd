"""Message Schemas — addMessage request body and the persisted message shape.

Invariants:
    - msg and msgFrom must be strings that are non-empty after trimming
    - msgDateTime is optional on input; the route fills it before the service call
    - Supplied msgDateTime values are normalized to UTC
    - ChatMessage.msg_date_time is always set (services assume a fully-formed message)
"""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic.alias_generators import to_camel


class MessageToAdd(BaseModel):
    """Client-supplied message fields."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
    )

    msg: StrictStr
    msg_from: StrictStr = Field(max_length=100)
    msg_date_time: datetime | None = None

    @field_validator("msg", "msg_from")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must be a non-empty string")
        return v

    @field_validator("msg_date_time")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        # Naive timestamps are taken as UTC
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class AddMessageRequest(BaseModel):
    """Body for POST /messaging/addMessage."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
    )

    message_to_add: MessageToAdd


class ChatMessage(BaseModel):
    """Message as stored and returned by the API."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
    )

    id: UUID | None = Field(None, alias="_id")
    msg: str
    msg_from: str
    msg_date_time: datetime
