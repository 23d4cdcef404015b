# marketplace_chat/api/schemas/message_schema.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from marketplace_chat.api.schemas._datetime_serializer import serialize_dt
from marketplace_chat.api.schemas.conversation_schema import CAMEL_CONFIG


class MessageResponse(BaseModel):
    model_config = CAMEL_CONFIG

    id: str
    conversation_id: str
    seq: int
    sender_id: str
    sender_role: str
    sender_name: str
    sender_avatar: Optional[str] = None
    content: str
    message_type: str
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    @field_serializer("read_at", "created_at")
    def serialize_dates(self, value: datetime | None):
        return serialize_dt(value)


class CreateMessageRequest(BaseModel):
    model_config = CAMEL_CONFIG

    # length rules live in MessageService, they apply after trimming
    content: Optional[str] = None
    message_type: str = "text"
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = Field(default=None, max_length=255)
