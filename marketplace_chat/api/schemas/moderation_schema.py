# marketplace_chat/api/schemas/moderation_schema.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from marketplace_chat.api.schemas._datetime_serializer import serialize_dt
from marketplace_chat.api.schemas.conversation_schema import CAMEL_CONFIG


class FlagRequest(BaseModel):
    model_config = CAMEL_CONFIG

    reason: str = Field(min_length=1, max_length=2000)


class UnflagRequest(BaseModel):
    model_config = CAMEL_CONFIG

    notes: str = Field(min_length=1, max_length=2000)


class CloseRequest(BaseModel):
    model_config = CAMEL_CONFIG

    notes: Optional[str] = Field(default=None, max_length=2000)


class AuditLogResponse(BaseModel):
    model_config = CAMEL_CONFIG

    id: int
    entity_name: str
    entity_id: Optional[str] = None
    action_name: str
    details: Optional[str] = None
    occurred_at: datetime
    user_id: Optional[str] = None
    user_role: Optional[str] = None

    @field_serializer("occurred_at")
    def serialize_dates(self, value: datetime | None):
        return serialize_dt(value)
