# marketplace_chat/api/schemas/conversation_schema.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from marketplace_chat.api.schemas._datetime_serializer import serialize_dt
from marketplace_chat.core.messaging_types import ConversationContext

CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ConversationResponse(BaseModel):
    model_config = CAMEL_CONFIG

    id: str
    buyer_id: str
    vendor_id: str
    context: str
    product_id: Optional[str] = None
    order_id: Optional[str] = None

    # snapshot
    buyer_name: str
    buyer_avatar: Optional[str] = None
    vendor_name: str
    vendor_avatar: Optional[str] = None
    vendor_business_name: Optional[str] = None
    product_name: Optional[str] = None
    product_image: Optional[str] = None
    order_number: Optional[str] = None

    status: str
    is_pinned_buyer: bool
    is_pinned_vendor: bool
    is_muted_buyer: bool
    is_muted_vendor: bool
    unread_count_buyer: int
    unread_count_vendor: int

    last_message_content: Optional[str] = None
    last_message_sender_id: Optional[str] = None
    last_message_at: datetime
    created_at: datetime
    updated_at: datetime

    @field_serializer("last_message_at", "created_at", "updated_at")
    def serialize_dates(self, value: datetime | None):
        return serialize_dt(value)


class AdminConversationResponse(ConversationResponse):
    flagged_at: Optional[datetime] = None
    flagged_by: Optional[str] = None
    flag_reason: Optional[str] = None
    moderator_notes: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    closed_at: Optional[datetime] = None
    closed_by: Optional[str] = None

    @field_serializer("flagged_at", "reviewed_at", "closed_at")
    def serialize_moderation_dates(self, value: datetime | None):
        return serialize_dt(value)


class CreateConversationRequest(BaseModel):
    model_config = CAMEL_CONFIG

    vendor_id: str = Field(min_length=1, max_length=64)
    product_id: Optional[str] = Field(default=None, max_length=64)
    order_id: Optional[str] = Field(default=None, max_length=64)
    context: ConversationContext = ConversationContext.GENERAL


class UpdateConversationRequest(BaseModel):
    model_config = CAMEL_CONFIG

    is_pinned: Optional[bool] = None
    is_muted: Optional[bool] = None
    action: Optional[Literal["archive"]] = None
