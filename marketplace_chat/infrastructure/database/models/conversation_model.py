# marketplace_chat/infrastructure/database/models/conversation_model.py

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, false, func
from sqlalchemy.orm import Mapped, mapped_column

from marketplace_chat.core.messaging_types import ConversationContext, ConversationStatus
from marketplace_chat.infrastructure.database.base_model import BaseModel


class ConversationModel(BaseModel):
    __tablename__ = "conversations"
    __table_args__ = (
        Index("idx_conversations_buyer_activity", "buyer_id", "last_message_at", "id"),
        Index("idx_conversations_vendor_activity", "vendor_id", "last_message_at", "id"),
        Index("idx_conversations_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(40), primary_key=True)

    # participants, immutable after creation
    buyer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    vendor_id: Mapped[str] = mapped_column(String(64), nullable=False)

    context: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ConversationContext.GENERAL.value
    )
    product_id: Mapped[str] = mapped_column(String(64), nullable=True)
    order_id: Mapped[str] = mapped_column(String(64), nullable=True)

    # snapshot captured at creation time
    buyer_name: Mapped[str] = mapped_column(String(150), nullable=False)
    buyer_avatar: Mapped[str] = mapped_column(Text, nullable=True)
    vendor_name: Mapped[str] = mapped_column(String(150), nullable=False)
    vendor_avatar: Mapped[str] = mapped_column(Text, nullable=True)
    vendor_business_name: Mapped[str] = mapped_column(String(200), nullable=True)
    product_name: Mapped[str] = mapped_column(String(255), nullable=True)
    product_image: Mapped[str] = mapped_column(Text, nullable=True)
    order_number: Mapped[str] = mapped_column(String(64), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ConversationStatus.ACTIVE.value
    )

    is_pinned_buyer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    is_pinned_vendor: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    is_muted_buyer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    is_muted_vendor: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())

    unread_count_buyer: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    unread_count_vendor: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    # numbering of messages inside this conversation
    last_message_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    last_message_id: Mapped[str] = mapped_column(String(40), nullable=True)
    last_message_content: Mapped[str] = mapped_column(String(120), nullable=True)
    last_message_sender_id: Mapped[str] = mapped_column(String(64), nullable=True)
    last_message_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    archived_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
    archived_by: Mapped[str] = mapped_column(String(64), nullable=True)
    flagged_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
    flagged_by: Mapped[str] = mapped_column(String(64), nullable=True)
    flag_reason: Mapped[str] = mapped_column(Text, nullable=True)
    moderator_notes: Mapped[str] = mapped_column(Text, nullable=True)
    reviewed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_by: Mapped[str] = mapped_column(String(64), nullable=True)
    closed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
    closed_by: Mapped[str] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
