# marketplace_chat/infrastructure/database/models/message_model.py

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, false, func
from sqlalchemy.orm import Mapped, mapped_column

from marketplace_chat.core.messaging_types import MessageType
from marketplace_chat.infrastructure.database.base_model import BaseModel


class MessageModel(BaseModel):
    __tablename__ = "messages"
    __table_args__ = (
        UniqueConstraint("conversation_id", "seq", name="uq_messages_conversation_seq"),
        Index("idx_messages_conversation_order", "conversation_id", "created_at", "seq"),
    )

    id: Mapped[str] = mapped_column(String(40), primary_key=True)

    conversation_id: Mapped[str] = mapped_column(
        String(40), ForeignKey("conversations.id"), nullable=False
    )

    # tie-break for identical created_at values, strictly increasing per conversation
    seq: Mapped[int] = mapped_column(Integer, nullable=False)

    # snapshot of the sender at send time
    sender_id: Mapped[str] = mapped_column(String(64), nullable=False)
    sender_role: Mapped[str] = mapped_column(String(10), nullable=False)
    sender_name: Mapped[str] = mapped_column(String(150), nullable=False)
    sender_avatar: Mapped[str] = mapped_column(Text, nullable=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    message_type: Mapped[str] = mapped_column(
        String(10), nullable=False, default=MessageType.TEXT.value
    )
    attachment_url: Mapped[str] = mapped_column(Text, nullable=True)
    attachment_name: Mapped[str] = mapped_column(String(255), nullable=True)

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    read_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
