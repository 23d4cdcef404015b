# marketplace_chat/services/message_service.py
from __future__ import annotations

import logging

from marketplace_chat.core.clock import as_utc, new_id, utcnow
from marketplace_chat.core.exceptions import ForbiddenError, InvalidInputError
from marketplace_chat.core.interfaces.message_notifier import (
    MessageCreatedEvent,
    MessageNotifier,
    MessagesReadEvent,
)
from marketplace_chat.core.messaging_types import ConversationStatus, MessageType
from marketplace_chat.core.pagination import MessageCursor, Page, clamp_limit
from marketplace_chat.core.roles import Role, participant_side
from marketplace_chat.infrastructure.database.models.message_model import MessageModel
from marketplace_chat.repositories.conversation_repository import ConversationRepository
from marketplace_chat.repositories.message_repository import MessageRepository
from marketplace_chat.services.conversation_service import ConversationService

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200
MAX_CONTENT_LENGTH = 5000
PREVIEW_LENGTH = 100


def _preview(content: str) -> str:
    if len(content) > PREVIEW_LENGTH:
        return content[:PREVIEW_LENGTH] + "..."
    return content


class MessageService:
    def __init__(
        self,
        *,
        conversation_service: ConversationService,
        conv_repo: ConversationRepository,
        msg_repo: MessageRepository,
        notifier: MessageNotifier,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
        max_content_length: int = MAX_CONTENT_LENGTH,
        unread_include_archived: bool = False,
    ) -> None:
        self._conversations = conversation_service
        self._conv_repo = conv_repo
        self._msg_repo = msg_repo
        self._notifier = notifier
        self._page_size = page_size
        self._max_page_size = max_page_size
        self._max_content_length = max_content_length
        self._unread_include_archived = unread_include_archived

    def list_messages(
        self,
        *,
        conversation_id: str,
        user_id: str,
        role: Role,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> Page[MessageModel]:
        # NotFound for outsiders, never an empty page
        self._conversations.get_for_user(conversation_id=conversation_id, user_id=user_id, role=role)

        limit = clamp_limit(limit, default=self._page_size, maximum=self._max_page_size)
        after = MessageCursor.decode(cursor) if cursor else None

        rows = self._msg_repo.list_page(conversation_id=conversation_id, limit=limit + 1, after=after)
        items = rows[:limit]
        next_cursor = None
        if len(rows) > limit:
            last = items[-1]
            next_cursor = MessageCursor(created_at=last.created_at, seq=last.seq).encode()
        return Page(items=items, next_cursor=next_cursor)

    def create_message(
        self,
        *,
        conversation_id: str,
        sender_id: str,
        sender_role: Role,
        sender_name: str,
        sender_avatar: str | None,
        content: str | None,
        message_type: MessageType | str = MessageType.TEXT,
        attachment_url: str | None = None,
        attachment_name: str | None = None,
    ) -> MessageModel:
        # 1) participant, with the conversation row locked until commit
        conv = self._conversations.get_for_user(
            conversation_id=conversation_id, user_id=sender_id, role=sender_role, for_update=True
        )

        # 2) closed is terminal
        if conv.status == ConversationStatus.CLOSED.value:
            raise ForbiddenError("Conversation is closed")

        # 3) content
        body = (content or "").strip()
        if not body:
            raise InvalidInputError("Message content is required")
        if len(body) > self._max_content_length:
            raise InvalidInputError(
                f"Message is too long (max {self._max_content_length} characters)"
            )

        try:
            kind = MessageType(message_type)
        except ValueError as e:
            raise InvalidInputError(f"Unknown message type: {message_type}") from e
        if kind is MessageType.SYSTEM:
            raise InvalidInputError("System messages cannot be sent through the API")

        sender_side = participant_side(sender_role)
        recipient_side = sender_side.other
        recipient_id = conv.vendor_id if sender_role is Role.BUYER else conv.buyer_id

        # created_at never goes backwards inside a conversation
        now = utcnow()
        last_at = as_utc(conv.last_message_at)
        created_at = now if last_at is None or now >= last_at else last_at

        message_id = new_id("msg")
        seq = self._conv_repo.record_message(
            conv,
            message_id=message_id,
            sender_id=sender_id,
            recipient_side=recipient_side,
            preview=_preview(body),
            at=created_at,
        )

        msg = self._msg_repo.add(
            MessageModel(
                id=message_id,
                conversation_id=conv.id,
                seq=seq,
                sender_id=sender_id,
                sender_role=sender_side.value,
                sender_name=sender_name,
                sender_avatar=sender_avatar,
                content=body,
                message_type=kind.value,
                attachment_url=attachment_url,
                attachment_name=attachment_name,
                is_read=False,
                created_at=created_at,
                updated_at=created_at,
            )
        )

        logger.debug(
            "Message %s seq=%s stored in conversation_id=%s sender_id=%s",
            msg.id, seq, conv.id, sender_id,
        )

        self._notifier.notify_message_created(
            MessageCreatedEvent(
                conversation_id=conv.id,
                message_id=msg.id,
                seq=seq,
                sender_id=sender_id,
                sender_role=sender_side.value,
                recipient_id=recipient_id,
                preview=_preview(body),
                message_type=kind.value,
                created_at_iso=as_utc(created_at).isoformat(),
            )
        )
        return msg

    def mark_conversation_as_read(self, *, conversation_id: str, user_id: str, role: Role) -> int:
        """Returns how many messages flipped to read; calling it again returns 0."""
        conv = self._conversations.get_for_user(
            conversation_id=conversation_id, user_id=user_id, role=role, for_update=True
        )
        side = participant_side(role)

        now = utcnow()
        marked = self._msg_repo.mark_read_for_recipient(
            conversation_id=conv.id, reader_side=side, at=now
        )
        self._conv_repo.reset_unread(conv, side=side)

        if marked:
            self._notifier.notify_messages_read(
                MessagesReadEvent(
                    conversation_id=conv.id,
                    reader_id=user_id,
                    reader_role=side.value,
                    marked_count=marked,
                    read_at_iso=now.isoformat(),
                )
            )
        return marked

    def get_unread_count(self, *, user_id: str, role: Role) -> int:
        side = participant_side(role)
        if side is None:
            return 0

        # flagged conversations still take messages, so they still count
        statuses = [ConversationStatus.ACTIVE, ConversationStatus.FLAGGED]
        if self._unread_include_archived:
            statuses.append(ConversationStatus.ARCHIVED)
        return self._conv_repo.sum_unread(side=side, user_id=user_id, statuses=statuses)
