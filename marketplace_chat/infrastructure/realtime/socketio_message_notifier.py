# marketplace_chat/infrastructure/realtime/socketio_message_notifier.py
from __future__ import annotations

from marketplace_chat.core.interfaces.message_notifier import (
    MessageCreatedEvent,
    MessageNotifier,
    MessagesReadEvent,
)
from marketplace_chat.infrastructure.realtime.socketio_server import conversation_room, socketio, user_room


class SocketIOMessageNotifier(MessageNotifier):
    def notify_message_created(self, event: MessageCreatedEvent) -> None:
        payload = {
            "conversation_id": event.conversation_id,
            "message_id": event.message_id,
            "seq": event.seq,
            "sender_id": event.sender_id,
            "sender_role": event.sender_role,
            "message_type": event.message_type,
            "preview": event.preview,
            "created_at": event.created_at_iso,
        }

        # 1) open chat windows
        socketio.emit("message:new", payload, to=conversation_room(event.conversation_id))

        # 2) recipient's unread badge, even without the conversation open
        socketio.emit("unread:changed", {"conversation_id": event.conversation_id}, to=user_room(event.recipient_id))

    def notify_messages_read(self, event: MessagesReadEvent) -> None:
        socketio.emit(
            "message:read",
            {
                "conversation_id": event.conversation_id,
                "reader_id": event.reader_id,
                "reader_role": event.reader_role,
                "marked_count": event.marked_count,
                "read_at": event.read_at_iso,
            },
            to=conversation_room(event.conversation_id),
        )
