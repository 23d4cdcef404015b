# marketplace_chat/infrastructure/realtime/socketio_conversation_notifier.py
from __future__ import annotations

from marketplace_chat.core.interfaces.conversation_notifier import (
    ConversationCreatedEvent,
    ConversationNotifier,
    ConversationUpdatedEvent,
)
from marketplace_chat.infrastructure.realtime.socketio_server import conversation_room, socketio, user_room


class SocketIOConversationNotifier(ConversationNotifier):
    def notify_conversation_created(self, event: ConversationCreatedEvent) -> None:
        payload = {
            "conversation_id": event.conversation_id,
            "buyer_id": event.buyer_id,
            "vendor_id": event.vendor_id,
            "context": event.context,
            "created_at": event.created_at_iso,
        }
        if event.conversation is not None:
            payload["conversation"] = event.conversation

        # only the two participants, never a global broadcast
        socketio.emit("conversation:new", payload, to=user_room(event.vendor_id))
        socketio.emit("conversation:new", payload, to=user_room(event.buyer_id))

    def notify_conversation_updated(self, event: ConversationUpdatedEvent) -> None:
        payload = {
            "conversation_id": event.conversation_id,
            "status": event.status,
            "changed_by": event.changed_by,
            "updated_at": event.updated_at_iso,
        }
        socketio.emit("conversation:updated", payload, to=conversation_room(event.conversation_id))
