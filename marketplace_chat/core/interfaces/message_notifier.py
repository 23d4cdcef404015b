# marketplace_chat/core/interfaces/message_notifier.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class MessageCreatedEvent:
    conversation_id: str
    message_id: str
    seq: int
    sender_id: str
    sender_role: str
    recipient_id: str
    preview: str
    message_type: str
    created_at_iso: str


@dataclass(frozen=True)
class MessagesReadEvent:
    conversation_id: str
    reader_id: str
    reader_role: str
    marked_count: int
    read_at_iso: str


class MessageNotifier(Protocol):
    def notify_message_created(self, event: MessageCreatedEvent) -> None:
        ...

    def notify_messages_read(self, event: MessagesReadEvent) -> None:
        ...
