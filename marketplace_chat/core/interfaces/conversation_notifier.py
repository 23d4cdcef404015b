# marketplace_chat/core/interfaces/conversation_notifier.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class ConversationCreatedEvent:
    conversation_id: str
    buyer_id: str
    vendor_id: str
    context: str
    created_at_iso: str

    conversation: dict[str, Any] | None = None


@dataclass(frozen=True)
class ConversationUpdatedEvent:
    conversation_id: str
    buyer_id: str
    vendor_id: str
    status: str
    changed_by: str
    updated_at_iso: str


class ConversationNotifier(Protocol):
    def notify_conversation_created(self, event: ConversationCreatedEvent) -> None:
        ...

    def notify_conversation_updated(self, event: ConversationUpdatedEvent) -> None:
        ...
