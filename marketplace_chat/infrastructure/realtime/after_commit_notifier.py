# marketplace_chat/infrastructure/realtime/after_commit_notifier.py
"""Holds realtime events until the unit of work that produced them commits."""
from __future__ import annotations

from typing import Any, Callable

from sqlalchemy import event as sa_event
from sqlalchemy.orm import Session

from marketplace_chat.core.interfaces.conversation_notifier import (
    ConversationCreatedEvent,
    ConversationNotifier,
    ConversationUpdatedEvent,
)
from marketplace_chat.core.interfaces.message_notifier import (
    MessageCreatedEvent,
    MessageNotifier,
    MessagesReadEvent,
)

SESSION_INFO_KEY = "marketplace_chat.after_commit_notifier"


class AfterCommitNotifier:
    def __init__(
        self,
        session: Session,
        *,
        conversation_notifier: ConversationNotifier,
        message_notifier: MessageNotifier,
    ) -> None:
        self._conversations = conversation_notifier
        self._messages = message_notifier
        self._pending: list[tuple[Callable[[Any], None], Any]] = []

        sa_event.listen(session, "after_commit", self._flush)
        sa_event.listen(session, "after_rollback", self._discard)

    @classmethod
    def for_session(
        cls,
        session: Session,
        *,
        conversation_notifier: ConversationNotifier,
        message_notifier: MessageNotifier,
    ) -> AfterCommitNotifier:
        # one buffer per session, shared by every service built on it
        notifier = session.info.get(SESSION_INFO_KEY)
        if notifier is None:
            notifier = cls(
                session,
                conversation_notifier=conversation_notifier,
                message_notifier=message_notifier,
            )
            session.info[SESSION_INFO_KEY] = notifier
        return notifier

    def notify_conversation_created(self, event: ConversationCreatedEvent) -> None:
        self._pending.append((self._conversations.notify_conversation_created, event))

    def notify_conversation_updated(self, event: ConversationUpdatedEvent) -> None:
        self._pending.append((self._conversations.notify_conversation_updated, event))

    def notify_message_created(self, event: MessageCreatedEvent) -> None:
        self._pending.append((self._messages.notify_message_created, event))

    def notify_messages_read(self, event: MessagesReadEvent) -> None:
        self._pending.append((self._messages.notify_messages_read, event))

    def _flush(self, session: Session) -> None:
        pending, self._pending = self._pending, []
        for emit, evt in pending:
            emit(evt)

    def _discard(self, session: Session) -> None:
        self._pending.clear()
