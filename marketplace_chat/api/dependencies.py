# marketplace_chat/api/dependencies.py
"""Per-application collaborators, stored on app.extensions by create_app."""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from flask import current_app
from sqlalchemy.orm import Session

from marketplace_chat.config.settings import Settings
from marketplace_chat.core.interfaces.conversation_notifier import ConversationNotifier
from marketplace_chat.core.interfaces.message_notifier import MessageNotifier
from marketplace_chat.core.interfaces.session_validator import SessionValidator
from marketplace_chat.infrastructure.database.session import Database
from marketplace_chat.infrastructure.realtime.after_commit_notifier import AfterCommitNotifier
from marketplace_chat.repositories.audit_log_repository import AuditLogRepository
from marketplace_chat.repositories.conversation_repository import ConversationRepository
from marketplace_chat.repositories.directory_repository import DirectoryRepository
from marketplace_chat.repositories.message_repository import MessageRepository
from marketplace_chat.services.audit_service import AuditService
from marketplace_chat.services.conversation_service import ConversationService
from marketplace_chat.services.message_service import MessageService
from marketplace_chat.services.moderation_service import ModerationService

EXTENSION_KEY = "marketplace_chat"


@dataclass(frozen=True)
class AppContainer:
    settings: Settings
    database: Database
    session_validator: SessionValidator
    conversation_notifier: ConversationNotifier
    message_notifier: MessageNotifier


def get_container() -> AppContainer:
    return current_app.extensions[EXTENSION_KEY]


@contextmanager
def db_session() -> Iterator[Session]:
    with get_container().database.session() as session:
        yield session


def _notifier(session: Session) -> AfterCommitNotifier:
    c = get_container()
    return AfterCommitNotifier.for_session(
        session,
        conversation_notifier=c.conversation_notifier,
        message_notifier=c.message_notifier,
    )


def build_conversation_service(session: Session) -> ConversationService:
    c = get_container()
    return ConversationService(
        ConversationRepository(session),
        DirectoryRepository(session),
        audit=AuditService(AuditLogRepository(session)),
        notifier=_notifier(session),
        page_size=c.settings.conversation_page_size,
        max_page_size=c.settings.conversation_page_max,
    )


def build_message_service(session: Session) -> MessageService:
    c = get_container()
    return MessageService(
        conversation_service=build_conversation_service(session),
        conv_repo=ConversationRepository(session),
        msg_repo=MessageRepository(session),
        notifier=_notifier(session),
        page_size=c.settings.message_page_size,
        max_page_size=c.settings.message_page_max,
        max_content_length=c.settings.message_max_length,
        unread_include_archived=c.settings.unread_include_archived,
    )


def build_moderation_service(session: Session) -> ModerationService:
    c = get_container()
    return ModerationService(
        ConversationRepository(session),
        audit=AuditService(AuditLogRepository(session)),
        notifier=_notifier(session),
        page_size=c.settings.conversation_page_size,
        max_page_size=c.settings.conversation_page_max,
    )
