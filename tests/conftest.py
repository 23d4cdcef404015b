# tests/conftest.py
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import timedelta

import pytest

from marketplace_chat.config.settings import Settings
from marketplace_chat.core.clock import utcnow
from marketplace_chat.infrastructure.database.models.order_model import OrderModel
from marketplace_chat.infrastructure.database.models.product_model import ProductModel
from marketplace_chat.infrastructure.database.models.session_model import SessionModel
from marketplace_chat.infrastructure.database.models.user_model import UserModel
from marketplace_chat.infrastructure.database.session import Database
from marketplace_chat.infrastructure.security.db_session_validator import hash_token
from marketplace_chat.main import create_app
from marketplace_chat.repositories.audit_log_repository import AuditLogRepository
from marketplace_chat.repositories.conversation_repository import ConversationRepository
from marketplace_chat.repositories.directory_repository import DirectoryRepository
from marketplace_chat.repositories.message_repository import MessageRepository
from marketplace_chat.services.audit_service import AuditService
from marketplace_chat.services.conversation_service import ConversationService
from marketplace_chat.services.message_service import MessageService
from marketplace_chat.services.moderation_service import ModerationService

# token -> (session id, user id, stored role, expires in minutes)
SESSION_TOKENS = {
    "tok-b1": ("s-b1", "b1", "buyer", 60),
    "tok-b2": ("s-b2", "b2", "buyer", 60),
    "tok-v1": ("s-v1", "v1", "vendor", 60),
    "tok-admin": ("s-admin", "a1", "master_admin", 60),
    "tok-expired": ("s-expired", "b1", "buyer", -5),
    "tok-weird": ("s-weird", "b1", "superuser", 60),
}


class RecordingNotifier:
    """Stands in for both Socket.IO notifiers and keeps every event."""

    def __init__(self) -> None:
        self.created_conversations = []
        self.updated_conversations = []
        self.created_messages = []
        self.read_events = []

    def notify_conversation_created(self, event) -> None:
        self.created_conversations.append(event)

    def notify_conversation_updated(self, event) -> None:
        self.updated_conversations.append(event)

    def notify_message_created(self, event) -> None:
        self.created_messages.append(event)

    def notify_messages_read(self, event) -> None:
        self.read_events.append(event)


@dataclass
class Services:
    conversations: ConversationService
    messages: MessageService
    moderation: ModerationService
    audit: AuditService = field(repr=False)


def make_settings(**overrides) -> Settings:
    values = dict(
        sqlalchemy_url="sqlite://",
        socketio_async_mode="threading",
        session_backend="database",
        jwt_secret="test-secret",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def seed(database: Database) -> None:
    now = utcnow()
    with database.session() as session:
        session.add_all(
            [
                UserModel(id="b1", email="bella@example.com", name="Bella Buyer", role="buyer", status="active",
                          avatar="https://cdn.example.com/u/b1.png"),
                UserModel(id="b2", email="ben@example.com", name="Ben Buyer", role="buyer", status="active"),
                UserModel(id="v1", email="victor@example.com", name="Victor Vendor", role="vendor", status="active",
                          business_name="Victor's Goods"),
                UserModel(id="v2", email="vera@example.com", name="Vera Vendor", role="vendor", status="active"),
                UserModel(id="vgone", email="gone@example.com", name="Gone Vendor", role="vendor",
                          status="deleted"),
                UserModel(id="a1", email="ada@example.com", name="Ada Admin", role="master_admin",
                          status="active"),
                ProductModel(id="p1", vendor_id="v1", name="Walnut Desk",
                             main_image="https://cdn.example.com/p/p1.jpg"),
                OrderModel(id="o1", buyer_id="b1", order_number="ORD-1001"),
                OrderModel(id="o2", buyer_id="b2", order_number="ORD-2002"),
            ]
        )
        for token, (sid, user_id, role, minutes) in SESSION_TOKENS.items():
            session.add(
                SessionModel(
                    id=sid,
                    user_id=user_id,
                    user_role=role,
                    token_hash=hash_token(token),
                    expires_at=now + timedelta(minutes=minutes),
                    created_at=now,
                )
            )


@pytest.fixture
def app_settings() -> Settings:
    return make_settings()


@pytest.fixture
def database(app_settings) -> Database:
    db = Database.from_settings(app_settings)
    db.create_all()
    seed(db)
    yield db
    db.engine.dispose()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


def build_services(session, notifier, app_settings: Settings) -> Services:
    audit = AuditService(AuditLogRepository(session))
    conversations = ConversationService(
        ConversationRepository(session),
        DirectoryRepository(session),
        audit=audit,
        notifier=notifier,
        page_size=app_settings.conversation_page_size,
        max_page_size=app_settings.conversation_page_max,
    )
    messages = MessageService(
        conversation_service=conversations,
        conv_repo=ConversationRepository(session),
        msg_repo=MessageRepository(session),
        notifier=notifier,
        page_size=app_settings.message_page_size,
        max_page_size=app_settings.message_page_max,
        max_content_length=app_settings.message_max_length,
        unread_include_archived=app_settings.unread_include_archived,
    )
    moderation = ModerationService(
        ConversationRepository(session),
        audit=audit,
        notifier=notifier,
        page_size=app_settings.conversation_page_size,
        max_page_size=app_settings.conversation_page_max,
    )
    return Services(conversations=conversations, messages=messages, moderation=moderation, audit=audit)


@pytest.fixture
def services(database, notifier, app_settings):
    """Opens one unit of work: `with services() as svc: ...`."""

    @contextmanager
    def _open(settings_override: Settings | None = None):
        with database.session() as session:
            yield build_services(session, notifier, settings_override or app_settings)

    return _open


@pytest.fixture
def app(app_settings, database, notifier):
    flask_app = create_app(
        app_settings,
        database=database,
        conversation_notifier=notifier,
        message_notifier=notifier,
    )
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def settings_factory():
    return make_settings
