# marketplace_chat/main.py
from __future__ import annotations

import logging

from flask import Flask
from flask_cors import CORS

from marketplace_chat.api.dependencies import EXTENSION_KEY, AppContainer
from marketplace_chat.api.middlewares.error_handler import register_error_handlers
from marketplace_chat.api.realtime.socket_handlers import register_socket_handlers
from marketplace_chat.api.routes import register_routes
from marketplace_chat.config.flask_config import configure_app
from marketplace_chat.config.logging_config import configure_logging
from marketplace_chat.config.settings import Settings
from marketplace_chat.core.interfaces.conversation_notifier import ConversationNotifier
from marketplace_chat.core.interfaces.message_notifier import MessageNotifier
from marketplace_chat.core.interfaces.session_validator import SessionValidator
from marketplace_chat.infrastructure.database.session import Database
from marketplace_chat.infrastructure.realtime.socketio_conversation_notifier import SocketIOConversationNotifier
from marketplace_chat.infrastructure.realtime.socketio_message_notifier import SocketIOMessageNotifier
from marketplace_chat.infrastructure.realtime.socketio_server import socketio
from marketplace_chat.infrastructure.security.db_session_validator import DbSessionValidator
from marketplace_chat.infrastructure.security.jwt_provider import JwtProvider
from marketplace_chat.infrastructure.security.jwt_session_validator import JwtSessionValidator

logger = logging.getLogger(__name__)


def _build_session_validator(app_settings: Settings, database: Database) -> SessionValidator:
    if app_settings.session_backend == "jwt":
        return JwtSessionValidator(JwtProvider(app_settings))
    return DbSessionValidator(database)


def create_app(
    app_settings: Settings | None = None,
    *,
    database: Database | None = None,
    session_validator: SessionValidator | None = None,
    conversation_notifier: ConversationNotifier | None = None,
    message_notifier: MessageNotifier | None = None,
) -> Flask:
    app_settings = app_settings or Settings()
    configure_logging(app_settings.log_level)

    app = Flask(__name__)

    # CORS early, before routes answer OPTIONS
    CORS(
        app,
        resources={rf"{app_settings.api_prefix}/*": {"origins": app_settings.cors_origins}},
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PATCH", "OPTIONS"],
        supports_credentials=True,
    )

    configure_app(app, app_settings)

    database = database or Database.from_settings(app_settings)
    app.extensions[EXTENSION_KEY] = AppContainer(
        settings=app_settings,
        database=database,
        session_validator=session_validator or _build_session_validator(app_settings, database),
        conversation_notifier=conversation_notifier or SocketIOConversationNotifier(),
        message_notifier=message_notifier or SocketIOMessageNotifier(),
    )

    app_prefix = app_settings.app_prefix.rstrip("/")
    register_routes(app, api_prefix=app_settings.api_prefix, app_prefix=app_prefix)
    register_error_handlers(app)

    # Socket.IO under the app prefix
    socketio.init_app(
        app,
        path=f"{app_prefix}/socket.io",
        async_mode=app_settings.socketio_async_mode,
        cors_allowed_origins=app_settings.cors_origins,
    )
    register_socket_handlers()

    logger.info(
        "Messaging API ready env=%s api_prefix=%s session_backend=%s",
        app_settings.environment, app_settings.api_prefix, app_settings.session_backend,
    )
    return app
