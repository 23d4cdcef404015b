# marketplace_chat/api/realtime/socket_handlers.py
from __future__ import annotations

import logging

from flask import request
from flask_socketio import disconnect, emit, join_room, leave_room

from marketplace_chat.api.dependencies import build_conversation_service, db_session, get_container
from marketplace_chat.core.exceptions import AppError
from marketplace_chat.entities.session_identity import SessionIdentity
from marketplace_chat.infrastructure.realtime.socketio_server import conversation_room, socketio, user_room

logger = logging.getLogger(__name__)

IDENTITY_KEY = "marketplace_chat.identity"


def _get_session_token(auth: dict | None) -> str | None:
    # 1) socket.io auth payload {"token": ...}
    if isinstance(auth, dict) and auth.get("token"):
        return str(auth["token"]).strip()

    # 2) Authorization: Bearer <token>
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header.split(" ", 1)[1].strip()

    # 3) session cookie
    return request.cookies.get(get_container().settings.session_cookie_name)


def _identity() -> SessionIdentity | None:
    return request.environ.get(IDENTITY_KEY)


def _conversation_id(data) -> str | None:
    if not isinstance(data, dict):
        return None
    raw = data.get("conversation_id") or data.get("conversationId")
    return str(raw) if raw else None


def register_socket_handlers() -> None:
    @socketio.on("connect")
    def on_connect(auth=None):
        token = _get_session_token(auth)
        if not token:
            return False

        try:
            identity = get_container().session_validator.validate(token)
        except AppError as e:
            logger.warning("Socket connection rejected: %s", e)
            return False

        request.environ[IDENTITY_KEY] = identity
        join_room(user_room(identity.user_id))

    @socketio.on("conversation:join")
    def on_join(data):
        identity = _identity()
        if identity is None:
            return disconnect()

        conversation_id = _conversation_id(data)
        if not conversation_id:
            emit("conversation:error", {"error": "conversation_id is required"})
            return

        try:
            with db_session() as session:
                build_conversation_service(session).get_for_user(
                    conversation_id=conversation_id, user_id=identity.user_id, role=identity.role
                )
        except AppError as e:
            emit("conversation:error", {"conversation_id": conversation_id, "error": str(e)})
            return

        join_room(conversation_room(conversation_id))
        emit("conversation:joined", {"conversation_id": conversation_id})

    @socketio.on("conversation:leave")
    def on_leave(data):
        conversation_id = _conversation_id(data)
        if not conversation_id:
            return
        leave_room(conversation_room(conversation_id))
        emit("conversation:left", {"conversation_id": conversation_id})
