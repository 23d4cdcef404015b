# marketplace_chat/infrastructure/realtime/socketio_server.py
from __future__ import annotations

from flask_socketio import SocketIO

# configured per application in create_app (async mode, CORS, path)
socketio = SocketIO()


def conversation_room(conversation_id: str) -> str:
    return f"conversation:{conversation_id}"


def user_room(user_id: str) -> str:
    return f"user:{user_id}"
