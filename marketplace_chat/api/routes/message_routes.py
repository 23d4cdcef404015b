# marketplace_chat/api/routes/message_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify

from marketplace_chat.api.dependencies import build_message_service, db_session
from marketplace_chat.api.middlewares.auth_middleware import current_identity, require_auth, require_roles
from marketplace_chat.api.routes._params import json_body, query_cursor, query_limit
from marketplace_chat.api.schemas.message_schema import CreateMessageRequest, MessageResponse
from marketplace_chat.core.roles import Role
from marketplace_chat.repositories.directory_repository import DirectoryRepository

# mounted under .../conversations/<conversation_id>/messages
bp_msg = Blueprint("messages", __name__)


def _pack(msg) -> dict:
    return MessageResponse.model_validate(msg).model_dump(by_alias=True)


@bp_msg.get("")
@require_auth
@require_roles(Role.BUYER, Role.VENDOR, message="Admins should use the admin messaging endpoints")
def list_messages(conversation_id: str):
    identity = current_identity()

    with db_session() as session:
        page = build_message_service(session).list_messages(
            conversation_id=conversation_id,
            user_id=identity.user_id,
            role=identity.role,
            limit=query_limit(),
            cursor=query_cursor(),
        )
        payload = {"messages": [_pack(m) for m in page.items], "nextCursor": page.next_cursor}

    return jsonify(payload), 200


@bp_msg.post("")
@require_auth
@require_roles(Role.BUYER, Role.VENDOR, message="Admins should use the admin messaging endpoints")
def create_message(conversation_id: str):
    identity = current_identity()
    body = CreateMessageRequest.model_validate(json_body())

    with db_session() as session:
        sender = DirectoryRepository(session).get_user(identity.user_id)

        msg = build_message_service(session).create_message(
            conversation_id=conversation_id,
            sender_id=identity.user_id,
            sender_role=identity.role,
            sender_name=sender.name if sender else "User",
            sender_avatar=sender.avatar if sender else None,
            content=body.content,
            message_type=body.message_type,
            attachment_url=body.attachment_url,
            attachment_name=body.attachment_name,
        )
        payload = {"message": _pack(msg)}

    return jsonify(payload), 201
