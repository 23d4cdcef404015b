# marketplace_chat/api/routes/conversation_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify

from marketplace_chat.api.dependencies import build_conversation_service, build_message_service, db_session
from marketplace_chat.api.middlewares.auth_middleware import current_identity, require_auth, require_roles
from marketplace_chat.api.routes._params import json_body, query_cursor, query_limit, query_status
from marketplace_chat.api.schemas.conversation_schema import (
    ConversationResponse,
    CreateConversationRequest,
    UpdateConversationRequest,
)
from marketplace_chat.core.roles import Role

bp_conv = Blueprint("conversations", __name__)

PARTICIPANT_ONLY = "Admins should use the admin messaging endpoints"


def _pack(conv) -> dict:
    return ConversationResponse.model_validate(conv).model_dump(by_alias=True)


# -------------------------
# Queries
# -------------------------

@bp_conv.get("")
@require_auth
@require_roles(Role.BUYER, Role.VENDOR, message=PARTICIPANT_ONLY)
def list_conversations():
    identity = current_identity()

    with db_session() as session:
        page = build_conversation_service(session).list_conversations(
            user_id=identity.user_id,
            role=identity.role,
            limit=query_limit(),
            cursor=query_cursor(),
            status=query_status(),
        )
        unread = build_message_service(session).get_unread_count(
            user_id=identity.user_id, role=identity.role
        )
        payload = {
            "conversations": [_pack(c) for c in page.items],
            "nextCursor": page.next_cursor,
            "unreadCount": unread,
        }

    return jsonify(payload), 200


@bp_conv.get("/<conversation_id>")
@require_auth
@require_roles(Role.BUYER, Role.VENDOR, message=PARTICIPANT_ONLY)
def get_conversation(conversation_id: str):
    identity = current_identity()

    with db_session() as session:
        conv = build_conversation_service(session).get_for_user(
            conversation_id=conversation_id, user_id=identity.user_id, role=identity.role
        )
        payload = {"conversation": _pack(conv)}

    return jsonify(payload), 200


# -------------------------
# Commands
# -------------------------

@bp_conv.post("")
@require_auth
@require_roles(Role.BUYER, message="Only buyers can initiate conversations")
def create_conversation():
    identity = current_identity()
    body = CreateConversationRequest.model_validate(json_body())

    with db_session() as session:
        conv = build_conversation_service(session).create_conversation(
            buyer_id=identity.user_id,
            role=identity.role,
            vendor_id=body.vendor_id,
            context=body.context,
            product_id=body.product_id,
            order_id=body.order_id,
        )
        payload = {"conversation": _pack(conv)}

    return jsonify(payload), 201


@bp_conv.patch("/<conversation_id>")
@require_auth
@require_roles(Role.BUYER, Role.VENDOR, message=PARTICIPANT_ONLY)
def update_conversation(conversation_id: str):
    identity = current_identity()
    body = UpdateConversationRequest.model_validate(json_body())

    with db_session() as session:
        service = build_conversation_service(session)

        if body.action == "archive":
            service.archive(conversation_id=conversation_id, user_id=identity.user_id, role=identity.role)
            return jsonify({"success": True}), 200

        conv = service.update_flags(
            conversation_id=conversation_id,
            user_id=identity.user_id,
            role=identity.role,
            is_pinned=body.is_pinned,
            is_muted=body.is_muted,
        )
        payload = {"conversation": _pack(conv)}

    return jsonify(payload), 200


@bp_conv.post("/<conversation_id>/read")
@require_auth
@require_roles(Role.BUYER, Role.VENDOR, message=PARTICIPANT_ONLY)
def mark_as_read(conversation_id: str):
    identity = current_identity()

    with db_session() as session:
        build_message_service(session).mark_conversation_as_read(
            conversation_id=conversation_id, user_id=identity.user_id, role=identity.role
        )

    return jsonify({"success": True}), 200
