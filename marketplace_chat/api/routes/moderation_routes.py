# marketplace_chat/api/routes/moderation_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify

from marketplace_chat.api.dependencies import build_moderation_service, db_session
from marketplace_chat.api.middlewares.auth_middleware import current_identity, require_auth, require_roles
from marketplace_chat.api.routes._params import json_body, query_cursor, query_limit
from marketplace_chat.api.schemas.conversation_schema import AdminConversationResponse
from marketplace_chat.api.schemas.moderation_schema import (
    AuditLogResponse,
    CloseRequest,
    FlagRequest,
    UnflagRequest,
)
from marketplace_chat.core.roles import Role

bp_moderation = Blueprint("moderation", __name__)

ADMIN_ONLY = "Admin access required"


def _pack(conv) -> dict:
    return AdminConversationResponse.model_validate(conv).model_dump(by_alias=True)


@bp_moderation.get("/flagged")
@require_auth
@require_roles(Role.ADMIN, message=ADMIN_ONLY)
def list_flagged():
    identity = current_identity()

    with db_session() as session:
        page = build_moderation_service(session).list_flagged(
            role=identity.role, limit=query_limit(), cursor=query_cursor()
        )
        payload = {"conversations": [_pack(c) for c in page.items], "nextCursor": page.next_cursor}

    return jsonify(payload), 200


@bp_moderation.post("/conversations/<conversation_id>/flag")
@require_auth
@require_roles(Role.ADMIN, message=ADMIN_ONLY)
def flag_conversation(conversation_id: str):
    identity = current_identity()
    body = FlagRequest.model_validate(json_body())

    with db_session() as session:
        conv = build_moderation_service(session).flag(
            conversation_id=conversation_id, admin_id=identity.user_id, role=identity.role, reason=body.reason
        )
        payload = {"conversation": _pack(conv)}

    return jsonify(payload), 200


@bp_moderation.post("/conversations/<conversation_id>/unflag")
@require_auth
@require_roles(Role.ADMIN, message=ADMIN_ONLY)
def unflag_conversation(conversation_id: str):
    identity = current_identity()
    body = UnflagRequest.model_validate(json_body())

    with db_session() as session:
        conv = build_moderation_service(session).unflag(
            conversation_id=conversation_id, admin_id=identity.user_id, role=identity.role, notes=body.notes
        )
        payload = {"conversation": _pack(conv)}

    return jsonify(payload), 200


@bp_moderation.post("/conversations/<conversation_id>/close")
@require_auth
@require_roles(Role.ADMIN, message=ADMIN_ONLY)
def close_conversation(conversation_id: str):
    identity = current_identity()
    body = CloseRequest.model_validate(json_body())

    with db_session() as session:
        conv = build_moderation_service(session).close(
            conversation_id=conversation_id, admin_id=identity.user_id, role=identity.role, notes=body.notes
        )
        payload = {"conversation": _pack(conv)}

    return jsonify(payload), 200


@bp_moderation.get("/conversations/<conversation_id>/audit")
@require_auth
@require_roles(Role.ADMIN, message=ADMIN_ONLY)
def conversation_audit(conversation_id: str):
    identity = current_identity()
    limit = max(1, min(query_limit() or 100, 500))

    with db_session() as session:
        logs = build_moderation_service(session).audit_trail(
            conversation_id=conversation_id, role=identity.role, limit=limit
        )
        payload = {"logs": [AuditLogResponse.model_validate(log).model_dump(by_alias=True) for log in logs]}

    return jsonify(payload), 200
