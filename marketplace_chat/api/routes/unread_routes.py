# marketplace_chat/api/routes/unread_routes.py
from flask import Blueprint, jsonify

from marketplace_chat.api.dependencies import build_message_service, db_session
from marketplace_chat.api.middlewares.auth_middleware import current_identity, require_auth

bp_unread = Blueprint("unread", __name__)


@bp_unread.get("")
@require_auth
def get_unread_count():
    identity = current_identity()

    with db_session() as session:
        count = build_message_service(session).get_unread_count(
            user_id=identity.user_id, role=identity.role
        )

    return jsonify({"unreadCount": count}), 200
